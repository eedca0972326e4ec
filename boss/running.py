"""
RunningSet: 디스패치된 잡 path -> employee pid 캐시

boss 프로세스 메모리에만 존재하며 저장되지 않습니다.
정답은 항상 jobs 테이블이고, CleanupEngine이 매 사이클 다시 맞춥니다.
"""

from typing import Iterable, Iterator


class RunningSet:
    """디스패치 순서를 유지하는 path -> pid 맵"""

    def __init__(self):
        self._entries: dict[str, int] = {}

    def add(self, path: str, pid: int) -> None:
        self._entries[path] = pid

    def remove(self, path: str) -> int | None:
        return self._entries.pop(path, None)

    def pid_for(self, path: str) -> int | None:
        return self._entries.get(path)

    def paths(self) -> list[str]:
        return list(self._entries)

    def items(self) -> list[tuple[str, int]]:
        return list(self._entries.items())

    def retain(self, paths: Iterable[str]) -> list[str]:
        """주어진 path만 남기고 나머지 제거, 제거된 path 반환"""
        keep = set(paths)
        dropped = [path for path in self._entries if path not in keep]
        for path in dropped:
            del self._entries[path]
        return dropped

    def snapshot(self) -> dict[str, int]:
        return dict(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __repr__(self) -> str:
        return f"RunningSet({self._entries!r})"
