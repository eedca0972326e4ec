"""
CleanupEngine: RunningSet 정리

jobs 테이블과 OS 프로세스 테이블을 기준으로 RunningSet을 다시 맞춥니다.
완료/삭제된 잡, 취소된 잡, 프로세스가 사라진 잡을 제거합니다.
"""

import logging

from boss.running import RunningSet
from boss.store import JobStore
from boss.supervisor import ProcessSupervisor

logger = logging.getLogger(__name__)


class CleanupEngine:
    """RunningSet 재조정 (여러 번 호출해도 결과 동일)"""

    def __init__(self, store: JobStore, running: RunningSet, supervisor: ProcessSupervisor):
        self._store = store
        self._running = running
        self._supervisor = supervisor

    async def cleanup(self) -> RunningSet:
        """
        RunningSet 정리

        1. DB에서 아직 실행 중인 잡만 남김
        2. 취소된 잡은 employee 종료 후 제거
        3. 프로세스가 없는 잡은 조용히 제거 (상태 변경 없음)
        """
        if not self._running:
            return self._running

        jobs = await self._store.find_running(self._running.paths())

        dropped = self._running.retain(job.path for job in jobs)
        for path in dropped:
            logger.debug(f"Job no longer running, untracked: path={path}")

        for job in jobs:
            if not job.is_cancelled():
                continue
            pid = self._running.remove(job.path)
            self._supervisor.terminate(pid)
            logger.info(f"Killed cancelled job: path={job.path}, pid={pid}")

        for path, pid in self._running.items():
            if not self._supervisor.is_alive(pid):
                self._running.remove(path)
                # TODO: 상태가 running으로 남음. redo 여부는 아직 미정
                logger.warning(f"Employee went missing, untracked without redo: path={path}, pid={pid}")

        return self._running

    async def available_employees(self, employee_limit: int) -> int:
        """정리 후 추가로 실행 가능한 employee 수"""
        await self.cleanup()
        return employee_limit - len(self._running)
