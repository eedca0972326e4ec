"""
ShutdownCoordinator: boss 종료 처리

종료 시그널 또는 프로세스 종료 시 한 번만 실행됩니다.
남아있는 employee를 모두 종료하고 잡을 다시 PENDING으로 돌립니다.
"""

import atexit
import logging
import os
from typing import Callable

from boss.cleanup import CleanupEngine
from boss.running import RunningSet
from boss.store import JobStore
from boss.supervisor import ProcessSupervisor

logger = logging.getLogger(__name__)


class ShutdownCoordinator:
    """종료 프로토콜 (idempotent)"""

    def __init__(
        self,
        store: JobStore,
        running: RunningSet,
        cleanup: CleanupEngine,
        supervisor: ProcessSupervisor,
    ):
        self._store = store
        self._running = running
        self._cleanup = cleanup
        self._supervisor = supervisor
        self._started = False
        self._completed = False
        self._stopped_count = 0

    async def shutdown(self) -> int:
        """
        실행 중인 employee 종료 및 redo 마킹

        Returns:
            종료한 employee 수 (두 번째 호출부터는 첫 호출 결과)
        """
        if self._started:
            return self._stopped_count
        self._started = True

        logger.info(f"Stopping {len(self._running)} running employees...")

        try:
            await self._cleanup.cleanup()
        except Exception as e:
            # 정리 실패 시 현재 추적 중인 목록 그대로 종료
            logger.error(f"Cleanup before shutdown failed: {e}", exc_info=True)

        for path, pid in self._running.items():
            self._supervisor.terminate(pid)
            try:
                redone = await self._store.mark_for_redo(path)
            except Exception as e:
                logger.error(f"Failed to mark job for redo: path={path}, error={e}")
            else:
                logger.info(f"Marked job for redo: path={path}, pid={pid}, updated={redone}")
            self._running.remove(path)
            self._stopped_count += 1

        self._completed = True
        logger.info(f"Job Boss stopped ({self._stopped_count} employees stopped)")
        return self._stopped_count

    @property
    def started(self) -> bool:
        return self._started

    @property
    def completed(self) -> bool:
        return self._completed

    @property
    def stopped_count(self) -> int:
        return self._stopped_count


class ExitGuard:
    """
    프로세스 종료 훅

    boss 기동 시 기록한 pid와 현재 pid가 같을 때만 teardown을 실행합니다.
    (fork로 훅을 물려받은 자식 프로세스에서는 아무것도 하지 않음)
    """

    def __init__(self, teardown: Callable[[], None], boss_pid: int | None = None):
        self._teardown = teardown
        self._boss_pid = boss_pid if boss_pid is not None else os.getpid()

    @property
    def boss_pid(self) -> int:
        return self._boss_pid

    def __call__(self) -> bool:
        if os.getpid() != self._boss_pid:
            return False
        self._teardown()
        return True

    def install(self) -> "ExitGuard":
        atexit.register(self)
        return self

    def uninstall(self) -> None:
        atexit.unregister(self)
