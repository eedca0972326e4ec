"""
Boss: employee 디스패치 스케줄러

jobs 테이블에서 PENDING 상태의 잡을 폴링하여 employee_limit 이내에서
employee 프로세스로 디스패치합니다.

실행 방법:
    python -m boss.main
    python main.py
"""

import asyncio
import logging

from database import (
    ConnectionPoolExhaustedError,
    TransactionError,
    QueryExecutionError,
)
from boss.cleanup import CleanupEngine
from boss.exception import EmployeeLaunchError
from boss.launcher import ProcessLauncher
from boss.model import BossConfig
from boss.running import RunningSet
from boss.shutdown import ShutdownCoordinator
from boss.store import JobStore
from boss.supervisor import ProcessSupervisor

logger = logging.getLogger(__name__)


class Boss:
    """
    잡 스케줄러

    한 이터레이션:
    1. CleanupEngine으로 RunningSet 정리 후 가용 employee 수 계산
    2. 가용 수가 없거나 PENDING 잡이 없으면 sleep_interval 대기
    3. PENDING 잡을 삽입 순서대로 가용 수만큼 디스패치

    stop() 호출 시 루프를 빠져나와 ShutdownCoordinator를 실행합니다.
    """

    def __init__(
        self,
        config: BossConfig,
        store: JobStore,
        launcher: ProcessLauncher | None = None,
        supervisor: ProcessSupervisor | None = None,
    ):
        self._config = config
        self._store = store
        self._launcher = launcher or ProcessLauncher(config, store)
        self._supervisor = supervisor or ProcessSupervisor()
        self._running_set = RunningSet()
        self._cleanup = CleanupEngine(store, self._running_set, self._supervisor)
        self._shutdown = ShutdownCoordinator(store, self._running_set, self._cleanup, self._supervisor)
        self._running = False
        self._stop_event: asyncio.Event | None = None

    async def start(self) -> int:
        """
        메인 루프 시작

        Returns:
            종료 시 정리한 employee 수
        """
        if self._running:
            logger.warning("Boss is already running")
            return 0

        self._running = True
        self._stop_event = asyncio.Event()

        logger.info(
            f"Job Boss started (employee_limit={self._config.employee_limit}, "
            f"sleep_interval={self._config.sleep_interval}s, environment={self._config.environment})"
        )

        try:
            await self._main_loop()
        except asyncio.CancelledError:
            logger.info("Boss cancelled")
        finally:
            self._running = False
            stopped = await self.shutdown()
        return stopped

    async def stop(self) -> None:
        """루프 종료 요청"""
        self.request_stop()

    def request_stop(self) -> None:
        """루프 종료 요청 (동기 버전, 시그널 핸들러에서 호출)"""
        if not self._running:
            return

        logger.info("Stopping Job Boss...")
        self._running = False
        if self._stop_event:
            self._stop_event.set()

    async def shutdown(self) -> int:
        """employee 종료 + redo 마킹 (한 번만 실행)"""
        return await self._shutdown.shutdown()

    async def _main_loop(self) -> None:
        while self._running:
            dispatched = 0
            try:
                dispatched = await self.run_iteration()

            except ConnectionPoolExhaustedError as e:
                logger.warning(f"Connection pool exhausted: {e}. Retrying...")

            except (TransactionError, QueryExecutionError) as e:
                logger.error(f"Database error: {e}. Continuing...")

            except Exception as e:
                # 잡 하나의 이상 상태로 루프가 죽지 않도록 격리
                logger.error(f"Unexpected error in main loop: {e}", exc_info=True)

            if not dispatched:
                await self._sleep(self._config.sleep_interval)

    async def run_iteration(self) -> int:
        """
        정리 후 가용 employee 수만큼 디스패치

        Returns:
            이번 이터레이션에서 디스패치한 잡 수
        """
        available = await self._cleanup.available_employees(self._config.employee_limit)
        if available <= 0:
            logger.debug(f"No available employees ({len(self._running_set)} running)")
            return 0

        if await self._store.count_pending() == 0:
            logger.debug("No pending jobs found")
            return 0

        dispatched = 0
        for path in await self._store.list_pending_paths():
            job = await self._store.find_pending(path)
            if job is None:
                logger.debug(f"Pending job vanished before dispatch: path={path}")
                continue

            try:
                pid = await self._launcher.dispatch(job)
            except EmployeeLaunchError as e:
                logger.error(str(e))
                continue

            if pid is None:
                continue

            self._running_set.add(job.path, pid)
            dispatched += 1
            available -= 1
            logger.info(f"Dispatched job: path={job.path}, job_type={job.job_type}, pid={pid}")

            if available <= 0 or self._stop_requested():
                break

        return dispatched

    def _stop_requested(self) -> bool:
        return self._stop_event is not None and self._stop_event.is_set()

    async def _sleep(self, seconds: float) -> None:
        """인터럽트 가능한 sleep"""
        if self._stop_event:
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=seconds)
            except asyncio.TimeoutError:
                pass

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def running_set(self) -> RunningSet:
        return self._running_set

    @property
    def shutdown_coordinator(self) -> ShutdownCoordinator:
        return self._shutdown

    @property
    def config(self) -> BossConfig:
        return self._config


if __name__ == "__main__":
    import sys

    from boss.bootstrap import main

    sys.exit(main())
