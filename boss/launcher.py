"""
ProcessLauncher: employee 프로세스 기동

잡을 RUNNING으로 claim한 뒤 `python -m worker.employee` 를 별도 세션으로 실행하고
employee_pid를 기록합니다. 터미널의 Ctrl-C는 boss만 받고, employee 종료는 boss가
SIGHUP으로 처리합니다.
"""

import asyncio
import logging
import sys

from database import DatabaseError
from boss.exception import EmployeeLaunchError
from boss.model import BossConfig, Job
from boss.store import JobStore

logger = logging.getLogger(__name__)


class ProcessLauncher:
    """employee 프로세스 런처"""

    def __init__(self, config: BossConfig, store: JobStore):
        self._config = config
        self._store = store
        # asyncio가 종료된 자식 프로세스를 회수하도록 핸들 유지
        self._processes: dict[int, asyncio.subprocess.Process] = {}

    def command(self, job: Job) -> list[str]:
        """employee 실행 커맨드"""
        cmd = [
            sys.executable, "-m", "worker.employee",
            "--database-yaml", str(self._config.database_yaml_file),
            "--environment", self._config.environment,
            "--jobs-path", str(self._config.jobs_dir),
            "--working-dir", str(self._config.working_dir),
            "--log-level", self._config.logging.level,
        ]
        if self._config.logging.json_format:
            cmd.append("--log-json")
        cmd.append(job.path)
        return cmd

    async def dispatch(self, job: Job) -> int | None:
        """
        잡 실행

        프로세스가 떴으면 pid 기록 실패와 관계없이 pid를 반환합니다.
        반환된 pid가 RunningSet에 들어가야 cleanup/shutdown 대상이 됩니다.

        Returns:
            employee pid (이미 다른 곳에서 claim된 잡이면 None)

        Raises:
            EmployeeLaunchError: 프로세스 기동 실패 (잡은 FAILED로 기록됨)
        """
        self._reap()

        if not await self._store.claim(job.path):
            logger.debug(f"Job already claimed, skipping: path={job.path}")
            return None

        try:
            process = await asyncio.create_subprocess_exec(
                *self.command(job),
                cwd=str(self._config.working_dir),
                start_new_session=True,
            )
        except OSError as e:
            try:
                await self._store.fail(job.path, f"Failed to launch employee: {e}")
            except DatabaseError as db_error:
                logger.error(f"Failed to record launch failure: path={job.path}, error={db_error}")
            raise EmployeeLaunchError(job.path, str(e)) from e

        self._processes[process.pid] = process
        try:
            await self._store.set_employee_pid(job.path, process.pid)
        except DatabaseError as e:
            logger.warning(f"Failed to record employee pid: path={job.path}, pid={process.pid}, error={e}")
        return process.pid

    def _reap(self) -> None:
        """종료된 프로세스 핸들 정리"""
        finished = [pid for pid, proc in self._processes.items() if proc.returncode is not None]
        for pid in finished:
            proc = self._processes.pop(pid)
            logger.debug(f"Employee exited: pid={pid}, returncode={proc.returncode}")
