"""Boss 모듈 - 잡 디스패치 스케줄러"""

from boss.main import Boss
from boss.cleanup import CleanupEngine
from boss.launcher import ProcessLauncher
from boss.model import BossConfig, LoggingConfig, Job, JobStatus
from boss.running import RunningSet
from boss.shutdown import ShutdownCoordinator, ExitGuard
from boss.store import JobStore
from boss.supervisor import ProcessSupervisor
from boss.exception import (
    BossError,
    StartupError,
    StoreDescriptorError,
    JobsPathError,
    EmployeeLaunchError,
    DuplicateJobError,
    JobNotFoundError,
    JobStatusError,
)

__all__ = [
    "Boss",
    "BossConfig",
    "LoggingConfig",
    "CleanupEngine",
    "ProcessLauncher",
    "ProcessSupervisor",
    "RunningSet",
    "ShutdownCoordinator",
    "ExitGuard",
    "JobStore",
    "Job",
    "JobStatus",
    "BossError",
    "StartupError",
    "StoreDescriptorError",
    "JobsPathError",
    "EmployeeLaunchError",
    "DuplicateJobError",
    "JobNotFoundError",
    "JobStatusError",
]
