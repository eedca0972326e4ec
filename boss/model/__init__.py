"""Boss 모델"""

from boss.model.boss import BossConfig, LoggingConfig
from boss.model.job import Job, JobStatus

__all__ = ["BossConfig", "LoggingConfig", "Job", "JobStatus"]
