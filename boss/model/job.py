"""
잡 엔티티 모델 정의
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class JobStatus(str, Enum):
    """잡 상태 (boss는 PENDING/RUNNING/CANCELLED만 해석)"""
    PENDING = "pending"
    RUNNING = "running"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    FAILED = "failed"


class Job(BaseModel):
    """jobs 테이블 엔티티"""
    id: int | None = None
    path: str
    job_type: str
    params: str | None = None
    status: JobStatus = JobStatus.PENDING
    employee_pid: int | None = None
    redo_count: int = 0
    result: str | None = None
    error_message: str | None = None
    created_at: datetime | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None
    cancelled_at: datetime | None = None

    @classmethod
    def from_row(cls, row) -> "Job":
        # sqlite3.Row는 dict 변환 후 사용
        return cls(**dict(row))

    def is_cancelled(self) -> bool:
        return self.status == JobStatus.CANCELLED
