"""
Queuer: 잡 등록/취소

사용 예시:
    queuer = Queuer(JobStore())
    job = await queuer.enqueue("math.is_prime", {"number": 42})
    await queuer.cancel(job.path)
"""

import json
import logging
import uuid
from typing import Any

from database import transactional
from boss.exception import DuplicateJobError, JobNotFoundError, JobStatusError
from boss.model import Job, JobStatus
from boss.store import JobStore
from worker.base import get_job_type

logger = logging.getLogger(__name__)


class Queuer:
    """잡 큐 등록기"""

    def __init__(self, store: JobStore):
        self._store = store

    @transactional
    async def enqueue(self, job_type: str, params: dict[str, Any] | None = None, path: str | None = None) -> Job:
        """
        PENDING 잡 등록

        Args:
            job_type: 등록된 잡 타입 이름
            params: 잡 파라미터 (잡 타입의 params_model로 검증)
            path: 잡 식별자 (없으면 "<job_type>/<uuid>")

        Raises:
            JobTypeNotFoundError: 등록되지 않은 잡 타입
            ValidationError: 파라미터 검증 실패
            DuplicateJobError: 같은 path의 잡이 이미 존재
        """
        job_cls = get_job_type(job_type)
        validated = job_cls.params_model.model_validate(params or {})

        path = path or f"{job_type}/{uuid.uuid4().hex}"
        if await self._store.find_by_path(path) is not None:
            raise DuplicateJobError(path)

        job = await self._store.insert(path, job_type, json.dumps(validated.model_dump(mode="json")))
        logger.info(f"Queued job: path={job.path}, job_type={job_type}")
        return job

    @transactional
    async def cancel(self, path: str) -> Job:
        """
        잡 취소 요청

        실행 중인 잡은 boss의 다음 정리 주기에 종료됩니다.
        """
        job = await self._store.find_by_path(path)
        if job is None:
            raise JobNotFoundError(path)
        if not await self._store.cancel(path):
            raise JobStatusError(path, job.status.value, "cancel")
        logger.info(f"Cancelled job: path={path}, was={job.status.value}")
        return await self._store.find_by_path(path)

    @transactional
    async def redo(self, path: str) -> Job:
        """실패/취소된 잡을 다시 PENDING으로"""
        job = await self._store.find_by_path(path)
        if job is None:
            raise JobNotFoundError(path)
        if not await self._store.requeue(path):
            raise JobStatusError(path, job.status.value, "redo")
        logger.info(f"Requeued job: path={path}")
        return await self._store.find_by_path(path)

    async def list_jobs(self, status: JobStatus | None = None) -> list[Job]:
        return await self._store.list_jobs(status)
