"""
JobStore: jobs 테이블 접근 계층

boss 루프, launcher, employee, queuer가 모두 이 클래스를 통해 잡 상태를 읽고 씁니다.
모든 메서드는 호출마다 새 트랜잭션을 열어 DB에서 직접 읽습니다 (캐시 없음).
"""

import logging
from pathlib import Path

import aiosql

from database import get_connection, transactional, transactional_readonly
from boss.model.job import Job, JobStatus

logger = logging.getLogger(__name__)

_SQL_DIR = Path(__file__).parent / "sql"


class JobStore:
    """jobs 테이블 저장소"""

    def __init__(self):
        self._queries = aiosql.from_path(str(_SQL_DIR / "boss.sql"), "aiosqlite")
        self._migrations = aiosql.from_path(str(_SQL_DIR / "migrate.sql"), "aiosqlite")

    # ------------------------------------------------------------
    # 스키마
    # ------------------------------------------------------------

    @transactional_readonly
    async def table_exists(self) -> bool:
        ctx = get_connection()
        return bool(await self._migrations.table_exists(ctx.connection))

    @transactional
    async def migrate(self) -> None:
        """jobs 테이블 생성"""
        ctx = get_connection()
        await self._migrations.create_jobs_table(ctx.connection)
        await self._migrations.create_jobs_status_index(ctx.connection)
        logger.info("Created jobs table")

    # ------------------------------------------------------------
    # 스케줄러 조회
    # ------------------------------------------------------------

    @transactional_readonly
    async def count_pending(self) -> int:
        ctx = get_connection()
        return await self._queries.count_pending(ctx.connection) or 0

    @transactional_readonly
    async def list_pending_paths(self) -> list[str]:
        """PENDING 잡의 path 목록 (삽입 순서)"""
        ctx = get_connection()
        rows = await self._queries.list_pending_paths(ctx.connection)
        return [row["path"] for row in rows]

    @transactional_readonly
    async def find_pending(self, path: str) -> Job | None:
        ctx = get_connection()
        row = await self._queries.find_pending(ctx.connection, path=path)
        return Job.from_row(row) if row else None

    @transactional_readonly
    async def find_by_path(self, path: str) -> Job | None:
        ctx = get_connection()
        row = await self._queries.find_by_path(ctx.connection, path=path)
        return Job.from_row(row) if row else None

    @transactional_readonly
    async def find_running(self, paths: list[str]) -> list[Job]:
        """
        주어진 path 중 아직 실행 중(취소 요청 포함)인 잡 조회

        Args:
            paths: Running Set에 있는 잡 path 목록

        Returns:
            status가 running 또는 cancelled인 잡 (id 순)
        """
        if not paths:
            return []
        wanted = set(paths)
        ctx = get_connection()
        rows = await self._queries.get_live_jobs(ctx.connection)
        return [Job.from_row(row) for row in rows if row["path"] in wanted]

    @transactional_readonly
    async def list_jobs(self, status: JobStatus | None = None) -> list[Job]:
        ctx = get_connection()
        if status is None:
            rows = await self._queries.list_jobs(ctx.connection)
        else:
            rows = await self._queries.list_jobs_by_status(ctx.connection, status=status.value)
        return [Job.from_row(row) for row in rows]

    # ------------------------------------------------------------
    # 상태 변경
    # ------------------------------------------------------------

    @transactional
    async def insert(self, path: str, job_type: str, params: str | None) -> Job:
        ctx = get_connection()
        await self._queries.insert_job(ctx.connection, path=path, job_type=job_type, params=params)
        row = await self._queries.find_by_path(ctx.connection, path=path)
        return Job.from_row(row)

    @transactional
    async def claim(self, path: str) -> bool:
        """PENDING -> RUNNING (이미 다른 곳에서 가져갔으면 False)"""
        ctx = get_connection()
        affected_rows = await self._queries.claim_job(ctx.connection, path=path)
        return affected_rows > 0

    @transactional
    async def set_employee_pid(self, path: str, employee_pid: int) -> None:
        ctx = get_connection()
        await self._queries.set_employee_pid(ctx.connection, path=path, employee_pid=employee_pid)

    @transactional
    async def complete(self, path: str, result: str | None) -> bool:
        ctx = get_connection()
        return await self._queries.complete_job(ctx.connection, path=path, result=result) > 0

    @transactional
    async def fail(self, path: str, error_message: str) -> bool:
        ctx = get_connection()
        return await self._queries.fail_job(ctx.connection, path=path, error_message=error_message) > 0

    @transactional
    async def cancel(self, path: str) -> bool:
        ctx = get_connection()
        return await self._queries.cancel_job(ctx.connection, path=path) > 0

    @transactional
    async def mark_for_redo(self, path: str) -> bool:
        """
        중단된 잡을 다시 PENDING으로

        RUNNING 상태인 경우에만 변경되므로 그 사이 완료/취소된 잡은 건드리지 않습니다.
        """
        ctx = get_connection()
        return await self._queries.mark_for_redo(ctx.connection, path=path) > 0

    @transactional
    async def requeue(self, path: str) -> bool:
        ctx = get_connection()
        return await self._queries.requeue_job(ctx.connection, path=path) > 0
