"""
Employee: 잡 하나를 실행하는 프로세스

boss의 ProcessLauncher가 잡마다 별도 프로세스로 실행합니다.
잡 상태가 RUNNING인 경우에만 실행하고, 결과를 completed/failed로 기록합니다.
SIGHUP을 받으면 실행을 취소하고 상태를 기록하지 않은 채 종료합니다
(취소/redo 상태는 boss가 기록).

실행 방법:
    python -m worker.employee --database-yaml config/database.yaml \
        --environment development --jobs-path worker/job <job path>
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from boss.bootstrap import load_store_descriptor
from boss.model import JobStatus
from boss.store import JobStore
from boss.supervisor import TERMINATE_SIGNAL
from common.logging import setup_logging
from database.registry import DatabaseRegistry
from worker.base import get_job_type, load_job_types
from worker.exception import JobTypeNotFoundError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_NOT_RUNNING = 2
EXIT_TERMINATED = 128 + int(TERMINATE_SIGNAL)


class Employee:
    """잡 실행기"""

    def __init__(self, store: JobStore):
        self._store = store

    async def work(self, path: str) -> int:
        """
        잡 실행

        Returns:
            프로세스 종료 코드
        """
        job = await self._store.find_by_path(path)
        if job is None or job.status != JobStatus.RUNNING:
            status = job.status.value if job else "missing"
            logger.warning(f"Job is not running, nothing to do: path={path}, status={status}")
            return EXIT_NOT_RUNNING

        try:
            job_cls = get_job_type(job.job_type)
            params = job_cls.params_model.model_validate(json.loads(job.params or "{}"))
        except JobTypeNotFoundError as e:
            logger.error(str(e))
            await self._store.fail(path, str(e))
            return EXIT_FAILED
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Invalid params for job {path}: {e}")
            await self._store.fail(path, f"Invalid params: {e}")
            return EXIT_FAILED

        logger.info(f"Starting job: path={path}, job_type={job.job_type}")

        loop = asyncio.get_running_loop()
        task = asyncio.create_task(job_cls().run(params))
        loop.add_signal_handler(TERMINATE_SIGNAL, task.cancel)
        try:
            result = await task
        except asyncio.CancelledError:
            logger.info(f"Job stopped by boss: path={path}")
            return EXIT_TERMINATED
        except Exception as e:
            logger.error(f"Job failed: path={path}, error={e}", exc_info=True)
            await self._store.fail(path, str(e) or type(e).__name__)
            return EXIT_FAILED
        finally:
            loop.remove_signal_handler(TERMINATE_SIGNAL)

        result_str = result.model_dump_json() if result is not None else None
        if not await self._store.complete(path, result_str):
            logger.warning(f"Job finished but is no longer running: path={path}")
        else:
            logger.info(f"Job completed: path={path}")
        return EXIT_OK


async def run_employee(
    path: str,
    database_yaml: Path,
    environment: str,
    jobs_path: Path,
    working_dir: Path,
) -> int:
    """DB 연결 및 잡 타입 로드 후 잡 실행"""
    descriptor = load_store_descriptor(database_yaml, environment, working_dir)
    await DatabaseRegistry.init_from_config(descriptor, [environment])
    try:
        load_job_types(jobs_path)
        return await Employee(JobStore()).work(path)
    finally:
        await DatabaseRegistry.close_all()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="jobboss-employee", description="Run one dispatched job")
    parser.add_argument("path", help="Job path")
    parser.add_argument("--database-yaml", required=True, type=Path)
    parser.add_argument("--environment", required=True)
    parser.add_argument("--jobs-path", required=True, type=Path)
    parser.add_argument("--working-dir", default=Path.cwd(), type=Path)
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--log-json", action="store_true")
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, json_format=args.log_json)

    return asyncio.run(run_employee(
        args.path,
        database_yaml=args.database_yaml,
        environment=args.environment,
        jobs_path=args.jobs_path,
        working_dir=args.working_dir,
    ))


if __name__ == "__main__":
    sys.exit(main())
