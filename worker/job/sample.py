"""샘플 잡 - 테스트용"""

import asyncio
import logging

from worker.base import BaseJob, job_type
from worker.model.handler import JobParams, JobResult

logger = logging.getLogger(__name__)


class SampleParams(JobParams):
    message: str = "hello"
    sleep_seconds: float = 0
    should_fail: bool = False


@job_type("sample")
class SampleJob(BaseJob):
    """메시지를 돌려주는 샘플 잡 (sleep/실패 시뮬레이션 지원)"""

    params_model = SampleParams

    async def run(self, params: SampleParams) -> JobResult:
        logger.info(f"SampleJob running: message={params.message}")

        if params.sleep_seconds:
            await asyncio.sleep(params.sleep_seconds)

        if params.should_fail:
            raise RuntimeError(f"SampleJob failed on purpose: {params.message}")

        return JobResult(message="Hello from SampleJob!", data={"received": params.message})
