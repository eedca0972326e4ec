"""소수 판별 잡"""

import math

from worker.base import BaseJob, job_type
from worker.model.handler import JobParams, JobResult


class PrimeParams(JobParams):
    number: int


@job_type("math.is_prime")
class IsPrimeJob(BaseJob):
    params_model = PrimeParams

    async def run(self, params: PrimeParams) -> JobResult:
        n = params.number
        if n < 2:
            return JobResult(data={"number": n, "is_prime": False})
        is_prime = all(n % d for d in range(2, math.isqrt(n) + 1))
        return JobResult(data={"number": n, "is_prime": is_prime})
