"""Worker 모델"""

from worker.model.handler import JobParams, JobResult

__all__ = ["JobParams", "JobResult"]
