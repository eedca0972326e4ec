"""
잡 입출력 모델

모든 잡 타입이 공통으로 사용하는 파라미터 및 결과 모델.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class JobParams(BaseModel):
    """잡 입력 파라미터 (jobs.params JSON)"""
    model_config = ConfigDict(extra='allow')  # 잡 타입별 필드 허용


class JobResult(BaseModel):
    """잡 실행 결과 (jobs.result에 JSON으로 저장)"""
    model_config = ConfigDict(extra='allow')

    success: bool = True
    message: str | None = None
    data: Any = None
