"""
잡 타입 레지스트리

jobs_path 디렉토리의 모듈을 기동 시 한 번 로드하고, 각 모듈은
@job_type(name) 으로 구현 클래스를 등록합니다. 핫 리로드는 없습니다.
"""

import importlib.util
import logging
import sys
from abc import ABC, abstractmethod
from pathlib import Path

from worker.exception import InvalidJobTypeError, JobLoadError, JobTypeNotFoundError
from worker.model.handler import JobParams, JobResult

__all__ = [
    'job_type',
    'register_job_type',
    'get_job_type',
    'get_registered_job_types',
    'load_job_types',
    'BaseJob',
    'JobParams',
    'JobResult',
    'JobTypeNotFoundError',
]

logger = logging.getLogger(__name__)

# 잡 타입 레지스트리 (모듈 레벨)
_registry: dict[str, type["BaseJob"]] = {}

# jobs_path 모듈이 sys.modules에 등록되는 패키지 이름
JOBS_MODULE_PREFIX = "jobboss_jobs"


class BaseJob(ABC):
    """잡 타입 기본 클래스"""

    # jobs.params JSON을 검증할 모델
    params_model: type[JobParams] = JobParams

    @abstractmethod
    async def run(self, params: JobParams) -> JobResult:
        """
        잡 실행 로직 (employee 프로세스 안에서 실행)

        Args:
            params: params_model로 검증된 입력 파라미터

        Returns:
            실행 결과 (jobs.result에 JSON으로 저장)

        Raises:
            Exception: 실행 실패 시 (jobs.status가 failed로 기록됨)
        """
        pass


def register_job_type(name: str, cls: type[BaseJob]) -> type[BaseJob]:
    """잡 타입 등록"""
    if not (isinstance(cls, type) and issubclass(cls, BaseJob)):
        raise InvalidJobTypeError(name, cls)
    existing = _registry.get(name)
    if existing is not None and existing.__qualname__ != cls.__qualname__:
        logger.warning(f"Job type '{name}' re-registered: {existing.__qualname__} -> {cls.__qualname__}")
    _registry[name] = cls
    return cls


def job_type(name: str):
    """잡 타입 등록 데코레이터"""
    def decorator(cls):
        return register_job_type(name, cls)
    return decorator


def get_job_type(name: str) -> type[BaseJob]:
    """등록된 잡 타입 클래스 반환"""
    if name not in _registry:
        raise JobTypeNotFoundError(name)
    return _registry[name]


def get_registered_job_types() -> dict[str, type[BaseJob]]:
    """등록된 잡 타입 목록 반환"""
    return _registry.copy()


def load_job_types(jobs_path: Path) -> list[str]:
    """
    jobs_path 아래 *.py 모듈을 이름순으로 로드

    Returns:
        로드 후 등록되어 있는 잡 타입 이름 목록

    Raises:
        JobLoadError: 모듈 import 실패
    """
    for file in sorted(Path(jobs_path).glob("*.py")):
        if file.name.startswith("_"):
            continue
        module_name = f"{JOBS_MODULE_PREFIX}.{file.stem}"
        spec = importlib.util.spec_from_file_location(module_name, file)
        if spec is None or spec.loader is None:
            raise JobLoadError(str(file), "not a loadable module")

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            sys.modules.pop(module_name, None)
            raise JobLoadError(str(file), str(e)) from e
        logger.debug(f"Loaded job module: {file}")

    names = sorted(_registry)
    logger.info(f"Registered job types: {', '.join(names) or '(none)'}")
    return names
