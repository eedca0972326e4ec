"""
Worker 관련 예외 클래스 정의
"""


class WorkerError(Exception):
    """Worker 기본 예외"""
    pass


class JobTypeNotFoundError(WorkerError):
    """잡 타입을 찾을 수 없음"""
    def __init__(self, name: str):
        self.name = name
        self.message = f"Job type not found: {name}"
        super().__init__(self.message)


class InvalidJobTypeError(WorkerError):
    """BaseJob을 상속하지 않은 클래스 등록 시도"""
    def __init__(self, name: str, cls: object):
        self.name = name
        self.message = f"Job type '{name}' must be a BaseJob subclass, got {cls!r}"
        super().__init__(self.message)


class JobLoadError(WorkerError):
    """잡 타입 모듈 로드 실패"""
    def __init__(self, path: str, reason: str):
        self.path = path
        self.message = f"Failed to load job module {path}: {reason}"
        super().__init__(self.message)
