"""
Boss 관련 예외 클래스 정의
"""

from pathlib import Path


class BossError(Exception):
    """Boss 기본 예외"""
    pass


class StartupError(BossError):
    """기동 실패 (루프 진입 전 치명적 오류)"""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class StoreDescriptorError(StartupError):
    """database.yaml이 없거나 읽을 수 없음"""
    def __init__(self, path: Path, reason: str | None = None):
        self.path = path
        message = f"Database YAML file missing ({path})" if reason is None else f"{reason} ({path})"
        super().__init__(message)


class JobsPathError(StartupError):
    """잡 타입 디렉토리가 없음"""
    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Jobs path missing ({path})")


class EmployeeLaunchError(BossError):
    """employee 프로세스 기동 실패"""
    def __init__(self, path: str, reason: str):
        self.path = path
        self.message = f"Failed to launch employee for job '{path}': {reason}"
        super().__init__(self.message)


class DuplicateJobError(BossError):
    """같은 path의 잡이 이미 존재"""
    def __init__(self, path: str):
        self.path = path
        self.message = f"Job with path '{path}' already exists"
        super().__init__(self.message)


class JobNotFoundError(BossError):
    """잡을 찾을 수 없음"""
    def __init__(self, path: str):
        self.path = path
        self.message = f"Job with path '{path}' not found"
        super().__init__(self.message)


class JobStatusError(BossError):
    """현재 상태에서 허용되지 않는 작업"""
    def __init__(self, path: str, current_status: str, action: str):
        self.path = path
        self.current_status = current_status
        self.message = f"Cannot {action} job '{path}' with status '{current_status}'"
        super().__init__(self.message)
