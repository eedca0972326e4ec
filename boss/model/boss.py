"""
Boss 설정 모델

기동 시 한 번 만들어지고 이후 변경되지 않습니다 (frozen).
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LoggingConfig(BaseModel):
    """로깅 설정 (boss.yaml의 logging 블록)"""
    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    json_format: bool = False
    log_file: str | None = None


class BossConfig(BaseModel):
    """Boss 설정 (boss.yaml의 boss 블록)"""
    model_config = ConfigDict(frozen=True)

    working_dir: Path = Field(default=Path("."), description="상대 경로의 기준 디렉토리")
    sleep_interval: float = Field(default=5.0, gt=0, le=3600)
    employee_limit: int = Field(default=4, ge=1)
    database_yaml_path: Path = Path("config/database.yaml")
    jobs_path: Path = Path("worker/job")
    environment: str = Field(default="development", min_length=1)
    logging: LoggingConfig = LoggingConfig()

    @field_validator("working_dir")
    @classmethod
    def _absolute_working_dir(cls, value: Path) -> Path:
        return value.expanduser().resolve()

    def resolve(self, path: Path) -> Path:
        """working_dir 기준으로 경로 해석 (절대 경로는 그대로)"""
        path = path.expanduser()
        return path if path.is_absolute() else self.working_dir / path

    @property
    def database_yaml_file(self) -> Path:
        return self.resolve(self.database_yaml_path)

    @property
    def jobs_dir(self) -> Path:
        return self.resolve(self.jobs_path)
