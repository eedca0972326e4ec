"""
Boss 기동 순서

1. database.yaml 로드 및 연결 (없으면 즉시 실패)
2. jobs_path의 잡 타입 로드 (없으면 즉시 실패)
3. jobs 테이블이 없으면 마이그레이션
4. 시그널 핸들러 + 종료 훅 설치 후 루프 진입
"""

import asyncio
import logging
import signal
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from boss.exception import JobsPathError, StartupError, StoreDescriptorError
from boss.main import Boss
from boss.model import BossConfig
from boss.shutdown import ExitGuard
from boss.store import JobStore
from common.logging import setup_logging
from database.registry import DatabaseRegistry
from worker.base import load_job_types

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/boss.yaml")

SHUTDOWN_SIGNALS = (signal.SIGHUP, signal.SIGINT, signal.SIGTERM)


def load_config(config_path: Path | None = None, overrides: dict[str, Any] | None = None) -> BossConfig:
    """
    boss.yaml 로드

    Args:
        config_path: 설정 파일 경로 (없으면 기본값만 사용)
        overrides: CLI 등에서 덮어쓸 boss 옵션 (None 값은 무시)

    Raises:
        StartupError: 설정 파일을 읽을 수 없거나 값이 잘못된 경우
    """
    raw: dict[str, Any] = {}
    if config_path is not None:
        try:
            with open(config_path, encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise StartupError(f"Cannot read config file {config_path}: {e}") from e

    options = dict(raw.get("boss") or {})
    options.update({k: v for k, v in (overrides or {}).items() if v is not None})
    if "logging" in raw:
        options["logging"] = raw["logging"] or {}

    try:
        return BossConfig(**options)
    except ValidationError as e:
        raise StartupError(f"Invalid boss configuration: {e}") from e


def load_store_descriptor(path: Path, environment: str, base_dir: Path) -> dict[str, Any]:
    """
    database.yaml 로드 후 environment 블록 검증

    sqlite path가 상대 경로면 base_dir 기준으로 바꿉니다.

    Raises:
        StoreDescriptorError: 파일이 없거나 읽을 수 없음, environment 블록 없음
    """
    if not path.is_file():
        raise StoreDescriptorError(path)

    try:
        with open(path, encoding="utf-8") as f:
            descriptor = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise StoreDescriptorError(path, f"Database YAML file unreadable: {e}") from e

    if not isinstance(descriptor, dict) or not isinstance(descriptor.get(environment), dict):
        raise StoreDescriptorError(path, f"No '{environment}' block in database YAML")

    block = dict(descriptor[environment])
    db_path = block.get("path")
    if db_path and not Path(db_path).is_absolute():
        block["path"] = str(base_dir / db_path)
    return {environment: block}


async def connect(config: BossConfig) -> dict[str, Any]:
    """DB 연결 (environment 블록 하나만 초기화)"""
    descriptor = load_store_descriptor(config.database_yaml_file, config.environment, config.working_dir)
    await DatabaseRegistry.init_from_config(descriptor, [config.environment])
    return descriptor


def require_job_types(config: BossConfig) -> list[str]:
    """jobs_path의 잡 타입 로드"""
    jobs_dir = config.jobs_dir
    if not jobs_dir.is_dir():
        raise JobsPathError(jobs_dir)
    return load_job_types(jobs_dir)


async def migrate(store: JobStore) -> bool:
    """jobs 테이블이 없을 때만 생성 (생성했으면 True)"""
    if await store.table_exists():
        return False
    await store.migrate()
    return True


def install_signal_handlers(boss: Boss) -> None:
    """종료 시그널 -> boss.request_stop()"""
    loop = asyncio.get_running_loop()

    def signal_handler(sig: signal.Signals):
        logger.info(f"Received {sig.name}, shutting down")
        boss.request_stop()

    for sig in SHUTDOWN_SIGNALS:
        loop.add_signal_handler(sig, signal_handler, sig)


def install_exit_guard(boss: Boss, descriptor: dict[str, Any], environment: str) -> ExitGuard:
    """
    프로세스 종료 훅 설치

    루프가 정상적으로 끝났다면 이미 종료 처리가 끝나 있으므로 아무것도 하지 않습니다.
    """
    async def detached_shutdown():
        await DatabaseRegistry.init_from_config(descriptor, [environment])
        try:
            await boss.shutdown()
        finally:
            await DatabaseRegistry.close_all()

    def teardown():
        if boss.shutdown_coordinator.started:
            return
        asyncio.run(detached_shutdown())

    return ExitGuard(teardown).install()


async def run_boss(config: BossConfig) -> int:
    """
    Boss 기동 및 실행

    Returns:
        종료 시 정리한 employee 수

    Raises:
        StartupError: 루프 진입 전 치명적 오류
    """
    descriptor = await connect(config)
    try:
        require_job_types(config)

        store = JobStore()
        if await migrate(store):
            logger.info("Jobs table was missing, migrated")

        boss = Boss(config, store)
        install_signal_handlers(boss)
        guard = install_exit_guard(boss, descriptor, config.environment)
        logger.info(f"Boss pid={guard.boss_pid}")

        return await boss.start()
    finally:
        await DatabaseRegistry.close_all()


def main(config_path: Path | None = None, overrides: dict[str, Any] | None = None) -> int:
    """데몬 실행 (종료 코드 반환)"""
    if config_path is None and DEFAULT_CONFIG_PATH.is_file():
        config_path = DEFAULT_CONFIG_PATH

    try:
        config = load_config(config_path, overrides)
    except StartupError as e:
        print(f"Error: {e.message}")
        return 1

    setup_logging(
        level=config.logging.level,
        json_format=config.logging.json_format,
        log_file=config.logging.log_file,
    )

    try:
        asyncio.run(run_boss(config))
    except StartupError as e:
        logger.critical(f"Job Boss failed to start: {e.message}")
        return 1
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user")
    return 0
