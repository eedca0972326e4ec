"""
DatabaseRegistry: 이름별 데이터베이스 인스턴스 관리

database.yaml의 환경(environment) 블록 하나가 하나의 DB로 등록됩니다.
처음 등록된 DB가 기본 DB가 됩니다.
"""

import logging
from typing import Any

from database.base import BaseDatabase
from database.exception import DatabaseError, DatabaseNotFoundError

logger = logging.getLogger(__name__)


class DatabaseRegistry:
    """데이터베이스 레지스트리 (프로세스 단위)"""

    _databases: dict[str, BaseDatabase] = {}
    _default: str | None = None

    @classmethod
    async def init_from_config(cls, config: dict[str, Any], names: list[str] | None = None) -> None:
        """
        설정 dict에서 DB 초기화

        Args:
            config: database.yaml 내용 (환경 이름 -> DB 설정)
            names: 초기화할 블록 이름 목록 (None이면 전체)
        """
        for name in names or list(config):
            if name in cls._databases:
                logger.debug(f"Database '{name}' already registered")
                continue

            db_config = config.get(name)
            if not isinstance(db_config, dict):
                raise DatabaseError(f"No database configuration for '{name}'")

            db_type = db_config.get("type", "sqlite")
            if db_type == "sqlite":
                from database.sqlite3 import SQLiteDatabase
                db = await SQLiteDatabase.create(name, db_config)
            else:
                raise DatabaseError(f"Unsupported database type '{db_type}' for '{name}'")

            cls.register(db)

    @classmethod
    def register(cls, db: BaseDatabase) -> None:
        """DB 인스턴스 등록"""
        cls._databases[db.name] = db
        if cls._default is None:
            cls._default = db.name
        logger.info(f"Database registered: {db.name}")

    @classmethod
    def get(cls, name: str | None = None) -> BaseDatabase:
        """DB 인스턴스 반환 (name이 없으면 기본 DB)"""
        name = name or cls._default
        if name is None or name not in cls._databases:
            raise DatabaseNotFoundError(name or "default")
        return cls._databases[name]

    @classmethod
    def default_name(cls) -> str:
        if cls._default is None:
            raise DatabaseNotFoundError("default")
        return cls._default

    @classmethod
    async def close_all(cls) -> None:
        """모든 DB 연결 종료 후 레지스트리 비움"""
        for db in list(cls._databases.values()):
            try:
                await db.close()
            except Exception as e:
                logger.error(f"Error closing database '{db.name}': {e}")
        cls.clear()

    @classmethod
    def clear(cls) -> None:
        """레지스트리 초기화 (테스트용)"""
        cls._databases = {}
        cls._default = None
