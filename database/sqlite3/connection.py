"""
SQLite3 비동기 커넥션풀 모듈

aiosqlite를 사용하여 비동기 SQLite3 커넥션풀을 제공합니다.
boss 프로세스와 employee 프로세스가 같은 파일을 공유하므로 WAL 모드와
busy_timeout을 기본으로 사용합니다.
"""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import aiosqlite

from database.base import BaseDatabase
from database.context import set_connection, clear_connection
from database.exception import (
    ConnectionPoolExhaustedError,
    QueryExecutionError,
    ReadOnlyTransactionError,
    TransactionError,
)

logger = logging.getLogger(__name__)


@dataclass
class PoolConfig:
    """커넥션풀 설정"""
    pool_size: int = 5
    pool_timeout: float = 30.0


@dataclass
class SqliteOptions:
    """SQLite 연결 옵션"""
    busy_timeout: int = 5000
    journal_mode: str = 'WAL'
    synchronous: str = 'NORMAL'
    foreign_keys: bool = True


class TransactionContext:
    """SQLite 트랜잭션 컨텍스트"""

    def __init__(self, connection: aiosqlite.Connection, readonly: bool = False):
        self._connection = connection
        self._readonly = readonly
        self._in_transaction = False

    @property
    def connection(self) -> aiosqlite.Connection:
        return self._connection

    @property
    def readonly(self) -> bool:
        return self._readonly

    @property
    def in_transaction(self) -> bool:
        return self._in_transaction

    async def begin(self) -> None:
        if self._in_transaction:
            logger.warning("Transaction already started")
            return
        await self._connection.execute("BEGIN DEFERRED" if self._readonly else "BEGIN IMMEDIATE")
        self._in_transaction = True

    async def commit(self) -> None:
        if not self._in_transaction:
            logger.warning("No active transaction to commit")
            return
        await self._connection.commit()
        self._in_transaction = False
        logger.debug("Transaction committed")

    async def rollback(self) -> None:
        if not self._in_transaction:
            logger.warning("No active transaction to rollback")
            return
        await self._connection.rollback()
        self._in_transaction = False
        logger.debug("Transaction rolled back")

    async def execute(self, sql: str, parameters: Any = None) -> aiosqlite.Cursor:
        """SQL 실행"""
        if self._readonly and _is_write_query(sql):
            raise ReadOnlyTransactionError("Cannot execute write query in readonly transaction")

        logger.debug(f"[SQL] {' '.join(sql.split())} | params: {parameters}")
        return await self._connection.execute(sql, parameters or ())

    async def fetch_one(self, sql: str, parameters: Any = None) -> aiosqlite.Row | None:
        cursor = await self.execute(sql, parameters)
        return await cursor.fetchone()

    async def fetch_all(self, sql: str, parameters: Any = None) -> list[aiosqlite.Row]:
        cursor = await self.execute(sql, parameters)
        return list(await cursor.fetchall())


def _is_write_query(sql: str) -> bool:
    """쓰기 쿼리인지 확인"""
    write_keywords = ('INSERT', 'UPDATE', 'DELETE', 'CREATE', 'DROP', 'ALTER', 'REPLACE')
    return sql.strip().upper().startswith(write_keywords)


class AsyncConnectionPool:
    """비동기 SQLite 커넥션풀"""

    def __init__(
        self,
        db_path: Path,
        pool_config: PoolConfig | None = None,
        sqlite_options: SqliteOptions | None = None
    ):
        self._db_path = db_path
        self._pool_config = pool_config or PoolConfig()
        self._sqlite_options = sqlite_options or SqliteOptions()

        self._idle: asyncio.Queue[aiosqlite.Connection] | None = None
        self._connections: list[aiosqlite.Connection] = []
        self._closed = False

    async def initialize(self) -> None:
        """커넥션풀 초기화"""
        if self._idle is not None:
            logger.warning("Connection pool already initialized")
            return

        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._idle = asyncio.Queue()
        for _ in range(self._pool_config.pool_size):
            conn = await self._create_connection()
            self._connections.append(conn)
            self._idle.put_nowait(conn)

        logger.info(
            f"Connection pool initialized: {self._db_path} "
            f"(size={self._pool_config.pool_size}, timeout={self._pool_config.pool_timeout}s)"
        )

    async def _create_connection(self) -> aiosqlite.Connection:
        opts = self._sqlite_options
        conn = await aiosqlite.connect(
            self._db_path,
            timeout=opts.busy_timeout / 1000.0,
            isolation_level=None,  # BEGIN/COMMIT은 직접 관리
        )
        conn.row_factory = aiosqlite.Row

        await conn.execute(f"PRAGMA busy_timeout={opts.busy_timeout}")
        await conn.execute(f"PRAGMA journal_mode={opts.journal_mode}")
        await conn.execute(f"PRAGMA synchronous={opts.synchronous}")
        await conn.execute(f"PRAGMA foreign_keys={'ON' if opts.foreign_keys else 'OFF'}")
        return conn

    async def acquire(self, timeout: float | None = None) -> aiosqlite.Connection:
        """커넥션풀에서 연결 획득"""
        if self._idle is None:
            raise RuntimeError("Connection pool not initialized. Call initialize() first.")
        if self._closed:
            raise RuntimeError("Connection pool is closed.")

        timeout = timeout or self._pool_config.pool_timeout
        try:
            return await asyncio.wait_for(self._idle.get(), timeout=timeout)
        except asyncio.TimeoutError:
            raise ConnectionPoolExhaustedError(
                f"Connection pool exhausted. Timeout after {timeout}s"
            )

    async def release(self, conn: aiosqlite.Connection) -> None:
        """연결을 풀에 반환"""
        if self._closed:
            return
        self._idle.put_nowait(conn)

    async def close(self) -> None:
        """모든 연결을 닫고 풀 종료"""
        self._closed = True
        for conn in self._connections:
            try:
                await conn.close()
            except Exception as e:
                logger.error(f"Error closing connection: {e}")
        self._connections.clear()
        logger.info(f"Connection pool closed: {self._db_path}")

    @property
    def size(self) -> int:
        return len(self._connections)

    @property
    def available(self) -> int:
        return self._idle.qsize() if self._idle is not None else 0


class ManagedTransaction:
    """SQLite 트랜잭션 컨텍스트 매니저"""

    def __init__(self, db: 'SQLiteDatabase', readonly: bool = False):
        self._db = db
        self._readonly = readonly
        self._conn: aiosqlite.Connection | None = None
        self._ctx: TransactionContext | None = None

    async def __aenter__(self) -> TransactionContext:
        self._conn = await self._db.pool.acquire()
        self._ctx = TransactionContext(self._conn, self._readonly)
        try:
            await self._ctx.begin()
        except aiosqlite.Error as e:
            await self._db.pool.release(self._conn)
            raise TransactionError(f"Failed to begin transaction on '{self._db.name}': {e}") from e

        set_connection(self._db.name, self._ctx)
        return self._ctx

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        try:
            if exc_type:
                await self._ctx.rollback()
            else:
                await self._ctx.commit()
        except aiosqlite.Error as e:
            raise TransactionError(f"Failed to end transaction on '{self._db.name}': {e}") from e
        finally:
            clear_connection(self._db.name)
            await self._db.pool.release(self._conn)

        if exc_type is not None and issubclass(exc_type, aiosqlite.Error):
            raise QueryExecutionError(str(exc_val)) from exc_val


class SQLiteDatabase(BaseDatabase):
    """
    SQLite 데이터베이스 구현

    설정 예시 (database.yaml의 환경 블록):
        development:
          type: sqlite
          path: ./data/jobboss.db
          pool:
            pool_size: 5
          options:
            busy_timeout: 5000
    """

    def __init__(self, name: str, config: dict[str, Any]):
        super().__init__(name)
        self._config = config
        self._pool: AsyncConnectionPool | None = None

    @classmethod
    async def create(cls, name: str, config: dict[str, Any]) -> 'SQLiteDatabase':
        """SQLiteDatabase 인스턴스 생성 및 초기화"""
        instance = cls(name, config)
        await instance._initialize()
        return instance

    async def _initialize(self) -> None:
        pool_cfg = self._config.get('pool') or {}
        opts = self._config.get('options') or {}

        self._pool = AsyncConnectionPool(
            db_path=Path(self._config.get('path', f'./data/{self.name}.db')),
            pool_config=PoolConfig(
                pool_size=pool_cfg.get('pool_size', 5),
                pool_timeout=pool_cfg.get('pool_timeout', 30.0),
            ),
            sqlite_options=SqliteOptions(
                busy_timeout=opts.get('busy_timeout', 5000),
                journal_mode=opts.get('journal_mode', 'WAL'),
                synchronous=opts.get('synchronous', 'NORMAL'),
                foreign_keys=opts.get('foreign_keys', True),
            ),
        )
        await self._pool.initialize()
        logger.info(f"SQLiteDatabase '{self.name}' initialized")

    def transaction(self, readonly: bool = False) -> ManagedTransaction:
        """트랜잭션 컨텍스트 매니저 반환"""
        return ManagedTransaction(self, readonly)

    @property
    def pool(self) -> AsyncConnectionPool:
        if self._pool is None:
            raise RuntimeError(f"Database '{self.name}' not initialized")
        return self._pool

    async def close(self) -> None:
        if self._pool:
            await self._pool.close()
        logger.info(f"SQLiteDatabase '{self.name}' closed")
