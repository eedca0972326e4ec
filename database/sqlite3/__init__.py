"""
SQLite3 비동기 데이터베이스 패키지

사용 예시:
    db = await SQLiteDatabase.create('development', {'path': './data/jobboss.db'})

    async with db.transaction() as ctx:
        await ctx.execute("UPDATE jobs SET ...")
"""

from database.sqlite3.connection import (
    SQLiteDatabase,
    AsyncConnectionPool,
    TransactionContext,
    ManagedTransaction,
    PoolConfig,
    SqliteOptions,
)

__all__ = [
    'SQLiteDatabase',
    'AsyncConnectionPool',
    'TransactionContext',
    'ManagedTransaction',
    'PoolConfig',
    'SqliteOptions',
]
