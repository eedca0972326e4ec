"""
비동기 데이터베이스 패키지

사용 예시:
    from database import transactional, get_connection
    from database.registry import DatabaseRegistry

    await DatabaseRegistry.init_from_config(config, ['development'])

    @transactional
    async def mark_done(path):
        ctx = get_connection()
        await ctx.execute("UPDATE jobs SET ...")
"""

from database.exception import (
    DatabaseError,
    DatabaseNotFoundError,
    ConnectionPoolExhaustedError,
    ReadOnlyTransactionError,
    TransactionError,
    QueryExecutionError,
)
from database.transaction import (
    transactional,
    transactional_readonly,
    get_connection,
    get_db,
)

__all__ = [
    'transactional',
    'transactional_readonly',
    'get_connection',
    'get_db',
    'DatabaseError',
    'DatabaseNotFoundError',
    'ConnectionPoolExhaustedError',
    'ReadOnlyTransactionError',
    'TransactionError',
    'QueryExecutionError',
]
