"""
트랜잭션 데코레이터

사용 예시:
    @transactional
    async def claim(path):
        ctx = get_connection()
        ...

    @transactional_readonly('production')
    async def list_jobs():
        ...

이미 같은 DB의 트랜잭션 안에서 호출되면 기존 트랜잭션에 참여합니다.
"""

import functools
from typing import Any, Callable

from database.base import BaseDatabase
from database.context import find_connection
from database.exception import TransactionError
from database.registry import DatabaseRegistry


def get_db(name: str | None = None) -> BaseDatabase:
    """레지스트리에서 DB 조회"""
    return DatabaseRegistry.get(name)


def get_connection(name: str | None = None) -> Any:
    """현재 태스크의 활성 트랜잭션 컨텍스트 반환"""
    name = name or DatabaseRegistry.default_name()
    ctx = find_connection(name)
    if ctx is None:
        raise TransactionError(f"No active transaction for database '{name}'")
    return ctx


def _resolve(db: BaseDatabase | str | None) -> BaseDatabase:
    if isinstance(db, BaseDatabase):
        return db
    return DatabaseRegistry.get(db)


def _make_decorator(readonly: bool):
    def wrap(func: Callable, db: BaseDatabase | str | None = None) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            database = _resolve(db)
            if find_connection(database.name) is not None:
                return await func(*args, **kwargs)
            async with database.transaction(readonly=readonly):
                return await func(*args, **kwargs)
        return wrapper

    def decorator(arg: Any = None):
        # @transactional 과 @transactional(db) 둘 다 지원
        if callable(arg) and not isinstance(arg, BaseDatabase):
            return wrap(arg)
        return lambda func: wrap(func, arg)

    return decorator


transactional = _make_decorator(readonly=False)
transactional_readonly = _make_decorator(readonly=True)
