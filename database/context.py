"""
트랜잭션 컨텍스트 저장소

contextvars를 사용하여 태스크별로 DB 이름 -> 활성 트랜잭션 컨텍스트를 보관합니다.
"""

from contextvars import ContextVar
from typing import Any

_connections: ContextVar[dict[str, Any] | None] = ContextVar("_connections", default=None)


def set_connection(name: str, ctx: Any) -> None:
    """현재 태스크에 트랜잭션 컨텍스트 등록"""
    current = dict(_connections.get() or {})
    current[name] = ctx
    _connections.set(current)


def clear_connection(name: str) -> None:
    """현재 태스크의 트랜잭션 컨텍스트 제거"""
    current = dict(_connections.get() or {})
    current.pop(name, None)
    _connections.set(current)


def find_connection(name: str) -> Any | None:
    """활성 트랜잭션 컨텍스트 조회 (없으면 None)"""
    return (_connections.get() or {}).get(name)
