"""
Database 관련 예외 클래스 정의
"""


class DatabaseError(Exception):
    """Database 기본 예외"""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ConnectionPoolExhaustedError(DatabaseError):
    """커넥션풀 소진 (타임아웃 내 연결 획득 실패)"""
    pass


class ReadOnlyTransactionError(DatabaseError):
    """readonly 트랜잭션에서 쓰기 쿼리 실행"""
    pass


class TransactionError(DatabaseError):
    """트랜잭션 시작/커밋 실패"""
    pass


class QueryExecutionError(DatabaseError):
    """쿼리 실행 실패"""
    def __init__(self, message: str, sql: str | None = None):
        self.sql = sql
        super().__init__(message)


class DatabaseNotFoundError(DatabaseError):
    """레지스트리에 등록되지 않은 DB"""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Database '{name}' is not registered")
