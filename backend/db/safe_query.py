from typing import Any, Dict, List, Protocol
import logging

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from db.engine import get_engine, is_configured

logger = logging.getLogger(__name__)

SYNTAX = "syntax"
OTHER = "other"

# Markers in driver error text that mean the statement itself is malformed
SYNTAX_ERROR_MARKERS = ("syntax", "invalid", "ORDER BY")


class QueryResult(BaseModel):
    rows: List[Dict[str, Any]] = []
    row_count: int = 0


class QueryExecutionError(Exception):
    def __init__(self, message: str, kind: str = OTHER):
        self.message = message
        self.kind = kind
        super().__init__(message)

    @property
    def is_syntax_error(self) -> bool:
        return self.kind == SYNTAX


class QueryExecutor(Protocol):
    def execute(self, query_text: str) -> QueryResult:
        ...


def classify_db_error(message: str) -> str:
    text_lower = (message or "").lower()
    for marker in SYNTAX_ERROR_MARKERS:
        if marker.lower() in text_lower:
            return SYNTAX
    return OTHER


def safe_execute_dict(query: str) -> List[Dict[str, Any]]:
    if not is_configured():
        raise QueryExecutionError("DATABASE_URL is not configured", kind=OTHER)
    try:
        with get_engine().connect() as conn:
            # exec_driver_sql: generated SQL is passed through without bind-param parsing
            result = conn.exec_driver_sql(query)
            columns = list(result.keys())
            rows = result.fetchall()
            return [dict(zip(columns, row)) for row in rows]
    except SQLAlchemyError as e:
        message = str(getattr(e, "orig", None) or e)
        kind = classify_db_error(message)
        logger.error(f"Query execution failed ({kind}): {message}\nQuery: {query}")
        raise QueryExecutionError(message, kind=kind) from e


def check_connection() -> bool:
    rows = safe_execute_dict("SELECT 1 AS test")
    return bool(rows)


class SqlAlchemyExecutor:
    """Runs validated read-only queries against the warehouse pool."""

    def execute(self, query_text: str) -> QueryResult:
        rows = safe_execute_dict(query_text)
        return QueryResult(rows=rows, row_count=len(rows))
