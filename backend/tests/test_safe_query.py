import pytest

from core.config import settings
from db import engine
from db.safe_query import (
    OTHER, SYNTAX, QueryExecutionError, SqlAlchemyExecutor, check_connection, classify_db_error, safe_execute_dict,
)


@pytest.fixture
def sqlite_db(monkeypatch):
    monkeypatch.setattr(settings, "DATABASE_URL", "sqlite://")
    engine.dispose_engine()
    yield
    engine.dispose_engine()


@pytest.mark.parametrize("message,kind", [
    ("Incorrect syntax near the keyword 'ORDER'.", SYNTAX),
    ("Invalid column name 'SALES'.", SYNTAX),
    ("The ORDER BY clause is invalid in views", SYNTAX),
    ("Login failed for user 'reader'.", OTHER),
    ("", OTHER),
])
def test_classify_db_error(message, kind):
    assert classify_db_error(message) == kind


def test_unconfigured_database(monkeypatch):
    monkeypatch.setattr(settings, "DATABASE_URL", "")
    with pytest.raises(QueryExecutionError) as exc:
        safe_execute_dict("SELECT 1")
    assert exc.value.kind == OTHER
    assert not engine.is_configured()


def test_executor_returns_rows(sqlite_db):
    result = SqlAlchemyExecutor().execute("SELECT 1 AS a, 'ACME' AS name")
    assert result.row_count == 1
    assert result.rows == [{"a": 1, "name": "ACME"}]
    assert check_connection()


def test_executor_tags_syntax_errors(sqlite_db):
    with pytest.raises(QueryExecutionError) as exc:
        SqlAlchemyExecutor().execute("SELEC 1")
    assert exc.value.is_syntax_error
