"""
Test configuration and fixtures.
"""
from typing import Any, Dict, List, Sequence

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_chat_service
from app.main import app
from app.services.chat_service import ChatService
from conversation.models import Turn
from db.safe_query import QueryResult


class FakeProvider:
    """
    Completion provider that replays scripted replies in order.
    An Exception instance in the script is raised instead of returned.
    """

    name = "fake"

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls: List[Dict[str, Any]] = []

    def complete(self, messages: Sequence[Dict[str, str]], temperature: float = 0.7, max_tokens: int = 2000) -> str:
        self.calls.append({"messages": list(messages), "temperature": temperature, "max_tokens": max_tokens})
        if not self.replies:
            raise AssertionError("FakeProvider ran out of scripted replies")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeExecutor:
    """Query executor returning fixed rows, or raising a fixed error."""

    def __init__(self, rows=None, error: Exception = None):
        self.rows = rows or []
        self.error = error
        self.queries: List[str] = []

    def execute(self, query_text: str) -> QueryResult:
        self.queries.append(query_text)
        if self.error is not None:
            raise self.error
        return QueryResult(rows=self.rows, row_count=len(self.rows))


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def fake_executor():
    return FakeExecutor()


@pytest.fixture
def ranking_history():
    """A data answer listing two distributors with amounts."""
    return [
        Turn(role="user", content="Top 2 distributors by sales last month"),
        Turn(
            role="assistant",
            content="Here are the top distributors:\n1. ACME CORP: PKR 1,000\n2. BETA LTD: PKR 900",
            sql="SELECT TOP 2 D.DISTRIBUTOR_NAME, SUM(F.AMOUNT) AS Sales FROM FACT_SALES_ORDER F",
            table="primary",
        ),
    ]


@pytest.fixture
def client():
    """
    Create a test client for the FastAPI app.

    Returns:
        TestClient instance
    """
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def use_service(client):
    """Route the chat endpoint to a ChatService built from fakes."""
    def _use(provider, executor=None):
        service = ChatService(provider, executor or FakeExecutor())
        app.dependency_overrides[get_chat_service] = lambda: service
        return service
    return _use
