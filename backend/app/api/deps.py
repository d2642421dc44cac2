"""
Common dependencies for API endpoints.
"""
from functools import lru_cache

from app.services.chat_service import ChatService
from db.safe_query import QueryExecutor, SqlAlchemyExecutor
from llm.client import get_provider
from llm.providers import CompletionProvider


@lru_cache
def get_completion_provider() -> CompletionProvider:
    """
    Get the configured completion provider chain.

    Returns:
        CompletionProvider instance
    """
    return get_provider()


@lru_cache
def get_query_executor() -> QueryExecutor:
    return SqlAlchemyExecutor()


def get_chat_service() -> ChatService:
    """
    Build the turn orchestrator around the shared provider and executor.

    Returns:
        ChatService instance
    """
    return ChatService(get_completion_provider(), get_query_executor())
