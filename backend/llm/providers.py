"""
Completion provider strategies.

The query pipeline only depends on the ``CompletionProvider`` protocol: a
message list plus sampling options in, generated text out. Concrete providers
wrap LangChain chat models; ``FallbackProvider`` chains them.
"""
import logging
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Tuple

import httpx
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

logger = logging.getLogger(__name__)

Message = Dict[str, str]
ModelFactory = Callable[[float, int], BaseChatModel]


class ProviderError(Exception):
    """The completion backend failed or returned nothing usable."""


class ProviderTimeout(ProviderError):
    """The completion backend did not answer within the hard timeout."""


class CompletionProvider(Protocol):
    name: str

    def complete(self, messages: Sequence[Message], temperature: float = 0.7, max_tokens: int = 2000) -> str:
        ...


def to_langchain_messages(messages: Sequence[Message]) -> List[BaseMessage]:
    converted = []
    for msg in messages:
        role = msg.get("role")
        content = msg.get("content", "")
        if role == "system":
            converted.append(SystemMessage(content=content))
        elif role == "assistant":
            converted.append(AIMessage(content=content))
        else:
            converted.append(HumanMessage(content=content))
    return converted


def message_text(response: Any) -> str:
    """Text of a chat model reply; content-part lists are joined."""
    content = getattr(response, "content", response)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type", "text") == "text":
                parts.append(part.get("text", ""))
        return "".join(parts)
    return str(content)


def is_timeout(exc: BaseException) -> bool:
    # openai/groq raise APITimeoutError, which does not subclass TimeoutError
    if isinstance(exc, (TimeoutError, httpx.TimeoutException)):
        return True
    return "timeout" in type(exc).__name__.lower()


class LangChainProvider:
    """Adapts a LangChain chat model factory to ``CompletionProvider``."""

    def __init__(self, name: str, factory: ModelFactory):
        self.name = name
        self._factory = factory
        self._models: Dict[Tuple[float, int], BaseChatModel] = {}

    def _model(self, temperature: float, max_tokens: int) -> BaseChatModel:
        key = (temperature, max_tokens)
        if key not in self._models:
            self._models[key] = self._factory(temperature, max_tokens)
        return self._models[key]

    def complete(self, messages: Sequence[Message], temperature: float = 0.7, max_tokens: int = 2000) -> str:
        logger.info(f"Using LLM provider: {self.name}")
        try:
            response = self._model(temperature, max_tokens).invoke(to_langchain_messages(messages))
        except Exception as e:
            if is_timeout(e):
                raise ProviderTimeout(f"{self.name} request timed out") from e
            raise ProviderError(f"{self.name} request failed: {e}") from e

        content = message_text(response)
        if not content.strip():
            raise ProviderError(f"{self.name} returned an empty completion")
        return content


class FallbackProvider:
    """Tries each provider in order until one answers; a timeout ends the chain."""

    def __init__(self, providers: Sequence[CompletionProvider]):
        if not providers:
            raise ValueError("FallbackProvider needs at least one provider")
        self.providers = list(providers)
        self.name = "+".join(p.name for p in self.providers)

    def complete(self, messages: Sequence[Message], temperature: float = 0.7, max_tokens: int = 2000) -> str:
        last_error: Optional[ProviderError] = None
        for provider in self.providers:
            try:
                return provider.complete(messages, temperature=temperature, max_tokens=max_tokens)
            except ProviderTimeout:
                # one timeout budget per stage
                logger.warning(f"Provider {provider.name} timed out, not falling back")
                raise
            except ProviderError as e:
                logger.warning(f"Provider {provider.name} failed ({e}), trying next")
                last_error = e
        raise last_error
