from langchain_core.language_models.chat_models import BaseChatModel
from langchain_groq import ChatGroq
from langchain_ollama import ChatOllama
from langchain_openai import ChatOpenAI

from core.config import settings
from llm.providers import CompletionProvider, FallbackProvider, LangChainProvider

SUPPORTED_PROVIDERS = ("openai", "groq", "ollama")


def get_llm(provider: str, temperature: float, max_tokens: int) -> BaseChatModel:
    provider = provider.lower()
    if provider == "openai":
        return ChatOpenAI(
            model=settings.OPENAI_MODEL,
            temperature=temperature,
            max_tokens=max_tokens,
            api_key=settings.OPENAI_API_KEY or None,
            timeout=settings.LLM_TIMEOUT_SECONDS,
            max_retries=0,
        )
    if provider == "groq":
        return ChatGroq(
            model=settings.GROQ_MODEL,
            temperature=temperature,
            max_tokens=max_tokens,
            api_key=settings.GROQ_API_KEY or None,
            timeout=settings.LLM_TIMEOUT_SECONDS,
            max_retries=0,
        )
    if provider == "ollama":
        return ChatOllama(
            model=settings.OLLAMA_MODEL,
            base_url=settings.OLLAMA_BASE_URL,
            temperature=temperature,
            num_predict=max_tokens,
            client_kwargs={"timeout": settings.LLM_TIMEOUT_SECONDS},
        )
    raise ValueError(f"Unknown LLM_PROVIDER: {provider}. Use one of {', '.join(SUPPORTED_PROVIDERS)}")


def build_provider(name: str) -> LangChainProvider:
    name = name.lower()
    if name not in SUPPORTED_PROVIDERS:
        raise ValueError(f"Unknown LLM_PROVIDER: {name}. Use one of {', '.join(SUPPORTED_PROVIDERS)}")
    return LangChainProvider(name, lambda temperature, max_tokens: get_llm(name, temperature, max_tokens))


def get_provider() -> CompletionProvider:
    """Resolve the configured provider (and optional fallback) into one strategy."""
    primary = build_provider(settings.LLM_PROVIDER)
    fallback = settings.LLM_FALLBACK_PROVIDER
    if fallback and fallback.lower() != primary.name:
        return FallbackProvider([primary, build_provider(fallback)])
    return primary
