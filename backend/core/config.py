from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings

# config.py -> core -> backend -> repo root
_ENV_PATH = Path(__file__).resolve().parent.parent.parent / ".env"


class Settings(BaseSettings):
    # Warehouse
    DATABASE_URL: str = ""
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 0
    DB_POOL_TIMEOUT_SECONDS: int = 30
    DB_POOL_RECYCLE_SECONDS: int = 30

    # Completion providers
    LLM_PROVIDER: str = "openai"
    LLM_FALLBACK_PROVIDER: Optional[str] = None
    LLM_TIMEOUT_SECONDS: float = 55.0

    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4"

    GROQ_API_KEY: str = ""
    GROQ_MODEL: str = "llama-3.1-70b-versatile"

    OLLAMA_BASE_URL: str = "http://localhost:11434"
    OLLAMA_MODEL: str = "llama3.1:8b-instruct-q5_K_M"

    # Conversation
    HISTORY_WINDOW: int = 10
    CHART_SAMPLE_LIMIT: int = 100
    COMPANY_NAME: str = "Hilal Foods"
    CURRENCY: str = "PKR"

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = str(_ENV_PATH) if _ENV_PATH.exists() else ".env"
        extra = "ignore"


settings = Settings()
