"""
Centralized application configuration.

All settings are driven by environment variables with sensible defaults.
Uses Pydantic BaseSettings for validation and type coercion.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # --- Application ---
    app_name: str = "ChatREL"
    app_version: str = "5.0.0"
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"  # DEBUG | INFO | WARNING | ERROR

    # --- CORS ---
    allowed_origins: list[str] = ["*"]

    # --- Inference service (OpenAI-compatible endpoint) ---
    inference_api_key: str = ""
    inference_base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"

    # Deep analysis and chat share the high-capability model
    deep_model: str = "gemini-3-pro-preview"
    chat_model: str = "gemini-3-pro-preview"
    quick_model: str = "gemini-flash-lite-latest"

    deep_reasoning_effort: str | None = "high"  # low | medium | high
    chat_reasoning_effort: str | None = None

    # --- Transcript budgets (characters) ---
    deep_max_chars: int = 100_000
    quick_max_chars: int = 5_000
    chat_context_max_chars: int = 30_000

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """
    Return a cached Settings instance.

    The same object is shared by the app factory, the analyzer and the
    health probe for the lifetime of the process.
    """
    return Settings()
