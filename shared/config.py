"""
Centralized Configuration Settings.

All environment variables for the edge functions and the upload client are
defined here using Pydantic Settings. Secrets (AI gateway key, Supabase keys)
default to empty strings so that a missing credential is detected by the
handler that needs it rather than at import time.
"""

import logging
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings with environment variable loading.

    All settings have sensible defaults for development.
    Production deployments should override via environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # =========================================================================
    # Server Configuration
    # =========================================================================
    SERVICE_NAME: str = "edge-functions"
    DEBUG: bool = False
    STRUCTURED_LOGGING: bool = True
    LOG_LEVEL: str = "INFO"
    HTTP_TIMEOUT_SECONDS: float = 30.0

    # =========================================================================
    # CORS & Origins
    # =========================================================================
    ALLOWED_ORIGINS: str = "*"

    @property
    def allowed_origins_list(self) -> list[str]:
        """Parse ALLOWED_ORIGINS into list."""
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

    # =========================================================================
    # AI Gateway
    # =========================================================================
    AI_GATEWAY_URL: str = "https://ai.gateway.lovable.dev/v1"
    AI_GATEWAY_API_KEY: str = ""
    CHAT_MODEL: str = "google/gemini-3-flash-preview"
    TRANSCRIPTION_MODEL: str = "google/gemini-2.5-flash"
    TRANSCRIPTION_MAX_TOKENS: int = 8000

    # =========================================================================
    # Supabase (storage, database, sibling functions)
    # =========================================================================
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    STORAGE_BUCKET: str = "documents"
    DOCUMENTS_TABLE: str = "documents"

    @property
    def functions_url(self) -> str:
        """Base URL of the deployed edge functions."""
        return f"{self.SUPABASE_URL.rstrip('/')}/functions/v1"

    @property
    def live_data_configured(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_ANON_KEY)

    # =========================================================================
    # Gold price providers
    # =========================================================================
    GOLD_API_URL: str = "https://www.goldapi.io/api/XAU/USD"
    GOLD_API_TOKEN: str = "goldapi-demo"
    GOLD_FALLBACK_URL: str = "https://api.frankfurter.app/latest?from=XAU&to=USD"
    EXCHANGE_RATE_URL: str = "https://api.exchangerate-api.com/v4/latest/USD"
    FALLBACK_GOLD_PRICE_USD: float = 2680.0
    FALLBACK_USD_INR: float = 83.5

    # =========================================================================
    # Feature Flags
    # =========================================================================
    # Strict RAG mode unless enabled: keyword intents are detected but ignored.
    LIVE_DATA_ENABLED: bool = False


@lru_cache
def get_settings() -> Settings:
    """Factory for Settings singleton.

    Uses @lru_cache to ensure single instance across application.

    Example:
        >>> settings = get_settings()
        >>> print(settings.CHAT_MODEL)
    """
    settings = Settings()
    if settings.LIVE_DATA_ENABLED:
        logger.info("Live data augmentation enabled for hybrid chat")
    return settings
