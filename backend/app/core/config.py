# Environment & settings
# pydantic-settings reads .env = core/config.py

from typing import Optional
from pydantic import SecretStr, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# model_config.env_file=".env" is only used when running uvicorn / celery directly
# on the host (outside Docker): it then reads backend/.env

class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="",
        case_sensitive=False,
    )

    # ========= project config =========
    PROJECT_NAME: str = "Catalog Forge"
    ENVIRONMENT: str = "dev"
    API_PREFIX: str = "/api/v1"
    BACKEND_CORS_ORIGINS: str = "http://localhost:5173"


    # ========= Database =========
    # - inside containers the default points at the "db" service of docker-compose
    DATABASE_URL: str = Field(
        default="postgresql+psycopg://cf_user:cf_pass@db:5432/catalog_forge",
        alias="DATABASE_URL"
    )


    # ========= celery config =========
    CELERY_BROKER_URL: Optional[str] = None
    CELERY_RESULT_BACKEND: Optional[str] = None
    CELERY_TIMEZONE: str = "UTC"
    CATALOG_QUEUE_NAME: str = Field(default="catalog_generation", alias="CATALOG_QUEUE_NAME")
    # True: the worker logic runs inside the submitting process (debug / local dev)
    CATALOG_TASKS_INLINE: bool = Field(default=False, alias="CATALOG_TASKS_INLINE")


    # ========= catalog pipeline =========
    CATALOG_BATCH_SIZE: int = Field(10, ge=1, le=100, alias="CATALOG_BATCH_SIZE")
    CATALOG_BATCH_PAUSE_SEC: float = Field(1.0, ge=0, alias="CATALOG_BATCH_PAUSE_SEC")   # fixed cooldown between batches


    # ========= OpenAI generation =========
    OPENAI_API_KEY: Optional[SecretStr] = Field(None, alias="OPENAI_API_KEY")
    OPENAI_TIMEOUT_SEC: float = Field(120.0, ge=1, alias="OPENAI_TIMEOUT_SEC")
    OPENAI_PROMPT_WOOCOMMERCE_ID: Optional[str] = Field(None, alias="OPENAI_PROMPT_WOOCOMMERCE_ID")
    OPENAI_PROMPT_WOOCOMMERCE_VERSION: str = Field("1", alias="OPENAI_PROMPT_WOOCOMMERCE_VERSION")
    OPENAI_PROMPT_SHOPIFY_ID: Optional[str] = Field(None, alias="OPENAI_PROMPT_SHOPIFY_ID")
    OPENAI_PROMPT_SHOPIFY_VERSION: str = Field("1", alias="OPENAI_PROMPT_SHOPIFY_VERSION")

    # 1 = single attempt per batch (no duplicate paid generations).
    # Raising it only retries transient failures (network / timeout / 429 / 5xx).
    GENERATION_MAX_ATTEMPTS: int = Field(1, ge=1, le=5, alias="GENERATION_MAX_ATTEMPTS")
    GENERATION_RETRY_BASE_SEC: int = Field(10, ge=1, alias="GENERATION_RETRY_BASE_SEC")
    GENERATION_RETRY_MAX_SEC: int = Field(120, ge=1, alias="GENERATION_RETRY_MAX_SEC")


    # ========= content cache (Redis) =========
    CONTENT_CACHE_ENABLED: bool = Field(True, alias="CONTENT_CACHE_ENABLED")
    CONTENT_CACHE_REDIS_URL: Optional[str] = Field(None, alias="CONTENT_CACHE_REDIS_URL")
    CONTENT_CACHE_TTL_SEC: int = Field(30 * 24 * 3600, ge=60, alias="CONTENT_CACHE_TTL_SEC")   # 30 days
    CONTENT_CACHE_KEY_PREFIX: str = Field("ai:products", alias="CONTENT_CACHE_KEY_PREFIX")


    # Redis used for the cache; falls back to the broker when not set
    @property
    def redis_for_cache(self) -> Optional[str]:
        return self.CONTENT_CACHE_REDIS_URL or self.CELERY_BROKER_URL


settings = Settings()  # environment only (including .env)
