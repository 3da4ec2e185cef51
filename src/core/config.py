"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings read from the environment (or ``.env``), one field per variable."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Service
    app_name: str = Field(default="bcstart.ai API")
    app_env: str = Field(default="development", description="development, staging or production")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated origins of the roadmap web client",
    )
    rate_limit_enabled: bool = Field(default=True)

    # Storage and identity (Supabase)
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/bcstart",
        description="Supabase Postgres URL; a plain postgresql:// scheme is accepted",
    )
    supabase_url: str = Field(default="", description="e.g. https://xyzabc.supabase.co")
    jwt_secret_key: str = Field(
        default="CHANGE-ME-IN-PRODUCTION",
        description="Shared secret for HS256 tokens minted by tests and local tooling",
    )
    jwt_algorithm: str = Field(default="HS256")
    jwt_expire_minutes: int = Field(default=30)

    # Roadmap behaviour
    enable_test_data_reset: bool = Field(
        default=False,
        description="Mount the destructive /dev reset routes",
    )
    strict_status_transitions: bool = Field(
        default=False,
        description="Reject status changes outside the transition table",
    )

    # AI task generation
    task_generation_url: str = Field(
        default="",
        description="Serverless function that proposes tasks for a business",
    )
    task_generation_api_key: str = Field(default="")
    ai_request_timeout_seconds: float = Field(default=60.0, gt=0)

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def async_database_url(self) -> str:
        """``database_url`` with the asyncpg driver the async engine needs."""
        for prefix in ("postgresql://", "postgres://"):
            if self.database_url.startswith(prefix):
                return "postgresql+asyncpg://" + self.database_url[len(prefix):]
        return self.database_url

    @computed_field  # type: ignore[prop-decorator]
    @property
    def supabase_jwks_url(self) -> str:
        """Where ES256 session-token keys are published; empty without Supabase."""
        if not self.supabase_url:
            return ""
        return f"{self.supabase_url.rstrip('/')}/auth/v1/.well-known/jwks.json"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
