"""Application settings and configuration.

This module defines all configuration options for the Rap Arena API.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Rap Arena", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./rap_arena.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Bearer tokens are issued by the identity provider; we only verify them.
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 30,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Content limits
    max_post_length: int = Field(default=2000, alias="MAX_POST_LENGTH")
    max_comment_length: int = Field(default=500, alias="MAX_COMMENT_LENGTH")
    max_title_length: int = Field(default=120, alias="MAX_TITLE_LENGTH")
    max_audio_bytes: int = Field(default=25 * 1024 * 1024, alias="MAX_AUDIO_BYTES")

    # Object storage (any S3-compatible endpoint)
    storage_endpoint_url: str | None = Field(default=None, alias="STORAGE_ENDPOINT_URL")
    storage_access_key: str | None = Field(default=None, alias="STORAGE_ACCESS_KEY")
    storage_secret_key: str | None = Field(default=None, alias="STORAGE_SECRET_KEY")
    storage_region: str = Field(default="us-east-1", alias="STORAGE_REGION")
    storage_recordings_bucket: str = Field(
        default="recordings",
        alias="STORAGE_RECORDINGS_BUCKET",
    )
    storage_beats_bucket: str = Field(default="beats", alias="STORAGE_BEATS_BUCKET")

    # Background retry of failed object deletions
    storage_cleanup_enabled: bool = Field(default=True, alias="STORAGE_CLEANUP_ENABLED")
    storage_cleanup_interval_seconds: float = Field(
        default=30.0,
        alias="STORAGE_CLEANUP_INTERVAL_SECONDS",
    )
    storage_cleanup_batch_size: int = Field(default=20, alias="STORAGE_CLEANUP_BATCH_SIZE")
    storage_cleanup_max_retries: int = Field(default=5, alias="STORAGE_CLEANUP_MAX_RETRIES")

    # Notifications
    notifications_page_limit: int = Field(default=20, alias="NOTIFICATIONS_PAGE_LIMIT")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts asyncpg URLs to psycopg for synchronous database operations
        like Alembic migrations.
        """
        url = self.database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url


settings = Settings()  # type: ignore[call-arg]
