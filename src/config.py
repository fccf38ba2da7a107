"""Configuration management for the application."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    mysql_host: str = Field(default="localhost")
    mysql_port: int = Field(default=3306)
    mysql_user: str = Field(default="root")
    mysql_password: str = Field(default="")
    mysql_database: str = Field(default="ecotracker")
    database_url: str | None = Field(default=None)
    db_pool_size: int = Field(default=10, ge=1)

    # Session cookie
    session_cookie_name: str = Field(default="session")
    session_max_age: int = Field(default=60 * 60 * 24 * 7)  # 7 days
    register_sets_session: bool = Field(default=False)

    # Password hashing
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)

    # Artificial latency on credential endpoints
    register_delay_seconds: float = Field(default=1.8, ge=0)
    login_delay_seconds: float = Field(default=1.5, ge=0)

    # Session gate
    protected_page_prefixes: list[str] = Field(default=["/dashboard"])
    protected_api_prefixes: list[str] = Field(default=["/api/dashboard"])

    # API
    app_name: str = Field(default="EcoTracker")
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")
    cors_origins: list[str] = Field(default=["http://localhost:3000"])

    @property
    def sqlalchemy_url(self) -> str | URL:
        """Connection URL, DATABASE_URL taking precedence over the MYSQL_* parts."""
        if self.database_url:
            return self.database_url
        return URL.create(
            "mysql+pymysql",
            username=self.mysql_user,
            password=self.mysql_password or None,
            host=self.mysql_host,
            port=self.mysql_port,
            database=self.mysql_database,
        )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
