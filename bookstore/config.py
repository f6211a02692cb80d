import os

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

load_dotenv(".env")


def _default_db_url() -> str:
    env_url = os.getenv("APP_DATABASE_URL") or os.getenv("DATABASE_URL")
    if env_url:
        return env_url

    port = os.getenv("DB_PORT", "")
    url = URL.create(
        "postgresql+psycopg",
        username=os.getenv("DB_USER", "") or None,
        password=os.getenv("DB_PASSWORD", "") or None,
        host=os.getenv("DB_HOST", "") or None,
        port=int(port) if port else None,
        database=os.getenv("DB_NAME", "") or None,
    )
    return url.render_as_string(hide_password=False)


class Settings(BaseSettings):
    app_name: str = "Bookstore API"
    version: str = "1.0.0"
    database_url: str = Field(default_factory=_default_db_url)
    # 20 idle + 5 overflow = 25 open connections at most
    db_pool_size: int = 20
    db_max_overflow: int = 5
    db_pool_recycle_seconds: int = 300
    cors_origins: str = "*"
    otel_enabled: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def allowed_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


def get_settings() -> Settings:
    return Settings()
