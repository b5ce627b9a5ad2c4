"""Service configuration loaded from environment variables (and an optional .env)."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings.

    Variables are read without a prefix: DB_URL, PORT, LOG_LEVEL,
    LOG_OUTPUT and LOG_FILE_PATH.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    db_url: str = Field(..., description="PostgreSQL connection string")
    port: int = Field(default=8080, ge=1, le=65535, description="HTTP server port")
    log_level: str = Field(default="info", description="debug, info, warn or error")
    log_output: str = Field(default="stdout", description="Log output: stdout or file")
    log_file_path: str = Field(default="./app.log", description="Log file path (if log_output=file)")

    @field_validator("log_level", "log_output")
    @classmethod
    def _normalize(cls, value: str) -> str:
        return value.strip().lower()


def load_settings() -> Settings:
    return Settings()
