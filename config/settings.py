"""Application settings and configuration management."""
from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    DB_PATH: str = Field(default="data/mock_interview.db")
    LLM_CONFIG_PATH: Optional[str] = None

    MAX_FOLLOW_UPS: int = Field(default=2, ge=0)
    DEFAULT_QUESTION_COUNT: int = Field(default=10, ge=1)
    MAX_QUESTION_COUNT: int = Field(default=50, ge=1)
    CONTEXT_CHAR_LIMIT: int = Field(default=4000, ge=200)

    LOG_LEVEL: str = Field(default="INFO")
    ENABLE_FILE_LOGS: bool = True
    LOG_FILE: str = Field(default="logs/mock-interview.jsonl")
    LOG_MAX_BYTES: int = Field(default=5_242_880, ge=1024)
    LOG_BACKUP_COUNT: int = Field(default=5, ge=0)

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True, extra="ignore")


settings = Settings()
