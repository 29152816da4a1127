from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RESTMAN_", case_sensitive=False, extra="ignore")

    data_dir: Path = Field(default_factory=lambda: Path.home() / ".restman")
    log_level: str = Field(default="WARNING")
    log_file: Path | None = Field(default=None)

    request_timeout_sec: float = Field(default=30.0, ge=0.1, le=600.0)
    follow_redirects: bool = Field(default=True)

    history_limit: int = Field(default=100, ge=1, le=10000)
    toast_timeout_sec: float = Field(default=3.0, ge=0.5, le=60.0)

    @field_validator("data_dir", "log_file")
    @classmethod
    def _expand_user(cls, value: Path | None) -> Path | None:
        return value.expanduser() if value is not None else None

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return level

    @property
    def environments_file(self) -> Path:
        return self.data_dir / "environments.json"

    @property
    def history_file(self) -> Path:
        return self.data_dir / "history.json"

    @property
    def saved_requests_file(self) -> Path:
        return self.data_dir / "saved-requests.json"

    def resolved_log_file(self) -> Path:
        return self.log_file if self.log_file is not None else self.data_dir / "restman.log"


def get_settings(**overrides: Any) -> Settings:
    return Settings(**{k: v for k, v in overrides.items() if v is not None})
