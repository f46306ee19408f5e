from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, model_validator


class FetchSettings(BaseModel):
    retries: int = Field(default=2, ge=0)
    timeout_seconds: float = Field(default=8.0, gt=0)
    max_backoff_seconds: float = Field(default=5.0, ge=0)


class SearchSettings(BaseModel):
    max_sources: int = Field(default=30, ge=1)
    max_return: int = Field(default=200, ge=1)
    default_page_size: int = 50
    min_page_size: int = Field(default=10, ge=1)
    max_page_size: int = 100
    max_workers: int = Field(default=8, ge=1)

    @model_validator(mode="after")
    def _check_page_bounds(self) -> "SearchSettings":
        if not (self.min_page_size <= self.default_page_size <= self.max_page_size):
            raise ValueError(
                "page sizes must satisfy min_page_size <= default_page_size <= max_page_size "
                f"(got {self.min_page_size}, {self.default_page_size}, {self.max_page_size})"
            )
        return self


class LoggingSettings(BaseModel):
    level: str = "INFO"


class Settings(BaseModel):
    version: int = 1
    fetch: FetchSettings = Field(default_factory=FetchSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_config(path: Optional[str] = None) -> Settings:
    if path is None:
        return Settings()

    p = Path(path).expanduser()
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")

    with p.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config must be a YAML mapping (dict). Got: {type(raw)}")

    return Settings(**raw)
