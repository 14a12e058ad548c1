"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="DEALS_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Happy Hour Deals API"
    api_prefix: str = "/api"
    data_root: Path = Field(default=Path("data"), description="Root directory for static data files.")
    establishments_file: Path = Field(
        default=Path("data/establishments.csv"),
        description="Imported establishment sheet with latitude/longitude columns.",
    )
    deals_file: Path = Field(
        default=Path("data/deals.csv"),
        description="Imported happy hour deal sheet.",
    )
    default_radius_km: float = Field(
        default=1.0,
        gt=0.0,
        description="Search radius used when a request does not specify one.",
    )
    max_radius_km: float = Field(default=50.0, gt=0.0)
    upcoming_window_minutes: int = Field(
        default=60,
        ge=1,
        description="How far ahead (minutes) a same-day deal counts as upcoming.",
    )
    max_results_per_bucket: Optional[int] = Field(
        default=None,
        ge=1,
        description="Cap applied to each result bucket after sorting. Unset means unlimited.",
    )
    timezone: str = Field(
        default="Asia/Singapore",
        description="Civil timezone used to build the reference instant for queries.",
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("data_root", "establishments_file", "deals_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
