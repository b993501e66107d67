"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from datetime import timezone, tzinfo
from pathlib import Path
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

load_dotenv()

_WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_weekday(name: str, default: str = "monday") -> int:
    """Return the weekday index (Monday=0) named by an environment variable."""

    value = (os.getenv(name) or default).strip().lower()
    if value not in _WEEKDAYS:
        raise ValueError(f"{name} must be one of {', '.join(_WEEKDAYS)}; got {value!r}")
    return _WEEKDAYS.index(value)


def _env_timezone(name: str) -> Optional[tzinfo]:
    """Return the zone named by an environment variable; None means server-local time."""

    value = (os.getenv(name) or "").strip()
    if not value:
        return None
    if value.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(
            f"{name} must be an IANA zone name such as Europe/Paris; got {value!r}"
        ) from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "BudgetWise"
    DB_FILENAME = "budgetwise.db"
    TESTING = False

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("BUDGETWISE_SECRET_KEY", "replace-me")
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("BUDGETWISE_DEV_MODE", default=True)
        self.LOG_LEVEL = os.getenv("BUDGETWISE_LOG_LEVEL", "INFO").upper()
        self.WEEK_START = _env_weekday("BUDGETWISE_WEEK_START")
        self.TIMEZONE = _env_timezone("BUDGETWISE_TIMEZONE")
        self.DATABASE_URL = os.getenv("BUDGETWISE_DATABASE_URL", self._build_sqlite_url())
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("BUDGETWISE_SECRET_KEY must be set in non-dev mode.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("BUDGETWISE_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside the data directory."""

        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {"pool_pre_ping": True}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True


class TestConfig(BaseConfig):
    """Configuration used by the test-suite and `create_app("testing")`."""

    TESTING = True
