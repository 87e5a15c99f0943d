"""Runtime settings, read from the environment (and a ``.env`` file)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from canteen.domain.clock import Clock, system_clock
from canteen.domain.model.value_objects import DEFAULT_CURRENCY

# When installed in editable mode the project root is the repo root.
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

LOG_FORMATS = ("json", "console")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    timezone: tzinfo | None = None  # None = host local time
    currency: str = DEFAULT_CURRENCY
    urgent_after: timedelta = timedelta(minutes=15)
    log_level: str = "WARNING"
    log_format: str = "json"

    def clock(self) -> Clock:
        """Store-local clock for stamping orders and picking "today"."""
        if self.timezone is None:
            return system_clock
        tz = self.timezone
        return lambda: datetime.now(tz)


def load_settings(env_file: str | None = None) -> Settings:
    load_dotenv(env_file)

    data_dir = os.getenv("CANTEEN_DATA_DIR")
    tz_name = os.getenv("CANTEEN_TIMEZONE")
    urgent = os.getenv("CANTEEN_URGENT_MINUTES", "15")
    log_format = os.getenv("CANTEEN_LOG_FORMAT", "json").lower()

    timezone = None
    if tz_name:
        try:
            timezone = ZoneInfo(tz_name)
        except ZoneInfoNotFoundError as exc:
            raise ValueError(f"CANTEEN_TIMEZONE: unknown zone {tz_name!r}") from exc

    try:
        urgent_minutes = int(urgent)
    except ValueError as exc:
        raise ValueError(f"CANTEEN_URGENT_MINUTES must be an integer, got {urgent!r}") from exc
    if urgent_minutes <= 0:
        raise ValueError("CANTEEN_URGENT_MINUTES must be positive")

    if log_format not in LOG_FORMATS:
        raise ValueError(f"CANTEEN_LOG_FORMAT must be one of {', '.join(LOG_FORMATS)}")

    log_level = os.getenv("CANTEEN_LOG_LEVEL", "WARNING").upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(f"CANTEEN_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")

    return Settings(
        data_dir=Path(data_dir).expanduser() if data_dir else DEFAULT_DATA_DIR,
        timezone=timezone,
        currency=os.getenv("CANTEEN_CURRENCY", DEFAULT_CURRENCY),
        urgent_after=timedelta(minutes=urgent_minutes),
        log_level=log_level,
        log_format=log_format,
    )
