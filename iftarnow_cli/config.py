from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .models import WORK_END, Location, TimeOfDay

CONFIG_DIR = Path.home() / ".config" / "iftarnow"
CONFIG_PATH = CONFIG_DIR / "config.json"

DEFAULT_RETRY_INTERVAL_SEC = 300.0
DEFAULT_REQUEST_TIMEOUT_SEC = 10.0


def default_location() -> Location:
    return Location(city="Ankara", country="Turkey", method=13)


@dataclass
class Config:
    location: Location = field(default_factory=default_location)
    work_end: TimeOfDay = WORK_END
    retry_interval_sec: float = DEFAULT_RETRY_INTERVAL_SEC
    request_timeout_sec: float = DEFAULT_REQUEST_TIMEOUT_SEC

    def to_dict(self) -> dict[str, Any]:
        return {
            "location": self.location.to_dict(),
            "work_end": self.work_end.isoformat(),
            "retry_interval_sec": self.retry_interval_sec,
            "request_timeout_sec": self.request_timeout_sec,
        }


def _sanitize_work_end(value: Any) -> TimeOfDay:
    if isinstance(value, str):
        try:
            return TimeOfDay.parse(value)
        except ValueError:
            pass
    return WORK_END


def _sanitize_positive(value: Any, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value) if value > 0 else default


def default_config() -> Config:
    return Config()


def load_config() -> Config:
    if not CONFIG_PATH.exists():
        config = default_config()
        save_config(config)
        return config

    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        config = default_config()
        save_config(config)
        return config

    if not isinstance(data, dict):
        data = {}

    location_raw = data.get("location")
    if isinstance(location_raw, dict):
        try:
            location = Location.from_dict(location_raw)
        except (KeyError, TypeError, ValueError):
            location = default_location()
    else:
        location = default_location()

    return Config(
        location=location,
        work_end=_sanitize_work_end(data.get("work_end")),
        retry_interval_sec=_sanitize_positive(
            data.get("retry_interval_sec"), DEFAULT_RETRY_INTERVAL_SEC
        ),
        request_timeout_sec=_sanitize_positive(
            data.get("request_timeout_sec"), DEFAULT_REQUEST_TIMEOUT_SEC
        ),
    )


def save_config(config: Config) -> None:
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    CONFIG_PATH.write_text(json.dumps(config.to_dict(), indent=2) + "\n", encoding="utf-8")
