from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Literal, Union

ObservanceKind = Literal["iftar", "sahur"]

_TIME_PATTERN = re.compile(r"\s*(\d{1,2}):(\d{2})(?::(\d{2}))?\b")


@dataclass(frozen=True)
class TimeOfDay:
    hour: int
    minute: int
    second: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.hour <= 23:
            raise ValueError(f"hour out of range: {self.hour}")
        if not 0 <= self.minute <= 59:
            raise ValueError(f"minute out of range: {self.minute}")
        if not 0 <= self.second <= 59:
            raise ValueError(f"second out of range: {self.second}")

    @classmethod
    def parse(cls, value: str) -> "TimeOfDay":
        """Parse ``HH:MM`` or ``HH:MM:SS``, ignoring suffixes like ``" (+03)"``."""
        match = _TIME_PATTERN.match(value)
        if not match:
            raise ValueError(f"not a time of day: {value!r}")
        return cls(
            hour=int(match.group(1)),
            minute=int(match.group(2)),
            second=int(match.group(3) or 0),
        )

    def on(self, day: date) -> datetime:
        return datetime.combine(day, time(self.hour, self.minute, self.second))

    def isoformat(self) -> str:
        return f"{self.hour:02}:{self.minute:02}:{self.second:02}"

    def __str__(self) -> str:
        if self.second:
            return self.isoformat()
        return f"{self.hour:02}:{self.minute:02}"


WORK_END = TimeOfDay(17, 0, 0)


@dataclass(frozen=True)
class AnchorSet:
    sahur_start: TimeOfDay
    iftar_start: TimeOfDay


@dataclass
class Location:
    city: str
    country: str
    method: int = 13

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Location":
        return cls(
            city=str(data["city"]),
            country=str(data["country"]),
            method=int(data.get("method", 13)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "city": self.city,
            "country": self.country,
            "method": self.method,
        }


@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class Ready:
    anchors: AnchorSet


@dataclass(frozen=True)
class FetchError:
    reason: str


FetchState = Union[Loading, Ready, FetchError]

