from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from .models import WORK_END, AnchorSet, ObservanceKind, TimeOfDay


@dataclass(frozen=True)
class CountdownState:
    seconds_to_next_observance: int
    seconds_to_work_end: int
    next_observance: ObservanceKind
    observance_target: datetime
    work_target: datetime

    @property
    def observance_countdown(self) -> str:
        return format_countdown(self.seconds_to_next_observance)

    @property
    def work_countdown(self) -> str:
        return format_countdown(self.seconds_to_work_end)


def seconds_between(start: datetime, end: datetime) -> int:
    """Whole seconds from ``start`` to ``end``, truncated toward zero."""
    return int((end - start).total_seconds())


def resolve_countdown(
    anchors: AnchorSet,
    now: datetime,
    work_end: TimeOfDay = WORK_END,
) -> CountdownState:
    today = now.date()
    iftar_time = anchors.iftar_start.on(today)
    sahur_time = anchors.sahur_start.on(today)
    work_end_time = work_end.on(today)

    next_observance: ObservanceKind
    if now > iftar_time:
        target_time = sahur_time + timedelta(days=1)
        work_target_time = work_end_time + timedelta(days=1)
        next_observance = "sahur"
    elif now < sahur_time:
        target_time = sahur_time
        work_target_time = work_end_time
        next_observance = "sahur"
    else:
        # Between 17:00 and iftar the work target is already behind us and
        # clamps to zero below.
        target_time = iftar_time
        work_target_time = work_end_time
        next_observance = "iftar"

    return CountdownState(
        seconds_to_next_observance=seconds_between(now, target_time),
        seconds_to_work_end=max(0, seconds_between(now, work_target_time)),
        next_observance=next_observance,
        observance_target=target_time,
        work_target=work_target_time,
    )


def format_countdown(seconds: int) -> str:
    if seconds < 0:
        return "-" + format_countdown(-seconds)

    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60
    return f"{hours:02}:{minutes:02}:{secs:02}"
