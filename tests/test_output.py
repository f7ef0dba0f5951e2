from __future__ import annotations

import io
from datetime import date, datetime

from rich.console import Console

from iftarnow_cli.countdown import resolve_countdown
from iftarnow_cli.engine import EngineState
from iftarnow_cli.models import AnchorSet, FetchError, Location, Ready, TimeOfDay
from iftarnow_cli.output import build_panel

LOCATION = Location(city="Ankara", country="Turkey")
ANCHORS = AnchorSet(sahur_start=TimeOfDay(4, 30), iftar_start=TimeOfDay(18, 45))


def _render(state: EngineState) -> str:
    console = Console(file=io.StringIO(), width=80, record=True)
    console.print(build_panel(LOCATION, state, date(2026, 3, 5), 300.0))
    return console.export_text()


def test_loading_panel() -> None:
    assert "Loading prayer times" in _render(EngineState())


def test_error_panel_shows_reason() -> None:
    text = _render(EngineState(fetch=FetchError("Request timed out after 10 seconds")))

    assert "Connection error" in text
    assert "Request timed out after 10 seconds" in text
    assert "300 seconds" in text


def test_countdown_panel() -> None:
    countdown = resolve_countdown(ANCHORS, datetime(2026, 3, 5, 19, 0))

    text = _render(EngineState(fetch=Ready(ANCHORS), countdown=countdown))

    assert "05.03.2026" in text
    assert "Time until sahur" in text
    assert "09:30:00" in text
    assert "Work ends in: 22:00:00" in text
    assert "04:30" in text
    assert "18:45" in text
