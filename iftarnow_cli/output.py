from __future__ import annotations

from datetime import date

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .countdown import CountdownState
from .engine import EngineState
from .models import AnchorSet, FetchError, Location, ObservanceKind, Ready

OBSERVANCE_LABELS: dict[ObservanceKind, str] = {
    "iftar": "Time until iftar",
    "sahur": "Time until sahur",
}


def format_date_for_display(day: date) -> str:
    return day.strftime("%d.%m.%Y")


def build_loading_panel(location: Location) -> Panel:
    body = Group(
        Text(f"{location.city}, {location.country}", style="bold"),
        Text("Loading prayer times...", style="dim"),
    )
    return Panel(body, title="IftarNow", border_style="blue")


def build_error_panel(location: Location, reason: str, retry_interval_sec: float) -> Panel:
    body = Group(
        Text(f"{location.city}, {location.country}", style="bold"),
        Text("Connection error", style="bold red"),
        Text(reason, style="red"),
        Text(
            f"Prayer times are unavailable right now. Retrying every {retry_interval_sec:g} seconds.",
            style="dim",
        ),
    )
    return Panel(body, title="IftarNow", border_style="red")


def build_anchor_table(anchors: AnchorSet, next_observance: ObservanceKind) -> Table:
    table = Table(show_header=True, header_style="bold cyan", expand=False)
    table.add_column("Iftar", justify="center")
    table.add_column("Sahur", justify="center")
    table.add_row(
        Text(str(anchors.iftar_start), style="bold green" if next_observance == "iftar" else ""),
        Text(str(anchors.sahur_start), style="bold green" if next_observance == "sahur" else ""),
    )
    return table


def build_countdown_panel(
    location: Location,
    anchors: AnchorSet,
    countdown: CountdownState,
    today: date,
) -> Panel:
    body = Group(
        Text(f"{location.city}, {location.country}", style="bold"),
        Text(format_date_for_display(today), style="dim"),
        Text(OBSERVANCE_LABELS[countdown.next_observance], style="bold"),
        Text(countdown.observance_countdown, style="bold yellow"),
        Text(f"Work ends in: {countdown.work_countdown}", style="yellow"),
        build_anchor_table(anchors, countdown.next_observance),
    )
    return Panel(body, title="IftarNow", border_style="green")


def build_panel(
    location: Location,
    state: EngineState,
    today: date,
    retry_interval_sec: float,
) -> RenderableType:
    if isinstance(state.fetch, FetchError):
        return build_error_panel(location, state.fetch.reason, retry_interval_sec)
    if isinstance(state.fetch, Ready) and state.countdown is not None:
        return build_countdown_panel(location, state.fetch.anchors, state.countdown, today)
    return build_loading_panel(location)
