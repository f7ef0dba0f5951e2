from __future__ import annotations

import asyncio
import json
from datetime import date, datetime
from typing import Optional

import typer
from rich.console import Console, RenderableType
from rich.live import Live

from . import __version__
from .anchor_api import fetch_today_anchors, make_anchor_provider
from .config import CONFIG_PATH, Config, load_config, save_config
from .countdown import resolve_countdown
from .engine import CountdownEngine, EngineState
from .logging_utils import configure_logging
from .models import FetchError, TimeOfDay
from .output import build_panel

app = typer.Typer(
    help="IftarNow CLI",
    no_args_is_help=False,
    invoke_without_command=True,
    add_completion=True,
)
console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"iftarnow-cli {__version__}")
        raise typer.Exit()


def _parse_work_end(value: str) -> TimeOfDay:
    try:
        return TimeOfDay.parse(value)
    except ValueError as exc:
        raise typer.BadParameter("work end must look like HH:MM or HH:MM:SS") from exc


def _print_config(config: Config) -> None:
    console.print_json(json.dumps(config.to_dict(), ensure_ascii=False, indent=2))
    console.print(f"[dim]Config path:[/dim] {CONFIG_PATH}")


def _show_once(config: Config) -> None:
    result = asyncio.run(
        fetch_today_anchors(config.location, timeout=config.request_timeout_sec)
    )
    if isinstance(result, FetchError):
        console.print(f"[red]{result.reason}[/red]")
        raise typer.Exit(code=1)

    countdown = resolve_countdown(result.anchors, datetime.now(), config.work_end)
    state = EngineState(fetch=result, countdown=countdown)
    console.print(build_panel(config.location, state, date.today(), config.retry_interval_sec))


async def _run_live(config: Config) -> None:
    engine = CountdownEngine(
        make_anchor_provider(config),
        work_end=config.work_end,
        retry_interval=config.retry_interval_sec,
    )

    def _render(state: EngineState) -> RenderableType:
        return build_panel(config.location, state, date.today(), config.retry_interval_sec)

    with Live(_render(engine.get_state()), console=console, refresh_per_second=4) as live:
        unsubscribe = engine.subscribe(lambda state: live.update(_render(state)))
        try:
            async with engine:
                await asyncio.Event().wait()
        finally:
            unsubscribe()


@app.callback(invoke_without_command=True)
def root(
    ctx: typer.Context,
    once: bool = typer.Option(False, "--once", help="Show the countdown once and exit."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Show a live countdown to the next iftar or sahur and to the end of the work day."""
    _ = version
    configure_logging(console, verbose)
    if ctx.invoked_subcommand is not None:
        return

    config = load_config()
    if once:
        _show_once(config)
        return

    try:
        asyncio.run(_run_live(config))
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped.[/dim]")


@app.command("config")
def config_command(
    show: bool = typer.Option(False, "--show", help="Print current configuration."),
    city: Optional[str] = typer.Option(None, "--city"),
    country: Optional[str] = typer.Option(None, "--country"),
    method: Optional[int] = typer.Option(
        None,
        "--method",
        min=0,
        help="AlAdhan calculation method id (13 is Diyanet).",
    ),
    work_end: Optional[str] = typer.Option(
        None,
        "--work-end",
        help="End of the work day, HH:MM or HH:MM:SS.",
    ),
) -> None:
    """Set the city, calculation method, and work-end time."""
    config = load_config()

    has_update_flags = any(
        value is not None for value in (city, country, method, work_end)
    )
    if not has_update_flags:
        _print_config(config)
        return

    if city is not None:
        config.location.city = city
    if country is not None:
        config.location.country = country
    if method is not None:
        config.location.method = method
    if work_end is not None:
        config.work_end = _parse_work_end(work_end)

    save_config(config)
    console.print("[green]Configuration saved.[/green]")
    if show:
        _print_config(config)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
