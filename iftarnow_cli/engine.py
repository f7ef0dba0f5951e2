from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Awaitable, Callable

from .anchor_api import AnchorProvider
from .countdown import CountdownState, resolve_countdown
from .models import WORK_END, FetchError, FetchState, Loading, Ready, TimeOfDay

TICK_INTERVAL_SEC = 1.0
RETRY_INTERVAL_SEC = 300.0

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineState:
    fetch: FetchState = field(default_factory=Loading)
    countdown: CountdownState | None = None


Listener = Callable[[EngineState], None]


class CountdownEngine:
    """Owns the fetch state and the live countdown derived from it.

    Two tasks run while the engine is started: one fetches today's anchors
    and retries every ``retry_interval`` seconds until it succeeds, the other
    recomputes the countdown every ``tick_interval`` seconds. They only share
    the state cell, which nothing but the engine writes to.
    """

    def __init__(
        self,
        provider: AnchorProvider,
        *,
        work_end: TimeOfDay = WORK_END,
        tick_interval: float = TICK_INTERVAL_SEC,
        retry_interval: float = RETRY_INTERVAL_SEC,
        clock: Callable[[], datetime] = datetime.now,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._provider = provider
        self._work_end = work_end
        self._tick_interval = tick_interval
        self._retry_interval = retry_interval
        self._clock = clock
        self._sleep = sleep
        self._state = EngineState()
        self._listeners: list[Listener] = []
        self._fetch_in_progress = False
        self._tasks: list[asyncio.Task[None]] = []

    @property
    def running(self) -> bool:
        return bool(self._tasks)

    @property
    def fetch_in_progress(self) -> bool:
        return self._fetch_in_progress

    def get_state(self) -> EngineState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, state: EngineState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:  # noqa: BLE001
                logger.exception("State listener failed")

    async def refresh(self) -> FetchState:
        """Call the provider once, unless a call is already in flight."""
        if self._fetch_in_progress:
            logger.debug("Fetch already in progress, not starting another")
            return self._state.fetch

        self._fetch_in_progress = True
        try:
            result = await self._provider()
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error while fetching prayer times")
            result = FetchError(f"Unexpected error: {exc}")
        finally:
            self._fetch_in_progress = False

        if isinstance(result, Ready):
            countdown = resolve_countdown(result.anchors, self._clock(), self._work_end)
            self._publish(EngineState(fetch=result, countdown=countdown))
        else:
            self._publish(EngineState(fetch=result))
        return result

    def tick(self) -> CountdownState | None:
        fetch = self._state.fetch
        if not isinstance(fetch, Ready):
            return None

        countdown = resolve_countdown(fetch.anchors, self._clock(), self._work_end)
        self._publish(EngineState(fetch=fetch, countdown=countdown))
        return countdown

    async def _fetch_loop(self) -> None:
        state = await self.refresh()
        while not isinstance(state, Ready):
            logger.info("Retrying prayer times fetch in %g seconds", self._retry_interval)
            await self._sleep(self._retry_interval)
            state = await self.refresh()

    async def _tick_loop(self) -> None:
        while True:
            await self._sleep(self._tick_interval)
            self.tick()

    async def start(self) -> None:
        if self._tasks:
            return
        self._tasks = [
            asyncio.create_task(self._fetch_loop(), name="iftarnow-fetch"),
            asyncio.create_task(self._tick_loop(), name="iftarnow-tick"),
        ]

    async def stop(self) -> None:
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        results = await asyncio.gather(*tasks, return_exceptions=True)
        for task, result in zip(tasks, results):
            if isinstance(result, Exception):
                logger.error("Task %s failed: %s", task.get_name(), result)

    async def __aenter__(self) -> "CountdownEngine":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()
