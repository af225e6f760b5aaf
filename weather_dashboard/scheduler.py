"""Periodic forced refresh of the tracked cities.

The loop only ever talks to `WeatherClient.fetch_forecast`; cache freshness
and overwrite rules live there. Each fetch runs in its own task, so stopping
the loop stops the timer without aborting requests already in flight.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

from .errors import FetchError
from .settings import settings
from .weather_client import WeatherClient

logger = logging.getLogger(__name__)

ResultCallback = Callable[[str, Optional[Dict[str, Any]], Optional[Exception]], None]


class RefreshScheduler:
    def __init__(
        self,
        client: WeatherClient,
        cities: Callable[[], Iterable[str]],
        interval: Optional[float] = None,
        on_result: Optional[ResultCallback] = None,
    ):
        self.client = client
        self.cities = cities
        self.interval = settings.refresh_interval if interval is None else interval
        self.on_result = on_result
        self._task: Optional[asyncio.Task] = None
        self._inflight: Set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Load every tracked city once, then force-refresh them every `interval` seconds."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info("Refresh loop started (every %ss)", self.interval)

    async def stop(self) -> None:
        """Stop the timer. Fetches already started are left to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Refresh loop stopped")

    async def refresh_once(self, force_refresh: bool = True) -> None:
        """Fetch every tracked city now and wait for all of them to settle."""
        await asyncio.gather(*self._spawn_all(force_refresh))

    async def wait_idle(self) -> None:
        """Wait until no fetch started by this scheduler is still running."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight))

    async def _run(self) -> None:
        self._spawn_all(force_refresh=False)
        while True:
            await asyncio.sleep(self.interval)
            self._spawn_all(force_refresh=True)

    def _spawn_all(self, force_refresh: bool) -> List[asyncio.Task]:
        tasks = []
        for city in list(self.cities()):
            task = asyncio.create_task(self._refresh_city(city, force_refresh))
            self._inflight.add(task)
            task.add_done_callback(self._inflight.discard)
            tasks.append(task)
        return tasks

    async def _refresh_city(self, city: str, force_refresh: bool) -> None:
        try:
            data = await self.client.fetch_forecast(city, force_refresh=force_refresh)
        except FetchError as exc:
            logger.warning("Refresh of %s failed: %s", city, exc)
            self._report(city, None, exc)
        except Exception as exc:
            logger.exception("Unexpected error refreshing %s", city)
            self._report(city, None, exc)
        else:
            self._report(city, data, None)

    def _report(self, city: str, data: Optional[Dict[str, Any]], error: Optional[Exception]) -> None:
        if self.on_result is not None:
            self.on_result(city, data, error)
