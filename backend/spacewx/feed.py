"""Periodic Kp series feed.

Fetches the CSV resource on start and then every `interval` seconds, parses it,
and replaces the held series wholesale. Any failure resets the series to empty
(never a stale or partial mix) and is logged; nothing is raised to the caller.
"""

from __future__ import annotations

import asyncio
import logging
import pathlib
import time
from urllib.parse import urljoin

import httpx

from spacewx.config import DEFAULT_REFRESH_SECONDS, Settings
from spacewx.errors import FetchFailure
from spacewx.models import Measurement
from spacewx.parser import parse_series

logger = logging.getLogger(__name__)


def resolve_source(source: str, base_url: str | None = None) -> str:
    """Absolute URL for http(s) sources, or the plain path for local files."""
    if source.startswith(("http://", "https://")):
        return source
    if base_url:
        return urljoin(base_url.rstrip("/") + "/", source.lstrip("/"))
    return source


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


class DataFeed:
    """Holds the current Kp series and refreshes it on a fixed cadence."""

    def __init__(
        self,
        source: str,
        interval: float = DEFAULT_REFRESH_SECONDS,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        self.source = source
        self.interval = interval
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout
        self._series: list[Measurement] = []
        self._task: asyncio.Task | None = None
        self._refresh_lock = asyncio.Lock()
        self.last_refreshed: float | None = None
        self.last_error: str | None = None

    @classmethod
    def from_settings(cls, settings: Settings, client: httpx.AsyncClient | None = None) -> DataFeed:
        return cls(
            source=resolve_source(settings.data_source, settings.base_url),
            interval=settings.refresh_seconds,
            client=client,
            timeout=settings.http_timeout,
        )

    @property
    def series(self) -> list[Measurement]:
        return list(self._series)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    # --- Fetching ---

    async def _fetch_text(self) -> str:
        if not _is_url(self.source):
            try:
                return await asyncio.to_thread(pathlib.Path(self.source).read_text, encoding="utf-8")
            except OSError as exc:
                raise FetchFailure(f"cannot read {self.source}: {exc}") from exc

        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout, follow_redirects=True)
        try:
            resp = await self._client.get(self.source)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise FetchFailure(f"cannot fetch {self.source}: {exc}") from exc
        return resp.text

    async def refresh(self) -> list[Measurement]:
        """
        Fetch and parse once. Returns the new series ([] on any failure).

        Refreshes are serialised: a manual refresh that overlaps a timer tick
        waits for it, so results are applied in the order fetches started.
        """
        async with self._refresh_lock:
            return await self._refresh_once()

    async def _refresh_once(self) -> list[Measurement]:
        try:
            text = await self._fetch_text()
            series = parse_series(text)
        except Exception as exc:
            logger.exception("Kp series refresh failed; holding an empty series")
            self._series = []
            self.last_error = str(exc)
            return []

        self._series = series
        self.last_refreshed = time.time()
        self.last_error = None
        logger.info("Kp series refreshed: %d measurements from %s", len(series), self.source)
        return self.series

    # --- Timer ---

    async def _run(self) -> None:
        while True:
            await self.refresh()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        """Refresh now and then every `interval` seconds. Needs a running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="kp-feed")
        logger.info("Kp feed started (every %.0fs).", self.interval)

    async def stop(self) -> None:
        """Cancel the refresh timer and release the HTTP client if we created it."""
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            logger.info("Kp feed stopped.")
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> DataFeed:
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()
