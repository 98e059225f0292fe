"""Timer-driven refresh of a single dashboard tile.

Each tile owns one poller. The last published result stays in ``result``
while the next request is in flight, so the tile never blanks out.
"""

from __future__ import annotations

import asyncio
from contextlib import suppress
import logging
from typing import Callable

from . import get_definition, refresh_widget
from .base import Error, WidgetResult, WidgetSpec, loading
from .proxy import HttpTransport, Transport

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_INTERVAL = 10.0
MAX_BACKOFF = 300.0


class TilePoller:
    def __init__(
        self,
        spec: WidgetSpec,
        on_result: Callable[[WidgetResult], None] | None = None,
        transport: Transport | None = None,
        default_interval: float = DEFAULT_REFRESH_INTERVAL,
        max_backoff: float = MAX_BACKOFF,
    ) -> None:
        self._spec = spec
        self._on_result = on_result
        # one connection pool per tile, reused across refreshes
        self._transport = transport if transport is not None else HttpTransport()
        self.default_interval = default_interval
        self.max_backoff = max_backoff
        self._generation = 0
        self._task: asyncio.Task | None = None
        self.result: WidgetResult = self._placeholder(spec)

    @property
    def spec(self) -> WidgetSpec:
        return self._spec

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @staticmethod
    def _placeholder(spec: WidgetSpec) -> WidgetResult:
        definition = get_definition(spec.kind)
        return loading(definition.fields_for(spec), definition.placeholders)

    def interval(self) -> float:
        definition = get_definition(self._spec.kind)
        return self._spec.refresh_interval or definition.refresh_interval or self.default_interval

    def delay(self, failures: int) -> float:
        base = self.interval()
        if failures <= 0:
            return base
        return min(base * 2 ** failures, max(self.max_backoff, base))

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(self._generation, self._spec))

    async def _run(self, generation: int, spec: WidgetSpec) -> None:
        failures = 0
        while True:
            try:
                result = await refresh_widget(spec, self._transport)
            except Exception as e:
                logger.exception("Refreshing %s widget failed", spec.kind.value)
                result = Error(str(e))
            if generation != self._generation:
                # superseded by update_spec() or stop()
                return
            self._publish(result)
            failures = failures + 1 if isinstance(result, Error) else 0
            await asyncio.sleep(self.delay(failures))

    def _publish(self, result: WidgetResult) -> None:
        self.result = result
        if self._on_result is not None:
            self._on_result(result)

    def update_spec(self, spec: WidgetSpec) -> None:
        self._generation += 1
        if self._task is not None:
            self._task.cancel()
            self._task = None
        self._spec = spec
        self.result = self._placeholder(spec)
        self.start()

    async def stop(self) -> None:
        self._generation += 1
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task
