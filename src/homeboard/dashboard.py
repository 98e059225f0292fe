from __future__ import annotations

import asyncio
from dataclasses import dataclass
from functools import partial
import logging
from typing import Any, Callable, Iterable, Iterator, Sequence

from .config import Config
from .services import GroupRecord, ServiceRecord, build_forest
from .sources import ServiceSource, default_sources
from .widgets import refresh_widget
from .widgets.base import Error, Ready, WidgetResult
from .widgets.poller import TilePoller
from .widgets.proxy import Transport

logger = logging.getLogger(__name__)


async def _fetch_guarded(source: ServiceSource) -> list[GroupRecord]:
    try:
        return await asyncio.to_thread(source.fetch)
    except Exception as e:
        logger.error("Service source %s failed, contributing nothing: %s", source.name, e)
        return []


async def collect_service_groups(cfg: Config, sources: Sequence[ServiceSource] | None = None) -> list[GroupRecord]:
    """Query every source concurrently and merge what they return.

    A failing source never fails the aggregation; it is logged and treated
    as empty. Merge priority follows the order of ``sources``.
    """
    if sources is None:
        sources = default_sources(cfg)
    results = await asyncio.gather(*(_fetch_guarded(s) for s in sources))
    return build_forest(*results)


def iter_services(forest: Iterable[GroupRecord]) -> Iterator[tuple[str, ServiceRecord]]:
    for group in forest:
        for service in group.services:
            yield group.name, service
        yield from iter_services(group.groups)


@dataclass(frozen=True)
class WidgetReport:
    group: str
    service: str
    result: WidgetResult

    def to_dict(self) -> dict[str, Any]:
        return {"group": self.group, "service": self.service, **result_to_dict(self.result)}


def result_to_dict(result: WidgetResult) -> dict[str, Any]:
    if isinstance(result, Error):
        return {"state": "error", "error": result.message}
    state = "ready" if isinstance(result, Ready) else "loading"
    return {"state": state, "fields": {f.label: f.value for f in result.fields}}


async def _refresh_guarded(service: ServiceRecord, transport: Transport | None) -> WidgetResult:
    try:
        return await refresh_widget(service.widget, transport)
    except Exception as e:
        logger.exception("Widget of service %r failed", service.name)
        return Error(message=str(e))


async def collect_widget_results(forest: Iterable[GroupRecord], transport: Transport | None = None) -> list[WidgetReport]:
    """Refresh every declared widget once, in forest order."""
    targets = [(group, service) for group, service in iter_services(forest) if service.widget is not None]
    results = await asyncio.gather(*(_refresh_guarded(service, transport) for _, service in targets))
    return [
        WidgetReport(group=group, service=service.name, result=result)
        for (group, service), result in zip(targets, results)
    ]


def tile_pollers(
    forest: Iterable[GroupRecord],
    cfg: Config,
    transport: Transport | None = None,
    on_result: Callable[[str, WidgetResult], None] | None = None,
) -> dict[str, TilePoller]:
    """One idle poller per widget, keyed by ``"group/service"``."""
    pollers = {}
    for group, service in iter_services(forest):
        if service.widget is None:
            continue
        key = f"{group}/{service.name}"
        if key in pollers:
            # duplicate names within a group
            key = f"{key}#{len(pollers)}"
        callback = None
        if on_result is not None:
            callback = partial(on_result, key)
        pollers[key] = TilePoller(
            service.widget,
            on_result=callback,
            transport=transport,
            default_interval=cfg.default_refresh_interval,
        )
    return pollers
