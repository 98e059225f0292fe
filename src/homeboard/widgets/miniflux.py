from __future__ import annotations

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, ready, to_number
from .kinds import WidgetKind
from .proxy import Auth, Mapping, WidgetDefinition

LABELS = ("miniflux.unread", "miniflux.read")


def _total(counters: dict, per_feed: str, flat: str):
    if isinstance(counters.get(per_feed), dict):
        return sum(to_number(v) for v in counters[per_feed].values())
    return counters.get(flat)


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    counters = payloads["counters"].data
    return ready(
        selected,
        NormalizedField("miniflux.unread", _total(counters, "unreads", "unread")),
        NormalizedField("miniflux.read", _total(counters, "reads", "read")),
    )


widget = WidgetDefinition(
    kind=WidgetKind.MINIFLUX,
    api="{url}/v1/{endpoint}",
    mappings={"counters": Mapping("feeds/counters")},
    auth=Auth.header("X-Auth-Token"),
    normalize=normalize,
    placeholders=LABELS,
)
