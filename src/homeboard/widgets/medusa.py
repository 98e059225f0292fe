from __future__ import annotations

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, dig, ready
from .kinds import WidgetKind
from .proxy import Mapping, WidgetDefinition

LABELS = ("medusa.wanted", "medusa.queued", "medusa.series")

FUTURE_BUCKETS = ("later", "missed", "soon", "today")


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    future = dig(payloads["future"].data, "data", default={})
    stats = dig(payloads["stats"].data, "data", default={})
    wanted = sum(len(future.get(bucket) or []) for bucket in FUTURE_BUCKETS)
    return ready(
        selected,
        NormalizedField("medusa.wanted", wanted),
        NormalizedField("medusa.queued", stats.get("ep_snatched")),
        NormalizedField("medusa.series", stats.get("shows_active")),
    )


# the API key is part of the path, not a header
widget = WidgetDefinition(
    kind=WidgetKind.MEDUSA,
    api="{url}/api/v1/{key}/{endpoint}",
    mappings={
        "future": Mapping("", params={"cmd": "future"}),
        "stats": Mapping("", params={"cmd": "shows.stats"}),
    },
    normalize=normalize,
    placeholders=LABELS,
)
