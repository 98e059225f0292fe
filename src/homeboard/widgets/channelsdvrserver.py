from __future__ import annotations

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, dig, ready
from .kinds import WidgetKind
from .proxy import Mapping, WidgetDefinition

LABELS = (
    "channelsdvrserver.shows",
    "channelsdvrserver.recordings",
    "channelsdvrserver.scheduled",
    "channelsdvrserver.passes",
)


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    stats = dig(payloads["dvr"].data, "stats", default={})
    return ready(
        selected,
        NormalizedField("channelsdvrserver.shows", stats.get("groups")),
        NormalizedField("channelsdvrserver.recordings", stats.get("files")),
        NormalizedField("channelsdvrserver.scheduled", stats.get("jobs")),
        NormalizedField("channelsdvrserver.passes", stats.get("rules")),
    )


widget = WidgetDefinition(
    kind=WidgetKind.CHANNELSDVRSERVER,
    api="{url}/{endpoint}",
    mappings={"dvr": Mapping("dvr")},
    normalize=normalize,
    placeholders=LABELS,
)
