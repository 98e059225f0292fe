from __future__ import annotations

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, ready
from .kinds import WidgetKind
from .proxy import Auth, Mapping, WidgetDefinition

LABELS = ("plantit.events", "plantit.plants", "plantit.photos", "plantit.species")


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    stats = payloads["stats"].data
    return ready(
        selected,
        NormalizedField("plantit.events", stats.get("diaryEntryCount")),
        NormalizedField("plantit.plants", stats.get("plantCount")),
        NormalizedField("plantit.photos", stats.get("imageCount")),
        NormalizedField("plantit.species", stats.get("botanicalInfoCount")),
    )


widget = WidgetDefinition(
    kind=WidgetKind.PLANTIT,
    api="{url}/api/{endpoint}",
    mappings={"stats": Mapping("stats")},
    auth=Auth.header("Key"),
    normalize=normalize,
    placeholders=LABELS,
)
