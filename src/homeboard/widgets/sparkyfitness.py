from __future__ import annotations

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, ready
from .kinds import WidgetKind
from .proxy import Auth, Mapping, WidgetDefinition

KEYS = ("eaten", "burned", "remaining", "steps")


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    stats = payloads["stats"].data
    return ready(selected, *(NormalizedField(f"sparkyfitness.{key}", stats.get(key)) for key in KEYS))


widget = WidgetDefinition(
    kind=WidgetKind.SPARKYFITNESS,
    api="{url}/{endpoint}",
    mappings={"stats": Mapping("api/dashboard/stats", validate=KEYS)},
    auth=Auth.header("X-Api-Key"),
    normalize=normalize,
    placeholders=tuple(f"sparkyfitness.{key}" for key in KEYS),
)
