from __future__ import annotations

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, dig, ready
from .kinds import WidgetKind
from .proxy import Mapping, WidgetDefinition

LABELS = ("prometheus.targets_up", "prometheus.targets_down", "prometheus.targets_total")


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    targets = dig(payloads["targets"].data, "data", "activeTargets", default=[]) or []
    return ready(
        selected,
        NormalizedField("prometheus.targets_up", sum(1 for t in targets if t.get("health") == "up")),
        NormalizedField("prometheus.targets_down", sum(1 for t in targets if t.get("health") == "down")),
        NormalizedField("prometheus.targets_total", len(targets)),
    )


widget = WidgetDefinition(
    kind=WidgetKind.PROMETHEUS,
    api="{url}/api/v1/{endpoint}",
    mappings={"targets": Mapping("targets", params={"state": "active"})},
    normalize=normalize,
    placeholders=LABELS,
)
