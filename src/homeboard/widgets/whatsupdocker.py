from __future__ import annotations

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, count_truthy, ready
from .kinds import WidgetKind
from .proxy import Mapping, WidgetDefinition

LABELS = ("whatsupdocker.monitoring", "whatsupdocker.updates")


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    containers = payloads["containers"].data
    return ready(
        selected,
        NormalizedField("whatsupdocker.monitoring", len(containers)),
        NormalizedField("whatsupdocker.updates", count_truthy(containers, "updateAvailable")),
    )


widget = WidgetDefinition(
    kind=WidgetKind.WHATSUPDOCKER,
    api="{url}/api/{endpoint}",
    mappings={"containers": Mapping("containers")},
    normalize=normalize,
    placeholders=LABELS,
)
