from __future__ import annotations

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, dig, ready
from .kinds import WidgetKind
from .proxy import Mapping, WidgetDefinition

LABELS = ("netdata.warnings", "netdata.criticals")


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    info = payloads["info"].data
    return ready(
        selected,
        NormalizedField("netdata.warnings", dig(info, "alarms", "warning")),
        NormalizedField("netdata.criticals", dig(info, "alarms", "critical")),
    )


widget = WidgetDefinition(
    kind=WidgetKind.NETDATA,
    api="{url}/api/v1/{endpoint}",
    mappings={"info": Mapping("info")},
    normalize=normalize,
    placeholders=LABELS,
)
