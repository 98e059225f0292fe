from __future__ import annotations

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, ready, to_number
from .kinds import WidgetKind
from .proxy import Auth, Mapping, WidgetDefinition

LABELS = ("changedetectionio.diffsDetected", "changedetectionio.totalObserved")


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    watches = payloads["watch"].data
    diffs = sum(
        1 for w in watches.values()
        if to_number(w.get("last_changed")) > 0 and not w.get("viewed")
    )
    return ready(
        selected,
        NormalizedField("changedetectionio.diffsDetected", diffs),
        NormalizedField("changedetectionio.totalObserved", len(watches)),
    )


widget = WidgetDefinition(
    kind=WidgetKind.CHANGEDETECTIONIO,
    api="{url}/api/v1/{endpoint}",
    mappings={"watch": Mapping("watch")},
    auth=Auth.header("x-api-key"),
    normalize=normalize,
    placeholders=LABELS,
)
