from __future__ import annotations

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, ready
from .kinds import WidgetKind
from .proxy import Mapping, WidgetDefinition

STREAMS = ("all", "active", "xepg")


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    status = payloads["status"].data
    return ready(
        selected,
        *(NormalizedField(f"xteve.streams_{s}", status.get(f"streams.{s}")) for s in STREAMS),
    )


widget = WidgetDefinition(
    kind=WidgetKind.XTEVE,
    api="{url}/api/",
    mappings={"status": Mapping("", method="POST", body={"cmd": "status"})},
    normalize=normalize,
    placeholders=tuple(f"xteve.streams_{s}" for s in STREAMS),
)
