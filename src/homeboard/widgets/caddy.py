from __future__ import annotations

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, ready, sum_of
from .kinds import WidgetKind
from .proxy import Mapping, WidgetDefinition

LABELS = ("caddy.upstreams", "caddy.requests", "caddy.requests_failed")


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    upstreams = payloads["upstreams"].data
    return ready(
        selected,
        NormalizedField("caddy.upstreams", len(upstreams)),
        NormalizedField("caddy.requests", sum_of(upstreams, "num_requests")),
        NormalizedField("caddy.requests_failed", sum_of(upstreams, "fails")),
    )


widget = WidgetDefinition(
    kind=WidgetKind.CADDY,
    api="{url}/{endpoint}",
    mappings={"upstreams": Mapping("reverse_proxy/upstreams")},
    normalize=normalize,
    placeholders=LABELS,
)
