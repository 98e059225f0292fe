from __future__ import annotations

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, dig, ready
from .kinds import WidgetKind
from .proxy import Mapping, WidgetDefinition

LABELS = ("traefik.routers", "traefik.services", "traefik.middleware")


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    http = dig(payloads["overview"].data, "http", default={})
    return ready(
        selected,
        NormalizedField("traefik.routers", dig(http, "routers", "total")),
        NormalizedField("traefik.services", dig(http, "services", "total")),
        NormalizedField("traefik.middleware", dig(http, "middlewares", "total")),
    )


widget = WidgetDefinition(
    kind=WidgetKind.TRAEFIK,
    api="{url}/api/{endpoint}",
    mappings={"overview": Mapping("overview")},
    normalize=normalize,
    placeholders=LABELS,
)
