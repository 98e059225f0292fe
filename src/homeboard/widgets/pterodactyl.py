from __future__ import annotations

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, dig, ready
from .kinds import WidgetKind
from .proxy import Auth, Mapping, WidgetDefinition

LABELS = ("pterodactyl.nodes", "pterodactyl.servers")


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    nodes = payloads["nodes"].data.get("data") or []
    servers = sum(
        len(dig(n, "attributes", "relationships", "servers", "data", default=[]) or []) for n in nodes
    )
    return ready(
        selected,
        NormalizedField("pterodactyl.nodes", len(nodes)),
        NormalizedField("pterodactyl.servers", servers),
    )


widget = WidgetDefinition(
    kind=WidgetKind.PTERODACTYL,
    api="{url}/api/application/{endpoint}",
    mappings={"nodes": Mapping("nodes", params={"include": "servers"})},
    auth=Auth.bearer(),
    headers={"Accept": "application/json"},
    normalize=normalize,
    placeholders=LABELS,
)
