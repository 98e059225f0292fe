from __future__ import annotations

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, dig, ready
from .kinds import WidgetKind
from .proxy import Auth, Mapping, WidgetDefinition

LABELS = ("cloudflared.status", "cloudflared.origin_ip")


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    result = payloads["cfd_tunnel"].data.get("result") or {}
    status = result.get("status")
    if status:
        status = status[0].upper() + status[1:]
    connections = result.get("connections")
    # older tunnels report a single connection object, newer ones a list
    if isinstance(connections, list):
        origin_ip = dig(connections, 0, "origin_ip")
    else:
        origin_ip = dig(connections, "origin_ip")
    return ready(
        selected,
        NormalizedField("cloudflared.status", status),
        NormalizedField("cloudflared.origin_ip", origin_ip),
    )


widget = WidgetDefinition(
    kind=WidgetKind.CLOUDFLARED,
    api="https://api.cloudflare.com/client/v4/accounts/{accountid}/cfd_tunnel/{tunnelid}",
    mappings={"cfd_tunnel": Mapping("")},
    auth=Auth.bearer(),
    normalize=normalize,
    placeholders=LABELS,
)
