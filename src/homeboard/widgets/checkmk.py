from __future__ import annotations

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, ready
from .kinds import WidgetKind
from .proxy import Auth, Mapping, WidgetDefinition

LABELS = ("checkmk.serviceErrors", "checkmk.hostErrors")

NOT_OK = {"columns": "state", "query": '{"op": "!=", "left": "state", "right": "0"}'}


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    return ready(
        selected,
        NormalizedField("checkmk.serviceErrors", len(payloads["services_info"].data.get("value") or [])),
        NormalizedField("checkmk.hostErrors", len(payloads["hosts_info"].data.get("value") or [])),
    )


widget = WidgetDefinition(
    kind=WidgetKind.CHECKMK,
    api="{url}/{site}/check_mk/api/1.0/{endpoint}",
    mappings={
        "services_info": Mapping("domain-types/service/collections/all", params=NOT_OK),
        "hosts_info": Mapping("domain-types/host/collections/all", params=NOT_OK),
    },
    auth=Auth.header("Authorization", "Bearer {username} {password}"),
    headers={"Accept": "application/json"},
    normalize=normalize,
    placeholders=LABELS,
)
