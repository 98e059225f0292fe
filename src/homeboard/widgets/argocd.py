from __future__ import annotations

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, dig, ready
from .kinds import WidgetKind
from .proxy import Auth, Mapping, WidgetDefinition

LABELS = (
    "argocd.apps",
    "argocd.synced",
    "argocd.outOfSync",
    "argocd.healthy",
    "argocd.progressing",
    "argocd.degraded",
    "argocd.suspended",
    "argocd.missing",
)


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    items = payloads["applications"].data.get("items") or []

    def sync(status: str) -> int:
        return sum(1 for app in items if dig(app, "status", "sync", "status") == status)

    def health(status: str) -> int:
        return sum(1 for app in items if dig(app, "status", "health", "status") == status)

    return ready(
        selected,
        NormalizedField("argocd.apps", len(items)),
        NormalizedField("argocd.synced", sync("Synced")),
        NormalizedField("argocd.outOfSync", sync("OutOfSync")),
        NormalizedField("argocd.healthy", health("Healthy")),
        NormalizedField("argocd.progressing", health("Progressing")),
        NormalizedField("argocd.degraded", health("Degraded")),
        NormalizedField("argocd.suspended", health("Suspended")),
        NormalizedField("argocd.missing", health("Missing")),
    )


widget = WidgetDefinition(
    kind=WidgetKind.ARGOCD,
    api="{url}/api/v1/{endpoint}",
    mappings={"applications": Mapping("applications")},
    auth=Auth.bearer(),
    normalize=normalize,
    placeholders=LABELS,
    default_fields=("apps", "synced", "outOfSync", "healthy"),
)
