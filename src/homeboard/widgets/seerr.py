"""Seerr request counts (also serves the legacy overseerr/jellyseerr types)."""

from __future__ import annotations

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, dig, ready, replace_field
from .kinds import WidgetKind
from .proxy import Auth, Mapping, WidgetDefinition

DEFAULT_FIELDS = ("pending", "approved", "completed")
LABELS = (
    "seerr.pending",
    "seerr.processing",
    "seerr.approved",
    "seerr.available",
    "seerr.completed",
    "seerr.issues",
)


def _select_mappings(spec: WidgetSpec, selected: tuple[str, ...]) -> tuple[str, ...]:
    if "issues" in selected:
        return ("request/count", "issue/count")
    return ("request/count",)


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    stats = payloads["request/count"].data
    if "completed" not in stats:
        # servers older than the "completed" counter only report "available"
        selected = replace_field(selected, "completed", "available")

    issues = None
    if "issue/count" in payloads:
        data = payloads["issue/count"].data
        issues = f"{dig(data, 'open')} / {dig(data, 'total')}"

    return ready(
        selected,
        NormalizedField("seerr.pending", stats.get("pending")),
        NormalizedField("seerr.processing", stats.get("processing")),
        NormalizedField("seerr.approved", stats.get("approved")),
        NormalizedField("seerr.available", stats.get("available")),
        NormalizedField("seerr.completed", stats.get("completed")),
        NormalizedField("seerr.issues", issues),
    )


widget = WidgetDefinition(
    kind=WidgetKind.SEERR,
    api="{url}/api/v1/{endpoint}",
    mappings={
        "request/count": Mapping("request/count"),
        "issue/count": Mapping("issue/count"),
    },
    auth=Auth.header("X-Api-Key"),
    normalize=normalize,
    placeholders=LABELS,
    default_fields=DEFAULT_FIELDS,
    select_mappings=_select_mappings,
)
