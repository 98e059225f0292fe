from __future__ import annotations

from .base import NormalizedField, Payload, Ready, WidgetResult, WidgetSpec, dig, ready, to_number
from .kinds import WidgetKind
from .proxy import Mapping, WidgetDefinition

LABELS = ("frigate.cameras", "frigate.uptime", "frigate.version")


def _select_mappings(spec: WidgetSpec, selected: tuple[str, ...]) -> tuple[str, ...]:
    if spec.option("enableRecentEvents"):
        return ("stats", "events")
    return ("stats",)


def _event_field(event: dict) -> NormalizedField:
    score = event.get("score", dig(event, "data", "score", default=0))
    label = f"{event.get('camera')} ({event.get('label')} {round(to_number(score) * 100)})"
    return NormalizedField(label, event.get("start_time"))


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    stats = payloads["stats"].data
    if "num_cameras" in stats:
        cameras = stats["num_cameras"]
    else:
        cameras = len(stats.get("cameras") or {})
    summary = ready(
        selected,
        NormalizedField("frigate.cameras", cameras),
        NormalizedField("frigate.uptime", stats.get("uptime", dig(stats, "service", "uptime"))),
        NormalizedField("frigate.version", stats.get("version", dig(stats, "service", "version"))),
    )
    events = payloads.get("events")
    if events is None or not isinstance(events.data, list):
        return summary
    return Ready(summary.fields + tuple(_event_field(e) for e in events.data))


widget = WidgetDefinition(
    kind=WidgetKind.FRIGATE,
    api="{url}/api/{endpoint}",
    mappings={
        "stats": Mapping("stats"),
        "events": Mapping("events", params={"limit": 5}),
    },
    normalize=normalize,
    placeholders=LABELS,
    select_mappings=_select_mappings,
)
