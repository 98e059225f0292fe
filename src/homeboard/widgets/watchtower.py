from __future__ import annotations

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, ready, to_number
from .kinds import WidgetKind
from .proxy import Auth, Mapping, WidgetDefinition

METRICS = ("containers_scanned", "containers_updated", "containers_failed")


def parse_metrics(text: str) -> dict[str, int | float]:
    """Read the Prometheus text exposition format into ``{name: value}``."""
    metrics: dict[str, int | float] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        parts = line.split()
        if len(parts) >= 2:
            metrics[parts[0]] = to_number(parts[1])
    return metrics


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    data = payloads["metrics"].data
    metrics = parse_metrics(data) if isinstance(data, str) else data
    return ready(
        selected,
        *(NormalizedField(f"watchtower.{m}", metrics.get(f"watchtower_{m}")) for m in METRICS),
    )


widget = WidgetDefinition(
    kind=WidgetKind.WATCHTOWER,
    api="{url}/{endpoint}",
    mappings={"metrics": Mapping("v1/metrics", format="text")},
    auth=Auth.bearer(),
    normalize=normalize,
    placeholders=tuple(f"watchtower.{m}" for m in METRICS),
)
