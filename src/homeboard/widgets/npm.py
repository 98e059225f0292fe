from __future__ import annotations

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, count_truthy, ready
from .kinds import WidgetKind
from .proxy import Auth, Mapping, WidgetDefinition

LABELS = ("npm.enabled", "npm.disabled", "npm.total")


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    hosts = payloads["hosts"].data
    enabled = count_truthy(hosts, "enabled")
    return ready(
        selected,
        NormalizedField("npm.enabled", enabled),
        NormalizedField("npm.disabled", len(hosts) - enabled),
        NormalizedField("npm.total", len(hosts)),
    )


widget = WidgetDefinition(
    kind=WidgetKind.NPM,
    api="{url}/api/{endpoint}",
    mappings={"hosts": Mapping("nginx/proxy-hosts")},
    auth=Auth.bearer(),
    normalize=normalize,
    placeholders=LABELS,
)
