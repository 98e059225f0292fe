from __future__ import annotations

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, ready, sum_of
from .kinds import WidgetKind
from .proxy import Auth, Mapping, WidgetDefinition

LABELS = (
    "prowlarr.numberOfGrabs",
    "prowlarr.numberOfQueries",
    "prowlarr.numberOfFailGrabs",
    "prowlarr.numberOfFailQueries",
)


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    indexers = payloads["indexerstats"].data.get("indexers") or []
    return ready(
        selected,
        NormalizedField("prowlarr.numberOfGrabs", sum_of(indexers, "numberOfGrabs")),
        NormalizedField("prowlarr.numberOfQueries", sum_of(indexers, "numberOfQueries")),
        NormalizedField("prowlarr.numberOfFailGrabs", sum_of(indexers, "numberOfFailedGrabs")),
        NormalizedField("prowlarr.numberOfFailQueries", sum_of(indexers, "numberOfFailedQueries")),
    )


widget = WidgetDefinition(
    kind=WidgetKind.PROWLARR,
    api="{url}/api/v1/{endpoint}",
    mappings={"indexerstats": Mapping("indexerstats")},
    auth=Auth.header("X-Api-Key"),
    normalize=normalize,
    placeholders=LABELS,
)
