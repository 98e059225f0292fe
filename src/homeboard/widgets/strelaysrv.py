from __future__ import annotations

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, dig, ready
from .kinds import WidgetKind
from .proxy import Mapping, WidgetDefinition

LABELS = (
    "strelaysrv.numActiveSessions",
    "strelaysrv.numConnections",
    "strelaysrv.dataRelayed",
    "strelaysrv.transferRate",
)

# kbps10s1m5m15m30m60m holds rates over 10s, 1m, 5m, 15m, 30m and 60m;
# the tile always shows the 60 minute window.
RATE_WINDOW = 5


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    status = payloads["status"].data
    return ready(
        selected,
        NormalizedField("strelaysrv.numActiveSessions", status.get("numActiveSessions")),
        NormalizedField("strelaysrv.numConnections", status.get("numConnections")),
        NormalizedField("strelaysrv.dataRelayed", status.get("bytesProxied")),
        NormalizedField("strelaysrv.transferRate", dig(status, "kbps10s1m5m15m30m60m", RATE_WINDOW)),
    )


widget = WidgetDefinition(
    kind=WidgetKind.STRELAYSRV,
    api="{url}/{endpoint}",
    mappings={"status": Mapping("status")},
    normalize=normalize,
    placeholders=LABELS,
)
