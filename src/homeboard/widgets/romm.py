from __future__ import annotations

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, ready
from .kinds import WidgetKind
from .proxy import Auth, Mapping, WidgetDefinition

# display key -> upstream stats key
STATS = {
    "platforms": "PLATFORMS",
    "totalRoms": "ROMS",
    "saves": "SAVES",
    "states": "STATES",
    "screenshots": "SCREENSHOTS",
    "totalfilesize": "FILESIZE",
}


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    stats = payloads["stats"].data
    return ready(selected, *(NormalizedField(f"romm.{key}", stats.get(up)) for key, up in STATS.items()))


widget = WidgetDefinition(
    kind=WidgetKind.ROMM,
    api="{url}/api/{endpoint}",
    mappings={"stats": Mapping("stats")},
    auth=Auth.basic(),
    normalize=normalize,
    placeholders=tuple(f"romm.{key}" for key in STATS),
    default_fields=("platforms", "totalRoms", "saves", "states"),
)
