from __future__ import annotations

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, dig, ready, to_number
from .kinds import WidgetKind
from .proxy import Mapping, WidgetDefinition

LABELS = ("myspeed.download", "myspeed.upload", "myspeed.ping")


def _bits(mbit):
    if mbit is None:
        return None
    return to_number(mbit) * 1000 * 1000


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    latest = dig(payloads["speedtests"].data, 0, default={})
    return ready(
        selected,
        NormalizedField("myspeed.download", _bits(latest.get("download"))),
        NormalizedField("myspeed.upload", _bits(latest.get("upload"))),
        NormalizedField("myspeed.ping", latest.get("ping")),
    )


widget = WidgetDefinition(
    kind=WidgetKind.MYSPEED,
    api="{url}/api/{endpoint}",
    mappings={"speedtests": Mapping("speedtests", params={"limit": 1})},
    normalize=normalize,
    placeholders=LABELS,
)
