from __future__ import annotations

from datetime import datetime, timedelta, timezone

from dateutil import parser as dtparser

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, dig, ready
from .kinds import WidgetKind
from .proxy import Auth, Mapping, WidgetDefinition

LABELS = ("tailscale.address", "tailscale.last_seen", "tailscale.expires")

_UNITS = (
    ("year", 365 * 24 * 3600),
    ("month", 30 * 24 * 3600),
    ("week", 7 * 24 * 3600),
    ("day", 24 * 3600),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
)


def _humanize(delta: timedelta) -> str:
    seconds = int(abs(delta.total_seconds()))
    for unit, size in _UNITS:
        if seconds >= size:
            count = seconds // size
            return f"{count} {unit}{'' if count == 1 else 's'}"
    return "0 seconds"


def _parse(value: str | None) -> datetime | None:
    if not value:
        return None
    dt = dtparser.isoparse(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def normalize(
    payloads: dict[str, Payload],
    spec: WidgetSpec,
    selected: tuple[str, ...],
    now: datetime | None = None,
) -> WidgetResult:
    device = payloads["device"].data
    now = now or datetime.now(timezone.utc)

    seen = _parse(device.get("lastSeen"))
    last_seen = f"{_humanize(now - seen)} ago" if seen else None

    if device.get("keyExpiryDisabled"):
        expires = "never"
    else:
        expiry = _parse(device.get("expires"))
        if expiry is None:
            expires = None
        elif expiry <= now:
            expires = "expired"
        else:
            expires = f"in {_humanize(expiry - now)}"

    return ready(
        selected,
        NormalizedField("tailscale.address", dig(device, "addresses", 0)),
        NormalizedField("tailscale.last_seen", last_seen),
        NormalizedField("tailscale.expires", expires),
    )


widget = WidgetDefinition(
    kind=WidgetKind.TAILSCALE,
    api="https://api.tailscale.com/api/v2/{endpoint}/{deviceid}",
    mappings={"device": Mapping("device")},
    auth=Auth.bearer(),
    normalize=normalize,
    placeholders=LABELS,
)
