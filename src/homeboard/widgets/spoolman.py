from __future__ import annotations

from .base import MAX_FIELDS, NormalizedField, Payload, Ready, WidgetResult, WidgetSpec, dig, percent
from .kinds import WidgetKind
from .proxy import Mapping, WidgetDefinition


def _spool_field(spool: dict) -> NormalizedField:
    name = dig(spool, "filament", "name") or f"#{spool.get('id')}"
    initial = spool.get("initial_weight") or dig(spool, "filament", "weight")
    return NormalizedField(name, percent(spool.get("remaining_weight"), initial))


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    spools = payloads["spools"].data
    wanted = spec.option("spoolIds")
    if isinstance(wanted, str):
        wanted = [part.strip() for part in wanted.split(",") if part.strip()]
    if wanted:
        wanted = {str(i) for i in wanted}
        spools = [s for s in spools if str(s.get("id")) in wanted]
    if not spools:
        return Ready((NormalizedField("spoolman.noSpools"),))
    return Ready(tuple(_spool_field(s) for s in spools[:MAX_FIELDS]))


widget = WidgetDefinition(
    kind=WidgetKind.SPOOLMAN,
    api="{url}/api/v1/{endpoint}",
    mappings={"spools": Mapping("spool")},
    normalize=normalize,
)
