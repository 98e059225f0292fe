from __future__ import annotations

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, dig, ready
from .kinds import WidgetKind
from .proxy import Auth, Mapping, WidgetDefinition

LABELS = ("tandoor.users", "tandoor.recipes", "tandoor.keywords")


def _space(data) -> dict:
    # paginated in newer releases, a bare list or object in older ones
    if isinstance(data, dict) and "results" in data:
        return dig(data, "results", 0, default={}) or {}
    if isinstance(data, list):
        return dig(data, 0, default={}) or {}
    return data


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    space = _space(payloads["space"].data)
    return ready(
        selected,
        NormalizedField("tandoor.users", space.get("user_count")),
        NormalizedField("tandoor.recipes", space.get("recipe_count")),
        NormalizedField("tandoor.keywords", dig(payloads["keyword"].data, "count")),
    )


widget = WidgetDefinition(
    kind=WidgetKind.TANDOOR,
    api="{url}/api/{endpoint}/",
    mappings={"space": Mapping("space"), "keyword": Mapping("keyword")},
    auth=Auth.bearer(),
    normalize=normalize,
    placeholders=LABELS,
)
