from __future__ import annotations

from dataclasses import dataclass, field
import json
from typing import Any, Iterable, Mapping, Union

from .kinds import UnknownWidgetError, WidgetKind, resolve_kind

MAX_FIELDS = 4
CREDENTIAL_KEYS = ("key", "username", "password", "token")
_RESERVED_KEYS = {"type", "url", "fields", "refresh_interval", "refreshInterval"}


@dataclass(frozen=True)
class WidgetSpec:
    kind: WidgetKind
    url: str = ""
    credentials: dict[str, str] = field(default_factory=dict)
    fields: tuple[str, ...] = ()
    refresh_interval: float | None = None
    options: dict[str, Any] = field(default_factory=dict)

    def option(self, key: str, default: Any = None) -> Any:
        return self.options.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        # credentials are never serialized
        return {
            "type": self.kind.value,
            "url": self.url,
            "fields": list(self.fields),
            "refresh_interval": self.refresh_interval,
            "options": dict(self.options),
        }


@dataclass(frozen=True)
class NormalizedField:
    label: str
    value: str | int | float | None = None

    @property
    def key(self) -> str:
        return self.label.rsplit(".", 1)[-1]


@dataclass(frozen=True)
class Loading:
    fields: tuple[NormalizedField, ...] = ()


@dataclass(frozen=True)
class Ready:
    fields: tuple[NormalizedField, ...]

    def value_of(self, label: str) -> Any:
        for f in self.fields:
            if f.label == label:
                return f.value
        raise KeyError(label)


@dataclass(frozen=True)
class Error:
    message: str


WidgetResult = Union[Loading, Ready, Error]


@dataclass(frozen=True)
class Payload:
    data: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.data is not None


def _parse_fields(value: Any) -> tuple[str, ...]:
    if value is None or value == "":
        return ()
    if isinstance(value, str):
        text = value.strip()
        if text.startswith("["):
            value = json.loads(text)
        else:
            value = [part.strip() for part in text.split(",")]
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"widget fields must be a list, got {type(value).__name__}")
    return tuple(str(v) for v in value if str(v))


def _parse_interval(raw: Mapping[str, Any]) -> float | None:
    if raw.get("refresh_interval") is not None:
        return float(raw["refresh_interval"])
    if raw.get("refreshInterval") is not None:
        # milliseconds
        return float(raw["refreshInterval"]) / 1000.0
    return None


def parse_widget_spec(raw: Mapping[str, Any]) -> WidgetSpec:
    if not isinstance(raw, Mapping):
        raise ValueError("widget must be a mapping")
    if not raw.get("type"):
        raise UnknownWidgetError("widget has no type")
    kind = resolve_kind(raw["type"])
    credentials = {k: str(raw[k]) for k in CREDENTIAL_KEYS if raw.get(k) is not None}
    options = {
        k: v for k, v in raw.items()
        if k not in _RESERVED_KEYS and k not in CREDENTIAL_KEYS
    }
    return WidgetSpec(
        kind=kind,
        url=str(raw.get("url", "")),
        credentials=credentials,
        fields=_parse_fields(raw.get("fields")),
        refresh_interval=_parse_interval(raw),
        options=options,
    )


def select_fields(configured: Iterable[str] | None, defaults: Iterable[str], cap: int = MAX_FIELDS) -> tuple[str, ...]:
    """Truncate the configured selection to ``cap``, then fall back to defaults.

    The two steps are independent: defaults only apply when nothing was
    configured, and a long configuration is never merged with defaults.
    """
    chosen = tuple(configured or ())[:cap]
    if not chosen:
        chosen = tuple(defaults)
    return chosen


def replace_field(selected: tuple[str, ...], missing: str, replacement: str) -> tuple[str, ...]:
    if missing not in selected:
        return selected
    kept = tuple(f for f in selected if f != missing)
    if replacement in kept:
        return kept
    return kept + (replacement,)


def _pick(selected: tuple[str, ...], fields: Iterable[NormalizedField]) -> tuple[NormalizedField, ...]:
    fields = tuple(fields)
    if not selected:
        return fields
    by_key = {f.key: f for f in fields}
    return tuple(by_key[k] for k in selected if k in by_key)


def ready(selected: tuple[str, ...], *fields: NormalizedField) -> Ready:
    return Ready(_pick(selected, fields))


def loading(selected: tuple[str, ...], labels: Iterable[str]) -> Loading:
    return Loading(_pick(selected, (NormalizedField(label) for label in labels)))


def to_number(value: Any, default: int | float = 0) -> int | float:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            return default
    return default


def sum_of(items: Iterable[Mapping[str, Any]], *path: str) -> int | float:
    return sum(to_number(dig(item, *path)) for item in items)


def count_truthy(items: Iterable[Mapping[str, Any]], *path: str) -> int:
    # numeric and boolean flags both count
    return sum(1 for item in items if dig(item, *path) not in (None, False, 0, "", "0", "false"))


def percent(used: Any, total: Any) -> float | None:
    used, total = to_number(used), to_number(total)
    if not total:
        return None
    return (used / total) * 100


def dig(obj: Any, *path: Any, default: Any = None) -> Any:
    for key in path:
        if isinstance(obj, Mapping):
            if key not in obj:
                return default
            obj = obj[key]
        elif isinstance(obj, (list, tuple)) and isinstance(key, int):
            if not -len(obj) <= key < len(obj):
                return default
            obj = obj[key]
        else:
            return default
    return obj
