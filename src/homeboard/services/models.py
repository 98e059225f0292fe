from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..widgets.base import WidgetSpec

# top-level group is depth 1, a nested group depth 2
MAX_GROUP_DEPTH = 2


@dataclass(frozen=True)
class ServiceRecord:
    name: str
    href: str | None = None
    widget: WidgetSpec | None = None
    description: str | None = None
    icon: str | None = None
    server: str | None = None
    container: str | None = None
    namespace: str | None = None

    @property
    def navigable(self) -> bool:
        return bool(self.href) and self.href != "#"

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "href": self.href}
        for key in ("description", "icon", "server", "container", "namespace"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        if self.widget is not None:
            out["widget"] = self.widget.to_dict()
        return out


@dataclass(frozen=True)
class GroupRecord:
    name: str
    services: tuple[ServiceRecord, ...] = ()
    groups: tuple[GroupRecord, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.services and not self.groups

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "services": [s.to_dict() for s in self.services],
            "groups": [g.to_dict() for g in self.groups],
        }


@dataclass(frozen=True)
class ServiceMatch:
    url: str
    service_name: str
    group_name: str
