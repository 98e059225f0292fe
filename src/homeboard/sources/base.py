from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Protocol

from ..services.models import GroupRecord, ServiceRecord
from ..widgets.base import WidgetSpec, parse_widget_spec

logger = logging.getLogger(__name__)


class SourceUnavailable(RuntimeError):
    pass


class ServiceSource(Protocol):
    name: str

    def fetch(self) -> list[GroupRecord]:
        ...


def parse_widget_or_none(raw: Any, service_name: str) -> WidgetSpec | None:
    if raw is None:
        return None
    try:
        return parse_widget_spec(raw)
    except ValueError as e:
        logger.warning("Ignoring widget of service %r: %s", service_name, e)
        return None


def _label_value(value: str) -> Any:
    lowered = value.strip().lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    return value


def widget_from_labels(labels: Mapping[str, str], prefix: str) -> dict[str, Any]:
    widget_prefix = f"{prefix}widget."
    return {
        key[len(widget_prefix):]: _label_value(str(value))
        for key, value in labels.items()
        if key.startswith(widget_prefix)
    }


def service_from_labels(
    labels: Mapping[str, str],
    prefix: str,
    name: str | None = None,
    href: str | None = None,
    **provenance: str | None,
) -> tuple[str, ServiceRecord] | None:
    """Build ``(group name, service)`` from a label/annotation vocabulary.

    Returns None when the labels do not declare both a group and a name.
    """
    group = labels.get(f"{prefix}group")
    name = labels.get(f"{prefix}name") or name
    if not group or not name:
        return None
    widget_raw = widget_from_labels(labels, prefix)
    service = ServiceRecord(
        name=name,
        href=labels.get(f"{prefix}href") or href,
        widget=parse_widget_or_none(widget_raw, name) if widget_raw else None,
        description=labels.get(f"{prefix}description"),
        icon=labels.get(f"{prefix}icon"),
        **provenance,
    )
    return group, service


def group_services(entries: Iterable[tuple[str, ServiceRecord]]) -> list[GroupRecord]:
    order: list[str] = []
    by_group: dict[str, list[ServiceRecord]] = {}
    for group, service in entries:
        if group not in by_group:
            order.append(group)
            by_group[group] = []
        by_group[group].append(service)
    return [GroupRecord(name=g, services=tuple(by_group[g])) for g in order]
