"""Groups and services declared in the configuration file.

The layout follows the usual services document::

    - Media:
        - Plex:
            href: http://plex.lan
            widget: {type: tracearr, url: http://tracearr.lan, key: ...}
        - Downloads:          # a nested group
            - Sonarr:
                href: http://sonarr.lan
"""

from __future__ import annotations

import logging
from typing import Any

from ..config import Config
from ..services.models import MAX_GROUP_DEPTH, GroupRecord, ServiceRecord
from .base import parse_widget_or_none

logger = logging.getLogger(__name__)


def _service(name: Any, body: dict) -> ServiceRecord | None:
    if name is None or str(name).strip() == "":
        logger.warning("Dropping service without a name: %r", body)
        return None
    name = str(name)
    return ServiceRecord(
        name=name,
        href=body.get("href"),
        widget=parse_widget_or_none(body.get("widget"), name),
        description=body.get("description"),
        icon=body.get("icon"),
    )


def _group(name: Any, items: list, depth: int) -> GroupRecord:
    services: list[ServiceRecord] = []
    nested: list[GroupRecord] = []
    for item in items:
        if not isinstance(item, dict):
            logger.warning("Dropping malformed entry in group %r: %r", name, item)
            continue
        for key, body in item.items():
            if isinstance(body, list):
                if depth >= MAX_GROUP_DEPTH:
                    logger.warning("Group %r nests too deep under %r; dropping it", key, name)
                    continue
                nested.append(_group(key, body, depth + 1))
            elif body is None or isinstance(body, dict):
                service = _service(key, body or {})
                if service is not None:
                    services.append(service)
            else:
                logger.warning("Dropping malformed service %r in group %r", key, name)
    return GroupRecord(name=str(name), services=tuple(services), groups=tuple(nested))


def groups_from_config(entries: list) -> list[GroupRecord]:
    groups = []
    for entry in entries:
        if not isinstance(entry, dict):
            logger.warning("Dropping malformed group entry: %r", entry)
            continue
        for name, body in entry.items():
            if body is None:
                body = []
            if not isinstance(body, list):
                logger.warning("Group %r must hold a list of services", name)
                continue
            groups.append(_group(name, body, depth=1))
    return groups


class ConfigSource:
    name = "config"

    def __init__(self, cfg: Config) -> None:
        self._cfg = cfg

    def fetch(self) -> list[GroupRecord]:
        return groups_from_config(self._cfg.services)
