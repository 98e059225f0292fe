"""Merge group records from all sources into one forest.

Groups are matched by name only. The first occurrence of a name fixes its
position; services of later occurrences are appended in order, without
de-duplication. Nested groups merge by the same rule one level down.
"""

from __future__ import annotations

import logging
from typing import Iterable

from .models import MAX_GROUP_DEPTH, GroupRecord, ServiceRecord

logger = logging.getLogger(__name__)


def merge_groups(groups: Iterable[GroupRecord], depth: int = 1) -> list[GroupRecord]:
    order: list[str] = []
    services: dict[str, list[ServiceRecord]] = {}
    nested: dict[str, list[GroupRecord]] = {}

    for group in groups:
        if not isinstance(group, GroupRecord) or not group.name:
            logger.warning("Dropping malformed group record: %r", group)
            continue
        if group.name not in services:
            order.append(group.name)
            services[group.name] = []
            nested[group.name] = []
        services[group.name].extend(group.services)
        if group.groups and depth >= MAX_GROUP_DEPTH:
            logger.warning(
                "Group %r nests deeper than %d levels; dropping %d nested group(s)",
                group.name, MAX_GROUP_DEPTH, len(group.groups),
            )
            continue
        nested[group.name].extend(group.groups)

    return [
        GroupRecord(
            name=name,
            services=tuple(services[name]),
            groups=tuple(merge_groups(nested[name], depth + 1)),
        )
        for name in order
    ]


def clean_groups(groups: Iterable[GroupRecord]) -> list[GroupRecord]:
    """Drop groups with neither services nor (non-empty) nested groups.

    Children are cleaned before their parent is judged, so a parent whose
    only nested groups were empty disappears as well.
    """
    cleaned = []
    for group in groups:
        group = GroupRecord(group.name, group.services, tuple(clean_groups(group.groups)))
        if group.is_empty:
            logger.debug("Pruning empty group %r", group.name)
            continue
        cleaned.append(group)
    return cleaned


def build_forest(*sources: Iterable[GroupRecord]) -> list[GroupRecord]:
    combined: list[GroupRecord] = []
    for groups in sources:
        combined.extend(groups)
    return clean_groups(merge_groups(combined))
