from __future__ import annotations

from typing import Iterable, Iterator

from .models import GroupRecord, ServiceMatch, ServiceRecord


def _walk(forest: Iterable[GroupRecord]) -> Iterator[GroupRecord]:
    # forest order: each top-level group, then its nested groups
    for group in forest:
        yield group
        yield from group.groups


def find_service_by_name(forest: Iterable[GroupRecord], name: str) -> ServiceMatch | None:
    for group in _walk(forest):
        for service in group.services:
            if service.name == name and service.navigable:
                return ServiceMatch(url=service.href, service_name=service.name, group_name=group.name)
    return None


def find_group_by_name(forest: Iterable[GroupRecord], name: str) -> GroupRecord | None:
    for group in _walk(forest):
        if group.name == name:
            return group
    return None


def first_navigable_service(group: GroupRecord) -> ServiceRecord | None:
    for g in _walk([group]):
        for service in g.services:
            if service.navigable:
                return service
    return None
