"""Resolve home-screen shortcut ids into redirects.

A shortcut either carries a direct ``url`` (matched by its slugified
``name``) or a ``target`` naming a service or group (matched by the
slugified target). Every outcome is a :class:`RedirectResponse`; nothing
here raises to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from typing import Any, Awaitable, Callable
from urllib.parse import urlsplit

from .config import Config
from .services import GroupRecord, find_group_by_name, find_service_by_name, first_navigable_service

logger = logging.getLogger(__name__)

ForestProvider = Callable[[], Awaitable[list[GroupRecord]]]

_WHITESPACE = re.compile(r"\s+")


def slugify(name: Any) -> str:
    return _WHITESPACE.sub("-", str(name)).lower()


@dataclass(frozen=True)
class RedirectResponse:
    status: int
    location: str | None = None
    body: dict[str, str] | None = None

    @classmethod
    def redirect(cls, location: str) -> RedirectResponse:
        return cls(status=302, location=location)

    @classmethod
    def error(cls, status: int, message: str) -> RedirectResponse:
        return cls(status=status, body={"error": message})

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"status": self.status}
        if self.location is not None:
            out["location"] = self.location
        if self.body is not None:
            out["body"] = self.body
        return out


def validate_redirect_target(url: str) -> RedirectResponse:
    if url.startswith("/") or url.startswith("#"):
        return RedirectResponse.redirect(url)
    try:
        parts = urlsplit(url)
    except ValueError as e:
        logger.error("Error parsing URL %r: %s", url, e)
        return RedirectResponse.error(400, "Invalid URL")
    if not parts.scheme:
        logger.error("Error parsing URL %r: no scheme", url)
        return RedirectResponse.error(400, "Invalid URL")
    if parts.scheme.lower() not in ("http", "https"):
        logger.warning("Invalid protocol in URL: %s", url)
        return RedirectResponse.error(400, "Invalid URL protocol")
    if not parts.netloc:
        logger.error("Error parsing URL %r: no host", url)
        return RedirectResponse.error(400, "Invalid URL")
    return RedirectResponse.redirect(url)


def find_shortcut(shortcuts: list[dict], shortcut_id: str) -> dict | None:
    for shortcut in shortcuts:
        if not isinstance(shortcut, dict):
            continue
        if shortcut.get("target"):
            if slugify(shortcut["target"]) == shortcut_id:
                return shortcut
        elif shortcut.get("url") and shortcut.get("name") is not None:
            if slugify(shortcut["name"]) == shortcut_id:
                return shortcut
    return None


def resolve_target(forest: list[GroupRecord], target: str) -> str | None:
    match = find_service_by_name(forest, target)
    if match is not None:
        logger.info("Found service %r in group %r with URL %s", match.service_name, match.group_name, match.url)
        return match.url

    group = find_group_by_name(forest, target)
    if group is None:
        return None
    service = first_navigable_service(group)
    if service is not None:
        logger.info("Target %r is a group; using its service %r", target, service.name)
        return service.href
    return f"/#{slugify(group.name)}"


async def resolve_shortcut(
    shortcut_id: Any, method: str, cfg: Config, forest_provider: ForestProvider
) -> RedirectResponse:
    if method.upper() != "GET":
        logger.warning("Invalid method %s for shortcut redirect", method)
        return RedirectResponse.error(405, "Method not allowed")
    if not isinstance(shortcut_id, str) or not shortcut_id.strip():
        logger.warning("Missing or invalid shortcut id")
        return RedirectResponse.error(400, "Invalid shortcut id")

    try:
        shortcut = find_shortcut(cfg.shortcuts, shortcut_id)
        if shortcut is None:
            logger.warning("Shortcut with id %r not found in configuration", shortcut_id)
            return RedirectResponse.error(404, "Shortcut not found")

        target = shortcut.get("target")
        if not target:
            url = shortcut.get("url")
            if not isinstance(url, str):
                logger.warning("Shortcut %r has no target or url specified", shortcut_id)
                return RedirectResponse.error(400, "Invalid shortcut configuration")
            logger.info("Redirecting shortcut %r to direct URL %s", shortcut_id, url)
            return validate_redirect_target(url)

        forest = await forest_provider()
        url = resolve_target(forest, str(target))
        if url is None:
            logger.warning("Service or group %r not found or has no URL", target)
            return RedirectResponse.error(404, "Service not found")
        return validate_redirect_target(url)
    except Exception as e:
        logger.error("Error processing shortcut redirect: %s", e)
        return RedirectResponse.error(500, "Internal server error")
