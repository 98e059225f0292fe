from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import logging
import os
from typing import Any, Iterator

import yaml

from .widgets.base import parse_widget_spec

logger = logging.getLogger(__name__)

KUBERNETES_MODES = ("disabled", "default", "cluster")


class ConfigError(ValueError):
    pass


def _expand(path: str) -> str:
    return os.path.expanduser(os.path.expandvars(path))


@dataclass(frozen=True)
class Config:
    raw: dict

    @property
    def services(self) -> list:
        services = self.raw.get("services") or []
        if not isinstance(services, list):
            raise ConfigError("services must be a list of groups")
        return services

    @property
    def shortcuts(self) -> list[dict]:
        pwa = self.raw.get("pwa") or {}
        # an explicit pwa list wins, even when empty
        if isinstance(pwa, dict) and pwa.get("shortcuts") is not None:
            return list(pwa["shortcuts"])
        return list(self.raw.get("shortcuts") or [])

    @property
    def docker_servers(self) -> dict[str, dict]:
        servers = self.raw.get("docker") or {}
        if not isinstance(servers, dict):
            logger.warning("docker must map server names to settings, got %s; ignoring it", type(servers).__name__)
            return {}
        out = {}
        for name, server in servers.items():
            if server is not None and not isinstance(server, dict):
                logger.warning("Ignoring docker server %r: settings must be a mapping", name)
                continue
            out[str(name)] = server or {}
        return out

    @property
    def kubernetes_mode(self) -> str:
        kubernetes = self.raw.get("kubernetes") or {}
        if not isinstance(kubernetes, dict):
            raise ConfigError("kubernetes must be a mapping")
        mode = str(kubernetes.get("mode", "disabled")).lower()
        if mode not in KUBERNETES_MODES:
            raise ConfigError(f"Unsupported kubernetes mode {mode!r}. Supported: {list(KUBERNETES_MODES)}")
        return mode

    @property
    def label_prefix(self) -> str:
        return str(self.raw.get("label_prefix", "homeboard"))

    @property
    def http_timeout(self) -> float:
        return float((self.raw.get("http") or {}).get("timeout", 10))

    @property
    def http_verify(self) -> bool:
        return bool((self.raw.get("http") or {}).get("verify", True))

    @property
    def default_refresh_interval(self) -> float:
        return float((self.raw.get("widgets") or {}).get("refresh_interval", 10))


def _declared_widgets(entries: Any, path: tuple[str, ...] = ()) -> Iterator[tuple[str, Any]]:
    if not isinstance(entries, list):
        return
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        for name, body in entry.items():
            where = path + (str(name),)
            if isinstance(body, list):
                yield from _declared_widgets(body, where)
            elif isinstance(body, dict) and body.get("widget") is not None:
                yield " / ".join(where), body["widget"]


def validate_config(cfg: Config) -> Config:
    for where, widget in _declared_widgets(cfg.services):
        try:
            parse_widget_spec(widget)
        except ValueError as e:
            raise ConfigError(f"{where}: {e}") from e
    # property access raises on an unsupported mode
    _ = cfg.kubernetes_mode
    return cfg


def load_config(path: str | Path) -> Config:
    p = Path(_expand(str(path)))
    raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ConfigError("config.yaml must contain a YAML mapping at top level.")
    return validate_config(Config(raw=raw))
