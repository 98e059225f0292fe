from __future__ import annotations

import logging
from typing import Any, Callable

import docker
from docker.errors import DockerException

from ..config import Config
from ..services.models import GroupRecord
from .base import SourceUnavailable, group_services, service_from_labels

logger = logging.getLogger(__name__)

DOCKER_TIMEOUT = 10


def connect(server: dict[str, Any]) -> docker.DockerClient:
    if server.get("socket"):
        base_url = f"unix://{server['socket']}"
    elif server.get("host"):
        base_url = f"tcp://{server['host']}:{server.get('port', 2375)}"
    else:
        raise ValueError("docker server needs either socket or host")
    return docker.DockerClient(base_url=base_url, tls=bool(server.get("tls", False)), timeout=DOCKER_TIMEOUT)


class DockerSource:
    """Services declared through labels on running containers."""

    name = "docker"

    def __init__(self, cfg: Config, client_factory: Callable[[dict[str, Any]], Any] = connect) -> None:
        self._cfg = cfg
        self._connect = client_factory

    def _containers(self, server: dict[str, Any]) -> list:
        client = self._connect(server)
        try:
            # running containers only
            return client.containers.list()
        finally:
            client.close()

    def fetch(self) -> list[GroupRecord]:
        servers = self._cfg.docker_servers
        if not servers:
            return []
        prefix = f"{self._cfg.label_prefix}."

        entries = []
        failures = []
        for server_name, server in servers.items():
            try:
                containers = self._containers(server or {})
            except (DockerException, OSError, ValueError) as e:
                logger.warning("Docker server %r unavailable: %s", server_name, e)
                failures.append(f"{server_name}: {e}")
                continue
            for container in containers:
                entry = service_from_labels(
                    container.labels or {},
                    prefix,
                    server=server_name,
                    container=container.name,
                )
                if entry is not None:
                    entries.append(entry)

        if len(failures) == len(servers):
            raise SourceUnavailable("No docker server reachable: " + "; ".join(failures))
        return group_services(entries)
