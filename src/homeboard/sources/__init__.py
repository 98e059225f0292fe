from __future__ import annotations

from ..config import Config
from .base import ServiceSource, SourceUnavailable
from .config_source import ConfigSource
from .docker_source import DockerSource
from .kubernetes_source import KubernetesSource


def default_sources(cfg: Config) -> list[ServiceSource]:
    # order is the merge priority
    return [ConfigSource(cfg), DockerSource(cfg), KubernetesSource(cfg)]
