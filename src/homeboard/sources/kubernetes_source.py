from __future__ import annotations

import logging
from typing import Any, Callable

from kubernetes import client as kube_client
from kubernetes import config as kube_config

from ..config import Config
from ..services.models import GroupRecord
from .base import SourceUnavailable, group_services, service_from_labels

logger = logging.getLogger(__name__)


def networking_api(mode: str) -> kube_client.NetworkingV1Api:
    if mode == "cluster":
        kube_config.load_incluster_config()
    else:
        kube_config.load_kube_config()
    return kube_client.NetworkingV1Api()


def ingress_href(ingress: Any) -> str | None:
    spec = ingress.spec
    rules = (spec.rules or []) if spec is not None else []
    if not rules or not rules[0].host:
        return None
    rule = rules[0]
    path = "/"
    if rule.http is not None and rule.http.paths:
        path = rule.http.paths[0].path or "/"
    scheme = "https" if spec.tls else "http"
    return f"{scheme}://{rule.host}{path}"


class KubernetesSource:
    """Services declared through annotations on ingresses."""

    name = "kubernetes"

    def __init__(self, cfg: Config, api_factory: Callable[[str], Any] = networking_api) -> None:
        self._cfg = cfg
        self._api_factory = api_factory

    def fetch(self) -> list[GroupRecord]:
        mode = self._cfg.kubernetes_mode
        if mode == "disabled":
            return []
        prefix = f"{self._cfg.label_prefix}.dev/"
        try:
            api = self._api_factory(mode)
            ingresses = api.list_ingress_for_all_namespaces().items
        except Exception as e:
            raise SourceUnavailable(f"Kubernetes API unavailable: {e}") from e

        entries = []
        for ingress in ingresses:
            meta = ingress.metadata
            annotations = meta.annotations or {}
            if str(annotations.get(f"{prefix}enabled", "")).lower() != "true":
                continue
            entry = service_from_labels(
                annotations,
                prefix,
                name=meta.name,
                href=ingress_href(ingress),
                namespace=meta.namespace,
            )
            if entry is None:
                logger.warning("Ingress %s/%s is enabled but declares no group", meta.namespace, meta.name)
                continue
            entries.append(entry)
        return group_services(entries)
