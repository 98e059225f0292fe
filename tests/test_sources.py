"""Tests for the config, docker and kubernetes service sources."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from docker.errors import DockerException

from homeboard.config import Config
from homeboard.sources import ConfigSource, DockerSource, KubernetesSource, SourceUnavailable, default_sources
from homeboard.sources.docker_source import connect
from homeboard.sources.kubernetes_source import ingress_href, networking_api
from homeboard.widgets.kinds import WidgetKind


class TestConfigSource:
    """Tests for ConfigSource."""

    def test_services_and_nested_groups(self) -> None:
        """Mappings are services and lists are nested groups."""
        cfg = Config(raw={"services": [
            {"Media": [
                {"Plex": {"href": "http://plex", "description": "movies", "widget": {"type": "tracearr", "url": "http://t", "key": "k"}}},
                {"Downloads": [{"Sonarr": {"href": "http://sonarr"}}]},
            ]},
        ]})

        groups = ConfigSource(cfg).fetch()

        assert len(groups) == 1
        media = groups[0]
        assert media.name == "Media"
        assert media.services[0].name == "Plex"
        assert media.services[0].description == "movies"
        assert media.services[0].widget.kind is WidgetKind.TRACEARR
        assert media.groups[0].name == "Downloads"
        assert media.groups[0].services[0].href == "http://sonarr"

    def test_too_deep_and_malformed_dropped(self) -> None:
        """Third-level groups and scalar entries are skipped."""
        cfg = Config(raw={"services": [
            "garbage",
            {"A": [
                "not-a-service",
                {"B": [{"C": [{"x": {"href": "http://x"}}]}, {"y": {"href": "http://y"}}]},
                {"Broken": 42},
            ]},
        ]})

        groups = ConfigSource(cfg).fetch()

        nested = groups[0].groups[0]
        assert nested.name == "B"
        assert nested.groups == ()
        assert [s.name for s in nested.services] == ["y"]
        assert groups[0].services == ()

    def test_service_without_body(self) -> None:
        """A bare service name still yields a service."""
        cfg = Config(raw={"services": [{"A": [{"Bare": None}]}]})
        assert ConfigSource(cfg).fetch()[0].services[0].href is None


def container(name: str, labels: dict) -> SimpleNamespace:
    return SimpleNamespace(name=name, labels=labels)


def docker_client(containers: list) -> MagicMock:
    client = MagicMock()
    client.containers.list.return_value = containers
    return client


class TestDockerSource:
    """Tests for DockerSource."""

    CFG = Config(raw={"docker": {"local": {"socket": "/var/run/docker.sock"}}})

    def test_labelled_containers_become_services(self) -> None:
        """Containers with group and name labels are listed."""
        client = docker_client([
            container("sonarr", {
                "homeboard.group": "Media",
                "homeboard.name": "Sonarr",
                "homeboard.href": "http://y",
                "homeboard.widget.type": "frigate",
                "homeboard.widget.url": "http://f",
                "homeboard.widget.enableRecentEvents": "true",
            }),
            container("db", {}),
            container("half", {"homeboard.group": "Media"}),
        ])
        factory = MagicMock(return_value=client)

        groups = DockerSource(self.CFG, client_factory=factory).fetch()

        factory.assert_called_once_with({"socket": "/var/run/docker.sock"})
        client.close.assert_called_once()
        assert [g.name for g in groups] == ["Media"]
        service = groups[0].services[0]
        assert (service.name, service.href, service.server, service.container) == ("Sonarr", "http://y", "local", "sonarr")
        assert service.widget.kind is WidgetKind.FRIGATE
        assert service.widget.option("enableRecentEvents") is True

    def test_unknown_widget_keeps_service(self) -> None:
        """A bad widget label drops only the widget."""
        client = docker_client([container("x", {
            "homeboard.group": "G", "homeboard.name": "X", "homeboard.widget.type": "nope",
        })])
        groups = DockerSource(self.CFG, client_factory=MagicMock(return_value=client)).fetch()
        assert groups[0].services[0].widget is None

    def test_failed_server_skipped(self) -> None:
        """One unreachable server does not hide the others."""
        cfg = Config(raw={"docker": {"a": {"host": "a"}, "b": {"host": "b"}}})
        good = docker_client([container("x", {"homeboard.group": "G", "homeboard.name": "X"})])

        def factory(server):
            if server["host"] == "a":
                raise DockerException("connection refused")
            return good

        groups = DockerSource(cfg, client_factory=factory).fetch()
        assert groups[0].services[0].server == "b"

    def test_all_servers_down(self) -> None:
        """No reachable server makes the source unavailable."""
        factory = MagicMock(side_effect=DockerException("down"))
        with pytest.raises(SourceUnavailable, match="local"):
            DockerSource(self.CFG, client_factory=factory).fetch()

    def test_no_servers_configured(self) -> None:
        """Without servers nothing is contacted."""
        factory = MagicMock()
        assert DockerSource(Config(raw={}), client_factory=factory).fetch() == []
        factory.assert_not_called()

    def test_connect_tcp(self) -> None:
        """TCP servers use host and port."""
        with patch("homeboard.sources.docker_source.docker.DockerClient") as client_cls:
            connect({"host": "10.0.0.2", "port": 2376, "tls": True})
        client_cls.assert_called_once_with(base_url="tcp://10.0.0.2:2376", tls=True, timeout=10)

    def test_connect_requires_address(self) -> None:
        """A server entry needs a socket or a host."""
        with pytest.raises(ValueError):
            connect({})


def ingress(name: str, annotations: dict, host: str | None = "app.lan", path: str = "/", tls: bool = False):
    rules = []
    if host is not None:
        rules = [SimpleNamespace(host=host, http=SimpleNamespace(paths=[SimpleNamespace(path=path)]))]
    return SimpleNamespace(
        metadata=SimpleNamespace(name=name, namespace="apps", annotations=annotations),
        spec=SimpleNamespace(rules=rules, tls=[{"hosts": [host]}] if tls else None),
    )


def kube_api(items: list) -> MagicMock:
    api = MagicMock()
    api.list_ingress_for_all_namespaces.return_value = SimpleNamespace(items=items)
    return api


class TestKubernetesSource:
    """Tests for KubernetesSource."""

    CFG = Config(raw={"kubernetes": {"mode": "cluster"}})

    def test_disabled_mode(self) -> None:
        """Disabled mode never touches the API."""
        factory = MagicMock()
        assert KubernetesSource(Config(raw={}), api_factory=factory).fetch() == []
        factory.assert_not_called()

    def test_enabled_ingresses(self) -> None:
        """Only enabled and grouped ingresses are listed."""
        api = kube_api([
            ingress("grafana", {"homeboard.dev/enabled": "true", "homeboard.dev/group": "Monitoring"}, host="grafana.lan", tls=True),
            ingress("hidden", {"homeboard.dev/group": "Monitoring"}),
            ingress("nogroup", {"homeboard.dev/enabled": "true"}),
            ingress("custom", {
                "homeboard.dev/enabled": "True",
                "homeboard.dev/group": "Monitoring",
                "homeboard.dev/name": "Prometheus",
                "homeboard.dev/href": "http://prom.lan",
            }),
        ])
        factory = MagicMock(return_value=api)

        groups = KubernetesSource(self.CFG, api_factory=factory).fetch()

        factory.assert_called_once_with("cluster")
        services = groups[0].services
        assert [(s.name, s.href) for s in services] == [
            ("grafana", "https://grafana.lan/"),
            ("Prometheus", "http://prom.lan"),
        ]
        assert services[0].namespace == "apps"

    def test_api_failure(self) -> None:
        """API errors make the source unavailable."""
        factory = MagicMock(side_effect=RuntimeError("forbidden"))
        with pytest.raises(SourceUnavailable, match="forbidden"):
            KubernetesSource(self.CFG, api_factory=factory).fetch()

    def test_ingress_href(self) -> None:
        """The first rule's host and path build the link."""
        assert ingress_href(ingress("a", {}, host="a.lan", path="/ui")) == "http://a.lan/ui"
        assert ingress_href(ingress("a", {}, host=None)) is None

    def test_networking_api_modes(self) -> None:
        """cluster uses in-cluster config, default uses kubeconfig."""
        with patch("homeboard.sources.kubernetes_source.kube_config") as kube_config, \
                patch("homeboard.sources.kubernetes_source.kube_client") as kube_client:
            networking_api("cluster")
            kube_config.load_incluster_config.assert_called_once()
            networking_api("default")
            kube_config.load_kube_config.assert_called_once()
            assert kube_client.NetworkingV1Api.call_count == 2


def test_default_sources_order() -> None:
    """Config comes first, then docker, then kubernetes."""
    names = [s.name for s in default_sources(Config(raw={}))]
    assert names == ["config", "docker", "kubernetes"]
