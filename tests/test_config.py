"""Tests for configuration loading and validation."""

from __future__ import annotations

import pytest

from homeboard.config import Config, ConfigError, load_config, validate_config


def write(tmp_path, text: str):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestConfigProperties:
    """Tests for Config accessors and defaults."""

    def test_defaults(self) -> None:
        """An empty mapping yields safe defaults."""
        cfg = Config(raw={})
        assert cfg.services == []
        assert cfg.shortcuts == []
        assert cfg.docker_servers == {}
        assert cfg.kubernetes_mode == "disabled"
        assert cfg.label_prefix == "homeboard"
        assert cfg.http_timeout == 10.0
        assert cfg.http_verify is True
        assert cfg.default_refresh_interval == 10.0

    def test_pwa_shortcuts_take_precedence(self) -> None:
        """pwa.shortcuts wins over root shortcuts."""
        cfg = Config(raw={"pwa": {"shortcuts": [{"target": "A"}]}, "shortcuts": [{"target": "B"}]})
        assert cfg.shortcuts == [{"target": "A"}]

    def test_root_shortcuts_used_without_pwa(self) -> None:
        """Root shortcuts apply when pwa has none."""
        cfg = Config(raw={"pwa": {}, "shortcuts": [{"target": "B"}]})
        assert cfg.shortcuts == [{"target": "B"}]

    def test_empty_pwa_shortcuts_do_not_fall_through(self) -> None:
        """An explicitly empty pwa list hides root shortcuts."""
        cfg = Config(raw={"pwa": {"shortcuts": []}, "shortcuts": [{"target": "B"}]})
        assert cfg.shortcuts == []

    def test_malformed_docker_block_ignored(self) -> None:
        """A docker block that is not a mapping yields no servers."""
        assert Config(raw={"docker": ["local"]}).docker_servers == {}

    def test_malformed_docker_server_skipped(self) -> None:
        """Only servers with mapping settings are kept."""
        cfg = Config(raw={"docker": {"bad": "tcp://x", "local": {"socket": "/run/docker.sock"}, "bare": None}})
        assert cfg.docker_servers == {"local": {"socket": "/run/docker.sock"}, "bare": {}}

    def test_kubernetes_block_must_be_mapping(self) -> None:
        """A scalar kubernetes block is a configuration error."""
        with pytest.raises(ConfigError):
            Config(raw={"kubernetes": "cluster"}).kubernetes_mode

    def test_unsupported_kubernetes_mode(self) -> None:
        """Unknown kubernetes modes are rejected."""
        with pytest.raises(ConfigError, match="Unsupported kubernetes mode"):
            Config(raw={"kubernetes": {"mode": "sideways"}}).kubernetes_mode

    def test_services_must_be_list(self) -> None:
        """A mapping under services is a configuration error."""
        with pytest.raises(ConfigError):
            Config(raw={"services": {"Media": []}}).services


class TestLoadConfig:
    """Tests for load_config and validate_config."""

    def test_load_valid_file(self, tmp_path) -> None:
        """A valid document loads into a Config."""
        path = write(tmp_path, """
services:
  - Media:
      - Plex:
          href: http://plex.lan
          widget:
            type: caddy
            url: http://caddy.lan
kubernetes:
  mode: cluster
""")
        cfg = load_config(path)
        assert cfg.kubernetes_mode == "cluster"
        assert cfg.services[0]["Media"][0]["Plex"]["href"] == "http://plex.lan"

    def test_path_expands_environment(self, tmp_path, monkeypatch) -> None:
        """Environment variables in the path are expanded."""
        write(tmp_path, "services: []\n")
        monkeypatch.setenv("HOMEBOARD_DIR", str(tmp_path))
        cfg = load_config("$HOMEBOARD_DIR/config.yaml")
        assert cfg.services == []

    def test_top_level_must_be_mapping(self, tmp_path) -> None:
        """A YAML list at the top level is rejected."""
        path = write(tmp_path, "- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_unknown_widget_kind_fails_validation(self, tmp_path) -> None:
        """Unknown widget types fail at load time and name their service."""
        path = write(tmp_path, """
services:
  - Media:
      - Downloads:
          - Sonarr:
              widget:
                type: sonarr-classic
""")
        with pytest.raises(ConfigError, match="Media / Downloads / Sonarr"):
            load_config(path)

    def test_widget_without_type_fails_validation(self) -> None:
        """A widget block without type is a configuration error."""
        cfg = Config(raw={"services": [{"Media": [{"Plex": {"widget": {"url": "http://x"}}}]}]})
        with pytest.raises(ConfigError):
            validate_config(cfg)

    def test_legacy_alias_accepted(self) -> None:
        """Legacy widget aliases pass validation."""
        cfg = Config(raw={"services": [{"Media": [{"Requests": {"widget": {"type": "jellyseerr"}}}]}]})
        assert validate_config(cfg) is cfg
