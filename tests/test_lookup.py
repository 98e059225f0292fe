"""Tests for service and group lookup."""

from __future__ import annotations

from homeboard.services import (
    GroupRecord,
    ServiceMatch,
    ServiceRecord,
    find_group_by_name,
    find_service_by_name,
    first_navigable_service,
)

FOREST = [
    GroupRecord(
        "Media",
        (ServiceRecord("Placeholder", href="#"), ServiceRecord("Plex", href="http://plex")),
        (GroupRecord("Downloads", (ServiceRecord("Sonarr", href="http://sonarr"),)),),
    ),
    GroupRecord("Infra", (ServiceRecord("Plex", href="http://other-plex"), ServiceRecord("NoLink"))),
    GroupRecord("Links", groups=(GroupRecord("Docs", (ServiceRecord("Wiki", href="http://wiki"),)),)),
]


class TestFindServiceByName:
    """Tests for find_service_by_name."""

    def test_first_match_in_forest_order(self) -> None:
        """The earliest group wins."""
        assert find_service_by_name(FOREST, "Plex") == ServiceMatch("http://plex", "Plex", "Media")

    def test_nested_group_reported(self) -> None:
        """Matches in nested groups name the nested group."""
        assert find_service_by_name(FOREST, "Sonarr") == ServiceMatch("http://sonarr", "Sonarr", "Downloads")

    def test_services_without_link_skipped(self) -> None:
        """Services without an href or with '#' do not match."""
        assert find_service_by_name(FOREST, "Placeholder") is None
        assert find_service_by_name(FOREST, "NoLink") is None

    def test_name_is_case_sensitive(self) -> None:
        """Names match exactly."""
        assert find_service_by_name(FOREST, "plex") is None


class TestFindGroup:
    """Tests for group lookup."""

    def test_top_level_and_nested(self) -> None:
        """Both levels are searched."""
        assert find_group_by_name(FOREST, "Infra").name == "Infra"
        assert find_group_by_name(FOREST, "Docs").name == "Docs"
        assert find_group_by_name(FOREST, "Nope") is None

    def test_first_navigable_service(self) -> None:
        """Non-navigable services are skipped; nested groups are searched."""
        assert first_navigable_service(FOREST[0]).name == "Plex"
        assert first_navigable_service(FOREST[2]).name == "Wiki"
        assert first_navigable_service(GroupRecord("X", (ServiceRecord("a", href="#"),))) is None
