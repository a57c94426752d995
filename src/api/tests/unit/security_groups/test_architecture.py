"""Architecture tests for the Security Groups bounded context.

These tests enforce the layer boundaries inside ``security_groups``:
domain and ports stay free of frameworks, and application services
never reach into infrastructure or presentation code.
"""

from pytest_archon import archrule


class TestDomainLayerBoundaries:
    """Tests that the domain layer has no forbidden dependencies."""

    def test_domain_does_not_import_outer_layers(self):
        (
            archrule("security_groups_domain_isolated")
            .match("security_groups.domain*")
            .should_not_import("security_groups.application*")
            .should_not_import("security_groups.infrastructure*")
            .should_not_import("security_groups.presentation*")
            .should_not_import("security_groups.dependencies*")
            .check("security_groups")
        )

    def test_domain_does_not_import_frameworks(self):
        """Domain objects are plain dataclasses usable without a database."""
        (
            archrule("security_groups_domain_no_frameworks")
            .match("security_groups.domain*")
            .should_not_import("fastapi*")
            .should_not_import("sqlalchemy*")
            .should_not_import("redis*")
            .check("security_groups")
        )


class TestPortsBoundaries:
    def test_ports_do_not_import_infrastructure(self):
        (
            archrule("security_groups_ports_no_infrastructure")
            .match("security_groups.ports*")
            .should_not_import("security_groups.infrastructure*")
            .should_not_import("sqlalchemy*")
            .should_not_import("redis*")
            .check("security_groups")
        )


class TestApplicationLayerBoundaries:
    """Tests that application services depend on ports, not adapters."""

    def test_application_does_not_import_infrastructure(self):
        """Repositories and cache backends are injected through ports."""
        (
            archrule("security_groups_application_no_infrastructure")
            .match("security_groups.application*")
            .should_not_import("security_groups.infrastructure*")
            .should_not_import("redis*")
            .check("security_groups")
        )

    def test_application_does_not_import_presentation(self):
        (
            archrule("security_groups_application_no_presentation")
            .match("security_groups.application*")
            .should_not_import("security_groups.presentation*")
            .should_not_import("security_groups.dependencies*")
            .should_not_import("fastapi*")
            .check("security_groups")
        )
