"""Unit tests for template identifiers and version rules (psw.generator.templates).

Tests cover:
- Short-name lookup and the lowercase fallback
- Major-version parsing and its default
- Install subcommand selection
- Docker availability
"""

from __future__ import annotations

import pytest

from psw.generator.templates import (
    DEFAULT_MAJOR_VERSION,
    can_include_docker,
    get_short_name,
    install_subcommand,
    is_cms_template,
    is_legacy_rc,
    parse_major_version,
)


@pytest.mark.unit
class TestShortNames:
    def test_known_alias(self):
        assert get_short_name("Umbraco.Community.Templates.UmBootstrap") == "umbootstrap"
        assert get_short_name("UmbCheckout.StarterKit.Stripe") == "umbcheckout.starterkit.stripe"

    def test_unknown_template_is_lowercased(self):
        assert get_short_name("My.Custom.Template") == "my.custom.template"

    def test_cms_template_detection(self):
        assert is_cms_template("Umbraco.Templates")
        assert not is_cms_template("umbraco.templates")
        assert not is_cms_template("Umbraco.Community.Templates.UmBootstrap")


@pytest.mark.unit
class TestMajorVersion:
    @pytest.mark.parametrize("version,expected", [
        ("14.3.0", 14),
        ("9.5.0", 9),
        ("10.0.0-rc1", 10),
        ("17", 17),
    ])
    def test_parses_leading_token(self, version, expected):
        assert parse_major_version(version) == expected

    @pytest.mark.parametrize("version", ["", "   ", None, "latest", "v14.0.0"])
    def test_defaults(self, version):
        assert parse_major_version(version) == DEFAULT_MAJOR_VERSION

    def test_legacy_rc_is_literal(self):
        assert is_legacy_rc("10.0.0-rc1")
        assert is_legacy_rc("10.0.0-rc3")
        assert not is_legacy_rc("10.0.0-rc4")
        assert not is_legacy_rc("10.0.0")


@pytest.mark.unit
class TestInstallSubcommand:
    @pytest.mark.parametrize("version", ["9.0.0", "9.5.2", "10.0.0", "10.0.0-rc2"])
    def test_short_flag_for_old_families(self, version):
        assert install_subcommand(version) == "-i"

    @pytest.mark.parametrize("version", ["", None, "11.0.0", "12.3.1", "100.0.0"])
    def test_install_keyword_otherwise(self, version):
        assert install_subcommand(version) == "install"


@pytest.mark.unit
class TestDockerAvailability:
    def test_latest_cms(self):
        assert can_include_docker("Umbraco.Templates", "")

    @pytest.mark.parametrize("version,expected", [
        ("15.0.0", True),
        ("16.1.0", True),
        ("14.3.0", False),
        ("9.5.0", False),
        ("garbage", False),
    ])
    def test_cms_by_version(self, version, expected):
        assert can_include_docker("Umbraco.Templates", version) is expected

    def test_community_template_never(self):
        assert not can_include_docker("Umbraco.Community.Templates.UmBootstrap", "")
