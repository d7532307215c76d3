"""Template identifiers and version rules.

Holds the static template -> short-alias table and the small version helpers
shared by the generator stages: major-version parsing, the install-subcommand
quirk of older template releases, and the Docker availability check.
"""

from __future__ import annotations

from types import MappingProxyType

CMS_TEMPLATE_NAME = "Umbraco.Templates"
CMS_TEMPLATE_ALIAS = "umbraco"
COMPOSE_TEMPLATE_ALIAS = "umbraco-compose"

DEFAULT_MAJOR_VERSION = 10
MIN_DOCKER_MAJOR_VERSION = 15

# Releases of the 9.x and 10.x template families only understand `dotnet new -i`.
_SHORT_INSTALL_PREFIXES = ("9.", "10.")

# 10.0.0 release candidates shipped with a broken database bootstrap.
LEGACY_RC_VERSIONS = frozenset({"10.0.0-rc1", "10.0.0-rc2", "10.0.0-rc3"})

TEMPLATE_ALIASES = MappingProxyType({
    "Umbraco.Community.Templates.UmBootstrap": "umbootstrap",
    "UmbCheckout.StarterKit.Stripe": "umbcheckout.starterkit.stripe",
})


def is_cms_template(template_name: str) -> bool:
    """Return ``True`` if *template_name* is the framework's own CMS template."""
    return template_name == CMS_TEMPLATE_NAME


def get_short_name(template_name: str) -> str:
    """Return the ``dotnet new`` alias for a template package.

    Examples::

        get_short_name("Umbraco.Community.Templates.UmBootstrap") -> "umbootstrap"
        get_short_name("Umbraco.Community.Templates.Clean") -> "umbraco.community.templates.clean"
    """
    return TEMPLATE_ALIASES.get(template_name, template_name.lower())


def parse_major_version(version: str | None) -> int:
    """Parse the leading dot-delimited token of *version* as an integer.

    Blank or unparseable versions resolve to ``DEFAULT_MAJOR_VERSION``.
    """
    if not version or not version.strip():
        return DEFAULT_MAJOR_VERSION
    head = version.strip().split(".", 1)[0]
    try:
        return int(head)
    except ValueError:
        return DEFAULT_MAJOR_VERSION


def is_legacy_rc(version: str | None) -> bool:
    return version in LEGACY_RC_VERSIONS


def install_subcommand(version: str | None) -> str:
    """Return the template-install token for *version* (``-i`` or ``install``)."""
    if version and version.startswith(_SHORT_INSTALL_PREFIXES):
        return "-i"
    return "install"


def can_include_docker(template_name: str, version: str | None) -> bool:
    """Docker scaffolding needs the CMS template at major version 15 or later.

    A blank version means "latest" and therefore supports Docker.
    """
    if not is_cms_template(template_name):
        return False
    if not version or not version.strip():
        return True
    head = version.strip().split(".", 1)[0]
    try:
        return int(head) >= MIN_DOCKER_MAJOR_VERSION
    except ValueError:
        return False
