"""Database flag fragments for unattended CMS installs.

Each rule is a small pure function of the database type and the template
version, returning a ``DatabaseFragment`` that the create-project stage splices
into its command.  The 10.0.0 RC and SQL CE special cases are literal version
comparisons and must stay that way.
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import DatabaseType
from .templates import is_legacy_rc, parse_major_version

SQLCE_CONNECTION_STRING = r"Data Source=|DataDirectory|\Umbraco.sdf;Flush Interval=1"
LOCALDB_CONNECTION_STRING = (
    r"Data Source = (localdb)\MSSQLLocalDB;"
    r"AttachDbFilename=|DataDirectory|\Umbraco.mdf;Integrated Security=True"
)
SQLITE_CONNECTION_STRING = (
    "Data Source=|DataDirectory|/Umbraco.sqlite.db;Cache=Shared;Foreign Keys=True;Pooling=True"
)
SQL_SERVER_PROVIDER = "Microsoft.Data.SqlClient"

SQLITE_RC_ENV_LINES = (
    '$env:Umbraco__CMS__Global__InstallMissingDatabase="true"',
    '$env:ConnectionStrings__umbracoDbDSN_ProviderName="Microsoft.Data.SQLite"',
)


@dataclass(frozen=True)
class DatabaseFragment:
    """Flags appended to ``dotnet new umbraco`` plus any follow-up lines."""

    connection_string: str = ""
    switch: str = ""
    extra_env_lines: tuple[str, ...] = ()

    def render(self) -> str:
        """Return the flag text, each part carrying its own leading space."""
        return f"{self.connection_string}{self.switch}"


EMPTY_FRAGMENT = DatabaseFragment()


def _needs_explicit_connection_string(version: str) -> bool:
    return parse_major_version(version) < 10 or is_legacy_rc(version)


def sqlce_fragment(version: str) -> DatabaseFragment:
    if parse_major_version(version) != 9:
        return EMPTY_FRAGMENT
    return DatabaseFragment(
        connection_string=f' --connection-string "{SQLCE_CONNECTION_STRING}" -ce'
    )


def localdb_fragment(version: str) -> DatabaseFragment:
    if _needs_explicit_connection_string(version):
        return DatabaseFragment(
            connection_string=f' --connection-string "{LOCALDB_CONNECTION_STRING}"'
        )
    return DatabaseFragment(switch=" --development-database-type LocalDB")


def sqlite_fragment(version: str) -> DatabaseFragment:
    if _needs_explicit_connection_string(version):
        return DatabaseFragment(
            connection_string=f' --connection-string "{SQLITE_CONNECTION_STRING}"',
            extra_env_lines=SQLITE_RC_ENV_LINES if is_legacy_rc(version) else (),
        )
    return DatabaseFragment(switch=" --development-database-type SQLite")


def sql_server_fragment(connection_string: str) -> DatabaseFragment:
    return DatabaseFragment(
        connection_string=(
            f' --connection-string "{connection_string}"'
            f' --connection-string-provider-name "{SQL_SERVER_PROVIDER}"'
        )
    )


def database_fragment(
    database_type: str | DatabaseType | None,
    version: str,
    connection_string: str = "",
) -> DatabaseFragment:
    """Select the fragment for *database_type* at template *version*.

    Unknown or missing database types yield ``EMPTY_FRAGMENT``; they are
    rejected upstream by input validation, not here.
    """
    if database_type is None:
        return EMPTY_FRAGMENT
    try:
        db_type = DatabaseType(database_type)
    except ValueError:
        return EMPTY_FRAGMENT

    if db_type is DatabaseType.SQLCE:
        return sqlce_fragment(version)
    if db_type is DatabaseType.LOCAL_DB:
        return localdb_fragment(version)
    if db_type is DatabaseType.SQLITE:
        return sqlite_fragment(version)
    return sql_server_fragment(connection_string)
