"""Unit tests for database fragments (psw.generator.database).

Tests cover:
- SQL CE only on major version 9
- LocalDB and SQLite: explicit connection string vs development switch
- The SQLite release-candidate environment workaround
- SQL Server / Azure connection string plus provider
- Unknown and missing database types
"""

from __future__ import annotations

import pytest

from psw.generator import DatabaseType, database_fragment
from psw.generator.database import (
    EMPTY_FRAGMENT,
    LOCALDB_CONNECTION_STRING,
    SQLCE_CONNECTION_STRING,
    SQLITE_CONNECTION_STRING,
    SQLITE_RC_ENV_LINES,
    DatabaseFragment,
)

pytestmark = pytest.mark.unit


class TestSqlCe:
    def test_v9(self):
        fragment = database_fragment("SQLCE", "9.5.0")
        assert fragment.render() == f' --connection-string "{SQLCE_CONNECTION_STRING}" -ce'

    @pytest.mark.parametrize("version", ["10.0.0", "14.3.0", ""])
    def test_other_versions_empty(self, version):
        assert database_fragment("SQLCE", version) == EMPTY_FRAGMENT


class TestLocalDb:
    @pytest.mark.parametrize("version", ["9.5.0", "10.0.0-rc1"])
    def test_explicit_connection_string(self, version):
        fragment = database_fragment(DatabaseType.LOCAL_DB, version)
        assert fragment.render() == f' --connection-string "{LOCALDB_CONNECTION_STRING}"'
        assert fragment.extra_env_lines == ()

    @pytest.mark.parametrize("version", ["10.0.0", "14.3.0", ""])
    def test_development_switch(self, version):
        fragment = database_fragment("LocalDb", version)
        assert fragment.render() == " --development-database-type LocalDB"


class TestSqlite:
    def test_v9_connection_string_without_env_lines(self):
        fragment = database_fragment("SQLite", "9.5.0")
        assert fragment.render() == f' --connection-string "{SQLITE_CONNECTION_STRING}"'
        assert fragment.extra_env_lines == ()

    @pytest.mark.parametrize("version", ["10.0.0-rc1", "10.0.0-rc2", "10.0.0-rc3"])
    def test_rc_builds_get_env_lines(self, version):
        fragment = database_fragment("SQLite", version)
        assert SQLITE_CONNECTION_STRING in fragment.render()
        assert fragment.extra_env_lines == SQLITE_RC_ENV_LINES

    def test_modern_switch(self):
        fragment = database_fragment("SQLite", "13.0.0")
        assert fragment == DatabaseFragment(switch=" --development-database-type SQLite")

    def test_blank_version_defaults_to_switch(self):
        assert database_fragment("SQLite", "").render() == " --development-database-type SQLite"


class TestSqlServer:
    @pytest.mark.parametrize("db_type", ["SQLServer", "SQLAzure"])
    def test_connection_string_and_provider(self, db_type):
        fragment = database_fragment(db_type, "14.3.0", "Server=db;Database=cms")
        assert fragment.render() == (
            ' --connection-string "Server=db;Database=cms"'
            ' --connection-string-provider-name "Microsoft.Data.SqlClient"'
        )


class TestUnknown:
    @pytest.mark.parametrize("db_type", [None, "", "Oracle", "sqlite"])
    def test_empty_fragment(self, db_type):
        fragment = database_fragment(db_type, "14.3.0")
        assert fragment == EMPTY_FRAGMENT
        assert fragment.render() == ""
