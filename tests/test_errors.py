"""Unit tests for the error taxonomy (psw.errors)."""

from __future__ import annotations

import pytest

from psw.errors import (
    ExitCode,
    ProcessSpawnError,
    PswError,
    ScriptExecutionError,
    ScriptValidationError,
)


@pytest.mark.unit
class TestExitCode:
    def test_values(self):
        assert [int(c) for c in ExitCode] == [0, 1, 2, 3, 4, 5]
        assert ExitCode.SCRIPT_EXECUTION_ERROR == 4


@pytest.mark.unit
class TestErrors:
    def test_base_error_defaults(self):
        err = PswError("internal detail")
        assert str(err) == "internal detail"
        assert err.user_message == "internal detail"
        assert err.suggestion is None
        assert err.exit_status is ExitCode.GENERAL_ERROR

    def test_user_message_override(self):
        err = PswError("internal", user_message="Something went wrong", suggestion="Retry")
        assert err.user_message == "Something went wrong"
        assert err.suggestion == "Retry"

    def test_validation_error_lists_violations(self):
        violations = ["Line 1: Command not allowed: 'rm -rf /'", "Line 3: Command not allowed: 'ls'"]
        err = ScriptValidationError(violations)
        assert err.violations == violations
        assert str(err).startswith("Script validation failed with 2 blocked command(s):")
        assert "  - Line 3: Command not allowed: 'ls'" in str(err)
        assert err.error_code == "PSW-VAL-002"
        assert err.exit_status is ExitCode.VALIDATION_ERROR
        assert isinstance(err, PswError)

    def test_execution_error_carries_exit_code(self):
        err = ScriptExecutionError("Script execution failed with exit code 7", exit_code=7)
        assert err.exit_code == 7
        assert err.error_code == "PSW-EXEC-001"
        assert err.exit_status is ExitCode.SCRIPT_EXECUTION_ERROR
        assert err.suggestion

    def test_spawn_error(self):
        err = ProcessSpawnError("Shell not found: '/bin/nope'")
        assert err.error_code == "PSW-EXEC-002"
        assert err.exit_status is ExitCode.SCRIPT_EXECUTION_ERROR
