"""Exception taxonomy for the PSW script engine.

Every error raised on purpose derives from ``PswError`` so the CLI can render a
user-friendly message, a suggestion, and a stable error code, and map it onto a
process exit code.
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Process exit codes returned by the ``psw`` command."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    VALIDATION_ERROR = 2
    NETWORK_ERROR = 3
    SCRIPT_EXECUTION_ERROR = 4
    FILE_SYSTEM_ERROR = 5


class PswError(Exception):
    """Base class for all PSW-specific errors."""

    error_code = "PSW-GEN-001"
    exit_status = ExitCode.GENERAL_ERROR

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        self.user_message = user_message or message
        self.suggestion = suggestion
        super().__init__(message)


class ScriptValidationError(PswError):
    """Raised when a script contains commands outside the allowlist."""

    error_code = "PSW-VAL-002"
    exit_status = ExitCode.VALIDATION_ERROR

    def __init__(self, violations: list[str]) -> None:
        self.violations = list(violations)
        details = "\n".join(f"  - {v}" for v in self.violations)
        super().__init__(
            f"Script validation failed with {len(self.violations)} blocked command(s):\n{details}",
            suggestion="Only dotnet template, package and run commands may be executed",
        )


class ScriptExecutionError(PswError):
    """Raised when the script process exits with a non-zero code."""

    error_code = "PSW-EXEC-001"
    exit_status = ExitCode.SCRIPT_EXECUTION_ERROR

    def __init__(self, message: str, exit_code: int | None = None) -> None:
        self.exit_code = exit_code
        super().__init__(
            message,
            suggestion="Check the script output above for error details",
        )


class ProcessSpawnError(PswError):
    """Raised when the shell process cannot be started at all."""

    error_code = "PSW-EXEC-002"
    exit_status = ExitCode.SCRIPT_EXECUTION_ERROR
