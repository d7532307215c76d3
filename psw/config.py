"""PSW runtime configuration.

Typed settings for the script engine. These are operator-level knobs (shell
override, validation escape hatch, logging) and are distinct from the project
``Configuration`` that the generator consumes.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import BaseModel, Field

_TRUTHY = {"1", "true", "yes", "on"}


def default_shell() -> str:
    """Return the shell binary used to run scripts on this host."""
    if sys.platform == "win32":
        return "cmd.exe"
    return "/bin/bash"


def default_log_dir() -> Path:
    """Directory that holds the optional ``psw-YYYYMMDD.log`` files."""
    return Path.home() / ".psw" / "logs"


class Config(BaseModel):
    """Global PSW runtime configuration.

    Instances are typically created once by the CLI entry point and passed to
    every ``ScriptExecutor`` it constructs.
    """

    validate_commands: bool = Field(
        default=True,
        description="Run the command allowlist before executing a script",
    )
    shell: str | None = Field(
        default=None,
        description="Shell binary override; defaults to cmd.exe or /bin/bash",
    )
    log_level: str = Field(default="WARNING")
    log_file: Path | None = Field(default=None)

    @property
    def resolved_shell(self) -> str:
        """The shell that will actually be spawned."""
        return self.shell or default_shell()

    @property
    def is_windows(self) -> bool:
        return sys.platform == "win32"

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            PSW_SKIP_VALIDATION, PSW_SHELL, PSW_LOG_LEVEL, PSW_LOG_FILE.
        """
        skip = os.environ.get("PSW_SKIP_VALIDATION", "").strip().lower() in _TRUTHY
        log_file = os.environ.get("PSW_LOG_FILE")
        return cls(
            validate_commands=not skip,
            shell=os.environ.get("PSW_SHELL") or None,
            log_level=os.environ.get("PSW_LOG_LEVEL", "WARNING"),
            log_file=Path(log_file) if log_file else None,
        )
