"""Allowlist validation for generated scripts.

Every non-comment line of a script is checked against a fixed, per-platform
set of permitted ``dotnet`` invocations before anything reaches a real shell.
The generator only emits these shapes; the validator re-verifies them so that
a generator bug or a hand-edited script cannot execute an arbitrary command.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

COMMENT_MARKER = "#"
CHAIN_SEPARATOR = "&&"

# `&&` followed by an even number of double quotes, i.e. outside any quoted value.
_CHAIN_SPLIT = re.compile(re.escape(CHAIN_SEPARATOR) + r'(?=(?:[^"]*"[^"]*")*[^"]*$)')

# Quoted values may not contain command substitution; bare values no shell metacharacters.
_QUOTED = r'"(?:[^"`$]|\$(?!\())*"'
_QUOTED_OR_BARE = rf'(?:{_QUOTED}|[^\s;&|<>`$()"\']+)'

_PATTERN_SOURCES: tuple[str, ...] = (
    # dotnet new install Umbraco.Templates::14.3.0 --force
    r"^dotnet\s+new\s+install\s+[\w.\-:]+(?:\s+(?:--force|--interactive))*\s*$",
    # dotnet new -i Umbraco.Templates::10.0.0
    r"^dotnet\s+new\s+-i\s+[\w.\-:]+\s*$",
    # dotnet new sln --name "MySolution"
    rf"^dotnet\s+new\s+sln(?:\s+--name\s+{_QUOTED})*\s*$",
    # dotnet new umbraco --force -n "MyProject" --development-database-type SQLite
    # dotnet new umbraco-compose -P "MyProject"
    rf"^dotnet\s+new\s+[\w.\-]+(?:\s+(?:--[\w\-]+|-[a-zA-Z]+)(?:\s+(?!-){_QUOTED_OR_BARE})?)*\s*$",
    # dotnet sln add "MyProject"
    rf"^dotnet\s+sln\s+add\s+{_QUOTED_OR_BARE}\s*$",
    # dotnet add "MyProject" package uSync --version 13.2.1
    rf"^dotnet\s+add(?:\s+{_QUOTED_OR_BARE})?\s+package\s+[\w.\-]+"
    r"(?:\s+(?:--version\s+[\w.\-]+|--prerelease))*\s*$",
    # dotnet run --project "MyProject"
    rf"^dotnet\s+run(?:\s+(?:--project|--urls)\s+{_QUOTED_OR_BARE})*\s*$",
    rf"^dotnet\s+build(?:\s+{_QUOTED_OR_BARE})*\s*$",
    rf"^dotnet\s+restore(?:\s+{_QUOTED_OR_BARE})*\s*$",
)

_WINDOWS_ONLY_SOURCES: tuple[str, ...] = (
    r"^@echo\s+off$",
    # $env:Umbraco__CMS__Global__InstallMissingDatabase="true"
    r'^\$env:\w+\s*=\s*"[^"`$&|]*"$',
)

POSIX_ALLOWLIST: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE) for p in _PATTERN_SOURCES
)
WINDOWS_ALLOWLIST: tuple[re.Pattern[str], ...] = POSIX_ALLOWLIST + tuple(
    re.compile(p, re.IGNORECASE) for p in _WINDOWS_ONLY_SOURCES
)


@dataclass
class ValidationResult:
    """Outcome of a single validation pass."""

    ok: bool
    violations: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.ok


def allowlist_for(is_windows: bool) -> tuple[re.Pattern[str], ...]:
    return WINDOWS_ALLOWLIST if is_windows else POSIX_ALLOWLIST


def is_command_allowed(command: str, is_windows: bool) -> bool:
    """Return ``True`` if a single (already trimmed) command is on the allowlist."""
    return any(pattern.match(command) for pattern in allowlist_for(is_windows))


def split_chain(line: str) -> list[str]:
    """Split *line* on ``&&`` separators that are not inside double quotes.

    Examples::

        split_chain('dotnet new install X && dotnet run') -> ['dotnet new install X', 'dotnet run']
        split_chain('dotnet new umbraco --password "a&&b"') -> ['dotnet new umbraco --password "a&&b"']
    """
    return [segment.strip() for segment in _CHAIN_SPLIT.split(line)]


class CommandValidator:
    """Validates script text against the platform allowlist."""

    def validate(self, script: str, is_windows: bool) -> ValidationResult:
        """Check every non-comment, non-blank line of *script*.

        Lines joined with ``&&`` outside quoted values are split and each
        segment is checked on its own.  Line numbers in the violations are 1-based.
        """
        violations: list[str] = []

        for number, raw_line in enumerate(script.splitlines(), start=1):
            line = raw_line.strip()
            if not line or line.startswith(COMMENT_MARKER):
                continue

            segments = split_chain(line)
            if len(segments) > 1:
                logger.debug("Line %d contains %d chained commands", number, len(segments))
                for segment in segments:
                    if segment and not is_command_allowed(segment, is_windows):
                        violations.append(
                            f"Line {number}: Command not allowed in chain: '{segment}'"
                        )
                        logger.warning(
                            "Blocked command in chain at line %d: %s", number, segment
                        )
            elif not is_command_allowed(line, is_windows):
                violations.append(f"Line {number}: Command not allowed: '{line}'")
                logger.warning("Blocked command at line %d: %s", number, line)

        if violations:
            logger.warning("Script validation failed with %d errors", len(violations))
        else:
            logger.info("Script validation passed - all commands are allowed")

        return ValidationResult(ok=not violations, violations=violations)


def validate_script(script: str, is_windows: bool) -> tuple[bool, list[str]]:
    """Validate *script* and return ``(ok, violations)``."""
    result = CommandValidator().validate(script, is_windows)
    return result.ok, result.violations
