"""Script execution as a real shell subprocess.

Validates a generated script, pipes its executable lines into a host shell,
streams stdout/stderr line-by-line while the process runs, and guarantees the
process tree is torn down and deregistered however execution ends.
"""

from __future__ import annotations

import asyncio
import logging
import subprocess
import sys
from collections.abc import Callable
from pathlib import Path

from rich.markup import escape

from psw.config import Config
from psw.errors import ProcessSpawnError, ScriptExecutionError, ScriptValidationError
from psw.utils import console, print_success, print_warning

from .registry import ProcessHandle, ProcessRegistry, default_registry
from .validator import COMMENT_MARKER, CommandValidator

logger = logging.getLogger(__name__)

WINDOWS_ECHO_OFF = "@echo off"

LineSink = Callable[[str], None]


def _print_output(line: str) -> None:
    console.print(line, markup=False, highlight=False)


def _print_error(line: str) -> None:
    console.print(f"[red]{escape(line)}[/red]", highlight=False)


def _print_comment(line: str) -> None:
    console.print(f"[grey50]{escape(line)}[/grey50]", highlight=False)


def filter_script(
    script: str,
    newline: str = "\n",
    on_comment: LineSink | None = None,
) -> str:
    """Drop comment lines from *script*, reporting each one to *on_comment*.

    Non-comment lines keep their original order and are re-joined with
    *newline*.

    Examples::

        filter_script("# hi\\ndotnet run") -> "dotnet run"
    """
    kept: list[str] = []
    for line in script.splitlines():
        if line.lstrip().startswith(COMMENT_MARKER):
            logger.debug("Skipping comment line: %s", line)
            if on_comment is not None:
                on_comment(line)
        else:
            kept.append(line)
    return newline.join(kept)


async def _pump(stream: asyncio.StreamReader | None, sink: LineSink) -> None:
    """Forward every line of *stream* to *sink* until EOF."""
    if stream is None:
        return
    while True:
        line_bytes = await stream.readline()
        if not line_bytes:
            break
        sink(line_bytes.decode("utf-8", errors="replace").rstrip("\r\n"))


class ScriptExecutor:
    """Runs generated scripts in a host shell.

    Each executor shares the injected ``ProcessRegistry`` (by default the
    process-wide one) and installs its interrupt/exit cleanup hooks once.
    """

    def __init__(
        self,
        config: Config | None = None,
        registry: ProcessRegistry | None = None,
        validator: CommandValidator | None = None,
        on_output: LineSink | None = None,
        on_error: LineSink | None = None,
        on_comment: LineSink | None = None,
    ) -> None:
        self.config = config or Config()
        self.registry = registry if registry is not None else default_registry()
        self.validator = validator or CommandValidator()
        self.on_output = on_output or _print_output
        self.on_error = on_error or _print_error
        self.on_comment = on_comment or _print_comment
        self.registry.install_handlers()

    @property
    def is_windows(self) -> bool:
        return self.config.is_windows

    @property
    def newline(self) -> str:
        return "\r\n" if self.is_windows else "\n"

    # -- Public API --------------------------------------------------------

    async def run(self, script: str, working_directory: str | Path) -> None:
        """Validate and execute *script* inside *working_directory*.

        Raises:
            ScriptValidationError: The script contains non-allowlisted commands;
                no process is started.
            ProcessSpawnError: The shell could not be started.
            ScriptExecutionError: The shell exited with a non-zero code.
        """
        cwd = Path(working_directory)
        logger.info("Executing script in directory: %s", cwd)

        self._check(script)

        console.print()
        console.print(f"[bold blue]Running script in:[/bold blue] {escape(str(cwd))}")
        console.print()

        payload = filter_script(script, self.newline, self.on_comment)
        if self.is_windows:
            payload = WINDOWS_ECHO_OFF + self.newline + payload
        payload += self.newline

        exit_code = await self._execute(payload, cwd)

        if exit_code != 0:
            logger.warning("Script exited with non-zero code: %d", exit_code)
            console.print()
            print_warning(f"Script exited with code {exit_code}")
            raise ScriptExecutionError(
                f"Script execution failed with exit code {exit_code}",
                exit_code=exit_code,
            )

        logger.info("Script executed successfully with exit code 0")
        console.print()
        print_success("Script executed successfully!")

    # -- Internals ---------------------------------------------------------

    def _check(self, script: str) -> None:
        if not self.config.validate_commands:
            logger.warning("Command validation is DISABLED; executing script unchecked")
            print_warning(
                "WARNING: command validation is disabled. "
                "The script will run without allowlist checks."
            )
            return

        result = self.validator.validate(script, self.is_windows)
        if not result.ok:
            raise ScriptValidationError(result.violations)

    async def _spawn(self, cwd: Path) -> asyncio.subprocess.Process:
        if not cwd.is_dir():
            raise ProcessSpawnError(
                f"Working directory not found: '{cwd}'",
                suggestion="Create the directory first or pass an existing --run-dir",
            )

        shell = self.config.resolved_shell
        logger.debug("Using shell: %s", shell)

        kwargs: dict = {}
        if self.is_windows:
            kwargs["creationflags"] = getattr(subprocess, "CREATE_NO_WINDOW", 0)
        else:
            # Own process group so the whole tree can be signalled at once.
            kwargs["start_new_session"] = True

        try:
            return await asyncio.create_subprocess_exec(
                shell,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(cwd),
                **kwargs,
            )
        except FileNotFoundError as exc:
            raise ProcessSpawnError(
                f"Shell not found: '{shell}'",
                suggestion="Install the shell or point PSW_SHELL at one that exists",
            ) from exc
        except PermissionError as exc:
            raise ProcessSpawnError(
                f"Permission denied executing: '{shell}'",
                suggestion="Check file permissions of the shell and working directory",
            ) from exc

    async def _execute(self, payload: str, cwd: Path) -> int:
        process = await self._spawn(cwd)
        handle = ProcessHandle(process=process, working_directory=cwd)
        self.registry.register(handle)
        logger.debug("Spawned script process PID %d", process.pid)

        readers = asyncio.gather(
            _pump(process.stdout, self.on_output),
            _pump(process.stderr, self._report_error),
        )
        try:
            await self._feed(process, payload)
            await readers
            return await process.wait()
        finally:
            if handle.is_running:
                handle.kill_tree()
            if not readers.done():
                readers.cancel()
            self.registry.unregister(handle)

    async def _feed(self, process: asyncio.subprocess.Process, payload: str) -> None:
        stdin = process.stdin
        if stdin is None:
            return
        try:
            stdin.write(payload.encode("utf-8"))
            await stdin.drain()
        except (BrokenPipeError, ConnectionResetError):
            logger.debug("Shell closed stdin before the script was fully written")
        finally:
            stdin.close()

    def _report_error(self, line: str) -> None:
        if line:
            logger.warning("Script error output: %s", line)
            self.on_error(line)


async def run_script(
    script: str,
    working_directory: str | Path,
    config: Config | None = None,
) -> None:
    """Validate and run *script* with a default ``ScriptExecutor``."""
    await ScriptExecutor(config=config).run(script, working_directory)
