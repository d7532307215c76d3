"""Shared pytest fixtures for the PSW test suite.

Provides reusable fixtures for:
- Project configurations (plain CMS, unattended install, every feature on)
- Fake asyncio subprocesses with canned stdout/stderr and exit codes
- Isolated process registries that never touch the real SIGINT handler
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from psw.config import Config
from psw.executor.registry import ProcessRegistry
from psw.generator import Configuration


# ---------------------------------------------------------------------------
# Project configurations
# ---------------------------------------------------------------------------


@pytest.fixture
def cms_config() -> Configuration:
    """A plain CMS project pinned to a modern template version."""
    return Configuration(
        template_name="Umbraco.Templates",
        template_version="14.3.0",
        project_name="MyProject",
    )


@pytest.fixture
def unattended_config(cms_config: Configuration) -> Configuration:
    """The CMS project with an unattended SQLite install."""
    return cms_config.model_copy(update={
        "use_unattended_install": True,
        "database_type": "SQLite",
        "admin_name": "Administrator",
        "admin_email": "admin@example.com",
        "admin_password": "SuperSecret123!",
    })


@pytest.fixture
def full_config(cms_config: Configuration) -> Configuration:
    """Every feature switched on: solution, starter kit, packages, Docker."""
    return cms_config.model_copy(update={
        "template_version": "15.1.0",
        "create_solution_file": True,
        "solution_name": "MySolution",
        "include_starter_kit": True,
        "starter_kit_package": "clean",
        "packages": "uSync|15.0.0, Umbraco.Forms|--prerelease",
        "include_dockerfile": True,
        "include_docker_compose": True,
    })


# ---------------------------------------------------------------------------
# Fake subprocesses
# ---------------------------------------------------------------------------


class FakeProcess:
    """Stand-in for ``asyncio.subprocess.Process``.

    Must be constructed inside a running event loop (the stream readers bind
    to it).  ``returncode`` stays ``None`` until :meth:`wait` is awaited.
    """

    def __init__(
        self,
        stdout: bytes = b"",
        stderr: bytes = b"",
        returncode: int = 0,
        pid: int = 4242,
    ) -> None:
        self.pid = pid
        self.returncode: int | None = None
        self._final_returncode = returncode

        self.stdout = asyncio.StreamReader()
        self.stdout.feed_data(stdout)
        self.stdout.feed_eof()

        self.stderr = asyncio.StreamReader()
        self.stderr.feed_data(stderr)
        self.stderr.feed_eof()

        self.stdin = MagicMock()
        self.stdin.drain = AsyncMock()

        self.kill = MagicMock()

    async def wait(self) -> int:
        self.returncode = self._final_returncode
        return self._final_returncode

    @property
    def written(self) -> str:
        """Everything written to stdin, decoded."""
        return b"".join(call.args[0] for call in self.stdin.write.call_args_list).decode()


@pytest.fixture
def fake_process_factory():
    """Return the ``FakeProcess`` class for use inside async tests."""
    return FakeProcess


# ---------------------------------------------------------------------------
# Registry & runtime config
# ---------------------------------------------------------------------------


@pytest.fixture
def registry(monkeypatch) -> ProcessRegistry:
    """A fresh registry whose handler installation is a no-op."""
    reg = ProcessRegistry()
    monkeypatch.setattr(reg, "install_handlers", lambda: False)
    return reg


@pytest.fixture
def runtime_config() -> Config:
    """Runtime config with validation enabled and the default shell."""
    return Config()
