"""Process-wide registry of running script processes.

Every subprocess the executor spawns is registered here so that a Ctrl+C or a
normal interpreter exit can terminate each outstanding process tree exactly
once.  Both triggers funnel into the single :meth:`ProcessRegistry.cleanup`
routine.  The registry is the only shared mutable state in the engine and is
guarded by one re-entrant lock (a signal handler may fire while the main
thread already holds it).
"""

from __future__ import annotations

import asyncio
import atexit
import logging
import os
import signal
import subprocess
import sys
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

IS_WINDOWS = sys.platform == "win32"


# ---------------------------------------------------------------------------
# Process handle
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class ProcessHandle:
    """A spawned script process owned by one ``ScriptExecutor``."""

    process: asyncio.subprocess.Process
    working_directory: Path
    started_at: float = field(default_factory=time.time)
    _killed: bool = field(default=False, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def is_running(self) -> bool:
        return self.process.returncode is None

    def kill_tree(self) -> bool:
        """Terminate the process and all of its descendants.

        Best-effort and idempotent: a handle is only ever signalled once, and
        errors from a process that already exited are swallowed.

        Returns:
            ``True`` if a termination attempt was made by this call.
        """
        with self._lock:
            if self._killed or not self.is_running:
                return False
            self._killed = True

        logger.debug("Killing process tree rooted at PID %d", self.pid)
        if IS_WINDOWS:
            _kill_tree_windows(self.pid)
        else:
            _kill_tree_posix(self.process)
        return True


def _kill_tree_posix(process: asyncio.subprocess.Process) -> None:
    """SIGTERM the process group; fall back to killing the process directly."""
    try:
        os.killpg(os.getpgid(process.pid), signal.SIGTERM)
        return
    except (ProcessLookupError, PermissionError, OSError) as exc:
        logger.debug("Process group kill failed for PID %d: %s", process.pid, exc)

    try:
        process.kill()
    except ProcessLookupError:
        logger.debug("PID %d already exited", process.pid)


def _kill_tree_windows(pid: int) -> None:
    """Kill the whole tree with ``taskkill /T /F``."""
    try:
        subprocess.run(
            ["taskkill", "/PID", str(pid), "/T", "/F"],
            capture_output=True,
            check=False,
            timeout=10,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        logger.debug("taskkill failed for PID %d: %s", pid, exc)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class ProcessRegistry:
    """Tracks live script processes keyed by PID.

    Construct one per program and inject it into every executor; see
    :func:`default_registry` for the shared instance used when none is given.
    """

    def __init__(self) -> None:
        self._handles: dict[int, ProcessHandle] = {}
        self._lock = threading.RLock()
        self._handlers_installed = False
        self._previous_sigint = None

    # -- Registration ------------------------------------------------------

    def register(self, handle: ProcessHandle) -> None:
        with self._lock:
            self._handles[handle.pid] = handle
        logger.debug("Registered PID %d (%d active)", handle.pid, len(self))

    def unregister(self, handle: ProcessHandle) -> None:
        with self._lock:
            # A reused PID may already belong to a newer handle.
            if self._handles.get(handle.pid) is handle:
                del self._handles[handle.pid]
        logger.debug("Unregistered PID %d (%d active)", handle.pid, len(self))

    def snapshot(self) -> list[ProcessHandle]:
        with self._lock:
            return list(self._handles.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._handles)

    def __contains__(self, handle: object) -> bool:
        with self._lock:
            return isinstance(handle, ProcessHandle) and handle.pid in self._handles

    # -- Cleanup -----------------------------------------------------------

    def cleanup(self) -> int:
        """Kill every still-running registered process tree, then clear the registry.

        Safe to call any number of times and from any trigger.

        Returns:
            Number of process trees a termination attempt was made for.
        """
        with self._lock:
            handles = list(self._handles.values())
            killed = 0
            for handle in handles:
                if handle.kill_tree():
                    killed += 1
            self._handles.clear()

        if killed:
            logger.info("Terminated %d running script process(es)", killed)
        return killed

    # -- Trigger installation ----------------------------------------------

    def install_handlers(self) -> bool:
        """Hook cleanup into SIGINT and interpreter exit, once per registry.

        Returns:
            ``True`` if the handlers were installed by this call.
        """
        with self._lock:
            if self._handlers_installed:
                return False
            self._handlers_installed = True

        atexit.register(self.cleanup)

        if threading.current_thread() is threading.main_thread():
            self._previous_sigint = signal.getsignal(signal.SIGINT)
            signal.signal(signal.SIGINT, self._on_sigint)
        else:
            logger.debug("Not on the main thread; SIGINT cleanup handler not installed")
        return True

    def _on_sigint(self, signum, frame) -> None:
        logger.debug("Interrupt received; cleaning up %d process(es)", len(self))
        self.cleanup()

        previous = self._previous_sigint
        if callable(previous):
            previous(signum, frame)
        elif previous == signal.SIG_IGN:
            return
        else:
            raise KeyboardInterrupt


_default_registry: ProcessRegistry | None = None
_default_lock = threading.Lock()


def default_registry() -> ProcessRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _default_registry
    with _default_lock:
        if _default_registry is None:
            _default_registry = ProcessRegistry()
        return _default_registry
