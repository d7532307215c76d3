"""PSW script executor -- validates and runs generated scripts.

Quick usage::

    from psw.executor import ScriptExecutor, validate_script

    ok, violations = validate_script(script, is_windows=False)
    await ScriptExecutor().run(script, "/tmp/my-site")
"""

from psw.executor.registry import ProcessHandle, ProcessRegistry, default_registry
from psw.executor.runner import ScriptExecutor, filter_script, run_script
from psw.executor.validator import CommandValidator, ValidationResult, validate_script

__all__ = [
    "CommandValidator",
    "ProcessHandle",
    "ProcessRegistry",
    "ScriptExecutor",
    "ValidationResult",
    "default_registry",
    "filter_script",
    "run_script",
    "validate_script",
]
