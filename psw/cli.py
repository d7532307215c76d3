"""PSW command-line entry point.

Builds a project ``Configuration`` from flags, prints the generated script,
and optionally runs it.

Usage::

    psw -n MyProject --template-version 14.3.0 -p "uSync|13.2.1,Umbraco.Forms"
    psw -n MyProject -u --database-type SQLite --admin-email admin@example.com \\
        --admin-password "SuperSecret123!" --auto-run --run-dir ./sites
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import uuid
from datetime import datetime
from pathlib import Path

from rich.markup import escape
from rich.syntax import Syntax

from psw import __version__
from psw.config import Config, default_log_dir
from psw.errors import ExitCode, PswError
from psw.executor import ScriptExecutor
from psw.generator import Configuration, DatabaseType, generate_script
from psw.utils import console, print_error, print_summary_table, setup_logging

logger = logging.getLogger(__name__)

LTS_SENTINEL = "LTS"


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="psw",
        description="Package Script Writer -- generate and run dotnet project scripts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  psw -n MyProject -p uSync,Umbraco.Forms\n"
            "  psw -n MyProject --template-version 14.3.0 -o\n"
            "  psw -n MyProject -k clean --auto-run --run-dir ./sites\n"
        ),
    )
    parser.add_argument("-v", "--version", action="version", version=f"psw {__version__}")

    template = parser.add_argument_group("template")
    template.add_argument("-t", "--template-package", default="Umbraco.Templates")
    template.add_argument(
        "--template-version",
        default="",
        help="Concrete template version (blank for latest)",
    )
    template.add_argument("-n", "--project-name", default="")
    template.add_argument(
        "-s", "--solution", default="",
        help="Create a solution file with this name",
    )

    packages = parser.add_argument_group("packages")
    packages.add_argument(
        "-p", "--packages", default="",
        help="Comma-separated packages: Name, Name|Version or Name|--prerelease",
    )
    packages.add_argument("-k", "--starter-kit", default="", help="Starter kit package")

    unattended = parser.add_argument_group("unattended install")
    unattended.add_argument("-u", "--unattended-defaults", action="store_true")
    unattended.add_argument(
        "--database-type",
        choices=[d.value for d in DatabaseType],
        default=None,
    )
    unattended.add_argument("--connection-string", default="")
    unattended.add_argument("--admin-name", default="Administrator")
    unattended.add_argument("--admin-email", default="admin@example.com")
    unattended.add_argument("--admin-password", default="1234567890")

    output = parser.add_argument_group("output")
    output.add_argument("--dockerfile", action="store_true")
    output.add_argument("--docker-compose", action="store_true")
    output.add_argument("-o", "--oneliner", action="store_true")
    output.add_argument("-r", "--remove-comments", action="store_true")
    output.add_argument("--no-run", action="store_true", help="Omit 'dotnet run'")

    execution = parser.add_argument_group("execution")
    execution.add_argument("--auto-run", action="store_true", help="Run the script")
    execution.add_argument(
        "--run-dir", default=None,
        help="Directory to run the script in (default: current directory)",
    )
    execution.add_argument(
        "--skip-validation",
        action="store_true",
        help="DANGEROUS: run the script without allowlist validation",
    )
    execution.add_argument("--verbose", action="store_true")
    execution.add_argument("--log-file", default=None)
    return parser


def configuration_from_args(args: argparse.Namespace) -> Configuration:
    """Map parsed flags onto a project ``Configuration``."""
    database_type = args.database_type
    if args.unattended_defaults and database_type is None:
        database_type = DatabaseType.SQLITE.value

    return Configuration(
        template_name=args.template_package,
        template_version=args.template_version.strip(),
        project_name=args.project_name,
        create_solution_file=bool(args.solution),
        solution_name=args.solution,
        use_unattended_install=args.unattended_defaults,
        database_type=database_type,
        connection_string=args.connection_string,
        admin_name=args.admin_name,
        admin_email=args.admin_email,
        admin_password=args.admin_password,
        packages=args.packages,
        include_starter_kit=bool(args.starter_kit),
        starter_kit_package=args.starter_kit,
        include_dockerfile=args.dockerfile,
        include_docker_compose=args.docker_compose,
        skip_run=args.no_run,
        oneliner_output=args.oneliner,
        remove_comments=args.remove_comments,
    )


def runtime_config_from_args(args: argparse.Namespace) -> Config:
    """Layer CLI flags over the environment-derived runtime ``Config``."""
    config = Config.from_env()
    if args.skip_validation:
        config.validate_commands = False
    if args.verbose:
        config.log_level = "DEBUG"
    if args.log_file:
        config.log_file = Path(args.log_file)
    elif args.verbose and config.log_file is None:
        config.log_file = default_log_dir() / f"psw-{datetime.now():%Y%m%d}.log"
    return config


# ---------------------------------------------------------------------------
# Error rendering
# ---------------------------------------------------------------------------


def handle_error(exc: BaseException, show_traceback: bool = False) -> ExitCode:
    """Render *exc* for the user and return the matching exit code."""
    correlation_id = uuid.uuid4().hex[:8]
    logger.error("Error occurred. Correlation ID: %s", correlation_id, exc_info=exc)

    console.print()
    if isinstance(exc, PswError):
        print_error(f"✗ {escape(exc.user_message)}")
        if exc.suggestion:
            console.print(f"[yellow]Suggestion:[/yellow] {escape(exc.suggestion)}")
        console.print(
            f"[dim]Error Code: {exc.error_code} | Correlation ID: {correlation_id}[/dim]"
        )
        code = exc.exit_status
    elif isinstance(exc, OSError):
        print_error("✗ File system error")
        console.print(f"[yellow]Reason:[/yellow] {escape(str(exc))}")
        console.print(f"[dim]Error Code: PSW-IO-001 | Correlation ID: {correlation_id}[/dim]")
        code = ExitCode.FILE_SYSTEM_ERROR
    else:
        print_error(f"✗ An unexpected error occurred: {escape(str(exc))}")
        console.print(f"[dim]Correlation ID: {correlation_id}[/dim]")
        code = ExitCode.GENERAL_ERROR

    if show_traceback:
        console.print_exception()
    return code


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ``psw`` / ``python -m psw.cli``."""
    args = build_parser().parse_args(argv)
    config = runtime_config_from_args(args)
    setup_logging(config.log_level, config.log_file)

    if args.template_version.strip().upper() == LTS_SENTINEL:
        print_error(
            "Error: --template-version LTS must be resolved to a concrete version first"
        )
        return int(ExitCode.VALIDATION_ERROR)

    project = configuration_from_args(args)
    script = generate_script(project)

    if args.verbose:
        print_summary_table(
            {
                "Template": f"{project.template_name} {project.template_version or '(latest)'}",
                "Project": project.project_name or "(current directory)",
                "Packages": project.packages or "-",
                "Starter kit": project.starter_kit_package or "-",
            },
            title="Configuration",
        )

    console.print(Syntax(script, "bash", word_wrap=True))

    if not args.auto_run:
        return int(ExitCode.SUCCESS)

    run_dir = Path(args.run_dir) if args.run_dir else Path.cwd()
    try:
        run_dir.mkdir(parents=True, exist_ok=True)
        asyncio.run(ScriptExecutor(config=config).run(script, run_dir))
    except KeyboardInterrupt:
        print_error("Interrupted.")
        return int(ExitCode.GENERAL_ERROR)
    except Exception as exc:
        return int(handle_error(exc, show_traceback=args.verbose))

    return int(ExitCode.SUCCESS)


if __name__ == "__main__":
    sys.exit(main())
