"""Script generation pipeline.

Takes a ``Configuration`` and renders the ordered ``dotnet`` command sequence
that scaffolds the project.  Generation is pure: no I/O, no exceptions for
malformed input (bad package entries simply become literal command text for
the validator to judge), and identical input always yields identical output.
"""

from __future__ import annotations

import logging

from .database import database_fragment
from .models import Command, Configuration
from .templates import (
    CMS_TEMPLATE_ALIAS,
    COMPOSE_TEMPLATE_ALIAS,
    can_include_docker,
    get_short_name,
    install_subcommand,
    is_cms_template,
)

logger = logging.getLogger(__name__)

ONELINER_SEPARATOR = " && "


# ---------------------------------------------------------------------------
# Package entry helpers
# ---------------------------------------------------------------------------


def split_package_entries(packages: str | None) -> list[str]:
    """Split a comma-separated package list, trimming and dropping empty entries."""
    if not packages:
        return []
    return [entry.strip() for entry in packages.split(",") if entry.strip()]


def package_arguments(entry: str) -> str:
    """Turn a ``Name|Version`` style entry into ``dotnet add package`` arguments.

    Examples::

        package_arguments("uSync|13.2.1")        -> "uSync --version 13.2.1"
        package_arguments("uSync|--prerelease")  -> "uSync --prerelease"
        package_arguments("uSync|")              -> "uSync"
    """
    return (
        entry.rstrip("|")
        .replace("|--prerelease", " --prerelease")
        .replace("|", " --version ")
    )


def bare_package_name(entry: str) -> str:
    """Return the package id of an entry, without version or flags."""
    return entry.split("|", 1)[0].split(" ", 1)[0].strip()


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class ScriptGenerator:
    """Renders a ``Configuration`` into an ordered list of ``Command`` lines.

    Each stage is an independent method returning zero or more commands; the
    stages are concatenated in a fixed order by :meth:`build_commands`.
    """

    def __init__(self, config: Configuration) -> None:
        self.config = config

    # -- Public API --------------------------------------------------------

    def generate(self) -> str:
        """Render the full script as text (multi-line or one-liner)."""
        commands = self.build_commands()

        if self.config.remove_comments or self.config.oneliner_output:
            commands = [c for c in commands if not c.is_comment]

        if self.config.oneliner_output:
            return ONELINER_SEPARATOR.join(c.text for c in commands if not c.is_blank)

        return "\n".join(c.text for c in commands)

    def build_commands(self) -> list[Command]:
        """Assemble every stage's commands in pipeline order."""
        commands: list[Command] = []

        # 1. Template install
        commands.extend(self.template_install())

        # 2. Solution file
        commands.extend(self.create_solution())

        # 3. Project (plus Docker Compose and workaround env lines)
        commands.extend(self.create_project())

        # 4. Attach project to solution
        commands.extend(self.add_project_to_solution())

        commands.append(Command.blank())

        # 5. Starter kit (CMS template only)
        commands.extend(self.add_starter_kit())

        # 6. Packages
        commands.extend(self.add_packages())

        # 7. Run
        commands.extend(self.run_project())

        logger.debug(
            "Generated %d script lines for template %s",
            len(commands),
            self.config.template_name,
        )
        return commands

    # -- Stages ------------------------------------------------------------

    def template_install(self) -> list[Command]:
        cfg = self.config
        install = install_subcommand(cfg.template_version)

        if not cfg.template_version:
            return [
                Command.comment("Ensure we have the latest templates"),
                Command(f"dotnet new {install} {cfg.template_name}"),
            ]
        return [
            Command(f"dotnet new {install} {cfg.template_name}::{cfg.template_version}"),
        ]

    def create_solution(self) -> list[Command]:
        cfg = self.config
        if not (cfg.create_solution_file and cfg.solution_name.strip()):
            return []
        return [
            Command.comment("Create solution/project"),
            Command(f'dotnet new sln --name "{cfg.solution_name}"'),
        ]

    def create_project(self) -> list[Command]:
        cfg = self.config

        if not is_cms_template(cfg.template_name):
            alias = get_short_name(cfg.template_name)
            return [Command(f'dotnet new {alias} --force -n "{cfg.project_name}"')]

        line = f'dotnet new {CMS_TEMPLATE_ALIAS} --force -n "{cfg.project_name}"'
        extra_lines: tuple[str, ...] = ()

        if cfg.use_unattended_install:
            fragment = database_fragment(
                cfg.database_type, cfg.template_version, cfg.connection_string
            )
            line += (
                f' --friendly-name "{cfg.admin_name}"'
                f' --email "{cfg.admin_email}"'
                f' --password "{cfg.admin_password}"'
                f"{fragment.render()}"
            )
            extra_lines = fragment.extra_env_lines

        docker_allowed = can_include_docker(cfg.template_name, cfg.template_version)
        if cfg.include_dockerfile and docker_allowed:
            line += " --add-docker"

        commands = [Command(line)]
        commands.extend(Command(env) for env in extra_lines)

        if cfg.include_docker_compose and docker_allowed:
            commands.append(
                Command(f'dotnet new {COMPOSE_TEMPLATE_ALIAS} -P "{cfg.project_name}"')
            )
        return commands

    def add_project_to_solution(self) -> list[Command]:
        cfg = self.config
        if not (cfg.create_solution_file and cfg.solution_name.strip()):
            return []
        return [Command(f'dotnet sln add "{cfg.project_name}"')]

    def add_starter_kit(self) -> list[Command]:
        package = self._starter_kit_entry()
        if not package:
            return []
        return [
            Command.comment("Add starter kit"),
            Command(self._add_package_line(package_arguments(package))),
            Command.blank(),
        ]

    def add_packages(self) -> list[Command]:
        entries = split_package_entries(self.config.packages)
        if not entries:
            return []

        starter_kit = self._starter_kit_entry()
        starter_kit_name = bare_package_name(starter_kit).lower() if starter_kit else None

        commands = [Command.comment("Add packages")]
        for entry in entries:
            name = bare_package_name(entry)
            if starter_kit_name and name.lower() == starter_kit_name:
                commands.append(
                    Command.comment(f"Skipping {name}: already added as the starter kit")
                )
                continue
            commands.append(Command(self._add_package_line(package_arguments(entry))))
        commands.append(Command.blank())
        return commands

    def run_project(self) -> list[Command]:
        cfg = self.config
        if cfg.skip_run:
            return []
        if cfg.project_name.strip():
            run = Command(f'dotnet run --project "{cfg.project_name}"')
        else:
            run = Command("dotnet run")
        return [run, Command.comment("Running")]

    # -- Helpers -----------------------------------------------------------

    def _starter_kit_entry(self) -> str:
        """The starter kit entry that will actually be installed, or ``""``."""
        cfg = self.config
        if not (cfg.include_starter_kit and is_cms_template(cfg.template_name)):
            return ""
        entries = split_package_entries(cfg.starter_kit_package)
        return entries[0] if entries else ""

    def _add_package_line(self, arguments: str) -> str:
        project = self.config.project_name
        if project.strip():
            return f'dotnet add "{project}" package {arguments}'
        return f"dotnet add package {arguments}"


def generate_script(config: Configuration) -> str:
    """Render *config* into script text.  Pure and deterministic."""
    return ScriptGenerator(config).generate()
