"""Pydantic v2 models for the script generator.

Defines the project ``Configuration`` consumed by the generator and the
``Command`` value objects it produces.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

COMMENT_MARKER = "#"


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class DatabaseType(str, Enum):
    """Database engines supported by unattended CMS installs."""
    SQLITE = "SQLite"
    LOCAL_DB = "LocalDb"
    SQL_SERVER = "SQLServer"
    SQL_AZURE = "SQLAzure"
    SQLCE = "SQLCE"


class CommandKind(str, Enum):
    """Classification of a generated script line."""
    COMMENT = "comment"
    EXECUTABLE = "executable"
    BLANK = "blank"


# ---------------------------------------------------------------------------
# Script lines
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Command:
    """One self-contained line of generated script text."""

    text: str
    kind: CommandKind = CommandKind.EXECUTABLE

    @classmethod
    def comment(cls, text: str) -> "Command":
        return cls(f"{COMMENT_MARKER} {text}", CommandKind.COMMENT)

    @classmethod
    def blank(cls) -> "Command":
        return cls("", CommandKind.BLANK)

    @property
    def is_comment(self) -> bool:
        return self.kind is CommandKind.COMMENT

    @property
    def is_blank(self) -> bool:
        return self.kind is CommandKind.BLANK or not self.text.strip()


# ---------------------------------------------------------------------------
# Project configuration
# ---------------------------------------------------------------------------

class Configuration(BaseModel):
    """The desired project, as assembled by the flag parser, template store or prompts.

    Field names are snake_case; the camelCase names used by saved template and
    history documents are accepted as aliases.  Instances are frozen: one
    configuration describes one generator run.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    template_name: str = Field(default="Umbraco.Templates", alias="templateName")
    template_version: str = Field(
        default="",
        alias="templateVersion",
        description="Concrete version or empty for latest; never the 'LTS' sentinel",
    )
    project_name: str = Field(default="", alias="projectName")
    create_solution_file: bool = Field(default=False, alias="createSolutionFile")
    solution_name: str = Field(default="", alias="solutionName")

    use_unattended_install: bool = Field(default=False, alias="useUnattendedInstall")
    database_type: Optional[str] = Field(
        default=None,
        alias="databaseType",
        description="One of the DatabaseType values; anything else yields no fragment",
    )
    connection_string: str = Field(default="", alias="connectionString")
    admin_name: str = Field(default="", alias="adminName")
    admin_email: str = Field(default="", alias="adminEmail")
    admin_password: str = Field(default="", alias="adminPassword")

    packages: str = Field(
        default="",
        description="Comma-separated 'Name', 'Name|Version' or 'Name|--prerelease' entries",
    )
    include_starter_kit: bool = Field(default=False, alias="includeStarterKit")
    starter_kit_package: str = Field(default="", alias="starterKitPackage")

    include_dockerfile: bool = Field(default=False, alias="includeDockerfile")
    include_docker_compose: bool = Field(default=False, alias="includeDockerCompose")

    skip_run: bool = Field(default=False, alias="skipRun")
    oneliner_output: bool = Field(default=False, alias="onelinerOutput")
    remove_comments: bool = Field(default=False, alias="removeComments")
