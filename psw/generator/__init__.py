"""PSW script generator -- renders a project configuration into dotnet commands.

Quick usage::

    from psw.generator import Configuration, generate_script

    config = Configuration(
        template_version="14.3.0",
        project_name="MyProject",
        packages="uSync|13.2.1,Umbraco.Forms",
    )
    print(generate_script(config))
"""

from psw.generator.database import DatabaseFragment, database_fragment
from psw.generator.models import Command, CommandKind, Configuration, DatabaseType
from psw.generator.script import ScriptGenerator, generate_script

__all__ = [
    "Command",
    "CommandKind",
    "Configuration",
    "DatabaseFragment",
    "DatabaseType",
    "ScriptGenerator",
    "database_fragment",
    "generate_script",
]
