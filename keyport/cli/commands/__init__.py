"""CLI command modules."""

import typer

from keyport.cli.commands.export import register_commands as register_export_commands
from keyport.cli.commands.inspect import (
    register_commands as register_inspect_commands,
)
from keyport.cli.commands.keymap_import import (
    register_commands as register_import_commands,
)


def register_all_commands(app: typer.Typer) -> None:
    """Register all CLI commands with the main app.

    Args:
        app: The main Typer app
    """
    register_export_commands(app)
    register_import_commands(app)
    register_inspect_commands(app)
