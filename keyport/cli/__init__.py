"""Command-line interface for Keyport."""

from keyport.cli.app import app, main
from keyport.cli.commands import register_all_commands


register_all_commands(app)

__all__ = ["app", "main"]
