"""Helper functions for CLI output formatting with Rich integration."""

from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from keyport.models.results import BaseResult


class Colors:
    """Standardized color palette for CLI output."""

    SUCCESS = "bold green"
    ERROR = "bold red"
    WARNING = "bold yellow"
    INFO = "bold blue"
    HEADER = "bold cyan"
    MUTED = "dim"


class Icons:
    CHECKMARK = "✓"
    CROSS = "✗"
    WARNING = "!"
    BULLET = "•"


def get_console(stderr: bool = False) -> Console:
    """Console bound to the current stdout, or stderr."""
    return Console(highlight=False, soft_wrap=True, stderr=stderr)


def print_success_message(message: str, stderr: bool = False) -> None:
    get_console(stderr).print(
        f"[{Colors.SUCCESS}]{Icons.CHECKMARK}[/] {escape(message)}"
    )


def print_error_message(message: str, stderr: bool = False) -> None:
    get_console(stderr).print(f"[{Colors.ERROR}]{Icons.CROSS}[/] {escape(message)}")


def print_warning_message(message: str, stderr: bool = False) -> None:
    get_console(stderr).print(
        f"[{Colors.WARNING}]{Icons.WARNING}[/] {escape(message)}"
    )


def print_list_item(item: str, indent: int = 1, stderr: bool = False) -> None:
    """Print a list item with bullet and indentation."""
    get_console(stderr).print(f"{' ' * (indent * 2)}{Icons.BULLET} {escape(item)}")


def print_result(result: BaseResult, stderr: bool = False) -> None:
    """Print a result's error and warnings."""
    if not result.success and result.error is not None:
        print_error_message(f"{result.error.code}: {result.error.message}", stderr)
    for warning in result.warnings:
        print_list_item(warning, stderr=stderr)


def print_table(title: str, columns: list[str], rows: list[list[Any]]) -> None:
    """Print a Rich table."""
    table = Table(title=title, header_style=Colors.HEADER, show_lines=False)
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*(escape(str(value)) for value in row))
    get_console().print(table)
