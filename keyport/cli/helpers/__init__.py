"""Helpers for CLI commands."""

from keyport.cli.helpers.output import (
    get_console,
    print_error_message,
    print_list_item,
    print_result,
    print_success_message,
    print_table,
    print_warning_message,
)


__all__ = [
    "get_console",
    "print_success_message",
    "print_error_message",
    "print_warning_message",
    "print_list_item",
    "print_result",
    "print_table",
]
