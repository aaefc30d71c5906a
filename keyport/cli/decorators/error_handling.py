"""Error handling decorators for CLI commands."""

import json
import logging
import sys
import traceback
from collections.abc import Callable
from functools import wraps
from typing import Any

import click
import typer

from keyport.cli.helpers.output import print_error_message
from keyport.core.errors import (
    ConfigError,
    DeviceError,
    FileSystemError,
    GenerationError,
    KeymapError,
    KeyportError,
    ParseError,
)
from keyport.core.structlog_logger import get_struct_logger


__all__ = ["handle_errors", "error_event", "print_stack_trace_if_verbose"]

logger = get_struct_logger(__name__)

# Most specific first: ParseError and GenerationError are KeymapErrors
ERROR_EVENTS: tuple[tuple[type[KeyportError], str], ...] = (
    (ParseError, "parse_error"),
    (GenerationError, "generation_error"),
    (KeymapError, "keymap_error"),
    (ConfigError, "configuration_error"),
    (FileSystemError, "file_error"),
    (DeviceError, "device_error"),
)


def error_event(error: KeyportError) -> str:
    """Log event name for a Keyport error."""
    for error_type, event in ERROR_EVENTS:
        if isinstance(error, error_type):
            return event
    return "keyport_error"


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator to handle common exceptions in CLI commands.

    Keyport errors are logged under an event named after their type, with
    their context as structured fields, and shown to the user on stderr.
    Every handled error exits with code 1.

    Args:
        func: The function to decorate

    Returns:
        Decorated function with error handling
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except KeyportError as e:
            fields = {"error_class": type(e).__name__, **e.context, "error": e.message}
            logger.error(error_event(e), **fields)
            print_error_message(e.message, stderr=True)
            print_stack_trace_if_verbose()
            raise typer.Exit(1) from e
        except json.JSONDecodeError as e:
            logger.error("invalid_json", error=str(e), line=e.lineno, column=e.colno)
            print_error_message(f"Invalid JSON: {e}", stderr=True)
            print_stack_trace_if_verbose()
            raise typer.Exit(1) from e
        except Exception as e:
            exc_info = logging.getLogger().isEnabledFor(logging.DEBUG)
            logger.error("unexpected_error", error=str(e), exc_info=exc_info)
            print_error_message(f"Unexpected error: {e}", stderr=True)
            print_stack_trace_if_verbose()
            raise typer.Exit(1) from e

    return wrapper


def _is_verbose() -> bool:
    ctx = click.get_current_context(silent=True)
    app_context = ctx.find_root().obj if ctx is not None else None
    if app_context is not None:
        return bool(app_context.verbose or app_context.debug)
    return any(arg in sys.argv for arg in ["-v", "-vv", "--verbose", "--debug"])


def print_stack_trace_if_verbose() -> None:
    """Print stack trace if verbose/debug mode is enabled."""
    if _is_verbose():
        print("\nStack trace:", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)
