"""Exception hierarchy for Keyport.

Every error raised by Keyport code derives from ``KeyportError`` and carries an
optional ``context`` dictionary with structured details for logging.
"""

from pathlib import Path
from typing import Any


class KeyportError(Exception):
    """Base class for all Keyport errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = context or {}

    def __str__(self) -> str:
        return self.message


class KeymapError(KeyportError):
    """Raised for problems with keymap content."""


class ParseError(KeymapError):
    """Raised when keymap source text cannot be parsed structurally."""


class GenerationError(KeymapError):
    """Raised when keymap source text cannot be rendered."""


class ConfigError(KeyportError):
    """Raised for invalid or unreadable configuration."""


class FileSystemError(KeyportError):
    """Raised when a file operation fails."""


class DeviceError(KeyportError):
    """Raised when the device collaborator rejects a binding write."""


def create_file_error(
    path: Path | str,
    operation: str,
    error: Exception,
    context: dict[str, Any] | None = None,
) -> FileSystemError:
    """Wrap a low-level I/O exception into a ``FileSystemError``.

    Args:
        path: Path that was being accessed
        operation: Name of the failed operation (e.g. ``read_text``)
        error: The original exception
        context: Additional context to attach

    Returns:
        FileSystemError with path, operation and error type in its context
    """
    details = {
        "path": str(path),
        "operation": operation,
        "error_type": error.__class__.__name__,
    }
    if context:
        details.update(context)
    return FileSystemError(f"{operation} failed for {path}: {error}", details)


__all__ = [
    "KeyportError",
    "KeymapError",
    "ParseError",
    "GenerationError",
    "ConfigError",
    "FileSystemError",
    "DeviceError",
    "create_file_error",
]
