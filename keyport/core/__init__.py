from .errors import (
    ConfigError,
    DeviceError,
    FileSystemError,
    GenerationError,
    KeymapError,
    KeyportError,
    ParseError,
)
from .logging import get_logger, setup_logging


__all__ = [
    "setup_logging",
    "get_logger",
    "KeyportError",
    "KeymapError",
    "ParseError",
    "GenerationError",
    "ConfigError",
    "FileSystemError",
    "DeviceError",
]
