"""Keyport - ZMK keymap transcoder."""

from importlib.metadata import PackageNotFoundError, version


try:
    __version__ = version(__package__ or "keyport")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = ["__version__"]
