"""Configuration package for Keyport."""

from .models import ExportSettings, UserConfigData, ValidationSettings
from .user_config import UserConfig, create_user_config


__all__ = [
    "ExportSettings",
    "UserConfigData",
    "ValidationSettings",
    "UserConfig",
    "create_user_config",
]
