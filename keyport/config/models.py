"""User configuration models."""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ExportSettings(BaseModel):
    """Options applied to every keymap export."""

    tool_name: str = Field(
        default="ZMK Studio", description="Name written into the export header"
    )
    version: str = Field(default="1.0.0", description="Keymap format version")
    layout_name: str = "default"
    bindings_per_row: int = Field(
        default=6, ge=1, le=64, description="Bindings per line in a layer"
    )
    include_footer: bool = True
    output_dir: Path = Field(
        default=Path("."), description="Directory receiving exported files"
    )

    @field_validator("output_dir", mode="before")
    @classmethod
    def expand_output_dir(cls, v: Any) -> Path:
        return Path(v).expanduser()


class ValidationSettings(BaseModel):
    """Thresholds used when validating imported keymaps."""

    max_bindings_per_layer: int = Field(
        default=50, ge=1, description="Layers above this size produce a warning"
    )


class UserConfigData(BaseSettings):
    """User configuration data model with automatic environment variable support.

    Precedence order (highest to lowest):
    1. Environment variables (``KEYPORT_`` prefix, ``__`` for nesting)
    2. Constructor arguments (file data)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="KEYPORT_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: Any,
        env_settings: Any,
        dotenv_settings: Any,
        file_secret_settings: Any,
    ) -> tuple[Any, ...]:
        """Environment variables override values read from config files."""
        return (
            env_settings,
            init_settings,
            dotenv_settings,
            file_secret_settings,
        )

    log_level: str = "WARNING"
    export: ExportSettings = Field(default_factory=ExportSettings)
    validation: ValidationSettings = Field(default_factory=ValidationSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a recognized value."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        upper_v = v.strip().upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return upper_v
