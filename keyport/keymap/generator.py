"""ZMK keymap source generation from keymap models."""

import logging
import re
from collections.abc import Callable
from datetime import date, datetime, timezone

from keyport.codec.behavior import format_binding_with_registry
from keyport.codec.usage import key_name_with_modifiers
from keyport.models.keymap import BehaviorRegistry, ExportMetadata, Keymap, Layer


logger = logging.getLogger(__name__)

DEFAULT_TOOL_NAME = "ZMK Studio"
DEFAULT_BINDINGS_PER_ROW = 6

INCLUDES = (
    "#include <behaviors.dtsi>",
    "#include <dt-bindings/zmk/keys.h>",
    "#include <dt-bindings/zmk/bt.h>",
)

FOOTER = """/*
 * NOTE: This export does not include:
 * - Combos (add them manually if needed)
 * - Macros (add them manually if needed)
 * - Custom behaviors
 *
 * To use this file:
 * 1. Copy to your ZMK config repository (config/your-keyboard.keymap)
 * 2. Commit and push to trigger firmware build
 * 3. Download and flash the compiled firmware
 */"""

_BINDING_INDENT = " " * 8


def _collapse(value: str, pattern: str, separator: str) -> str:
    value = re.sub(pattern, separator, value)
    value = re.sub(re.escape(separator) + "+", separator, value)
    return value.strip(separator)


def constant_name(label: str) -> str:
    """Layer label as a ``#define`` name: ``"Lower Layer"`` -> ``LOWER_LAYER``."""
    return _collapse(label.upper(), r"[^A-Z0-9]", "_")


def node_label(label: str) -> str:
    """Lowercase identifier form of a label, without the node suffix."""
    return _collapse(label.lower(), r"[^a-z0-9]", "_")


def layer_node_name(label: str) -> str:
    """DeviceTree node name: ``"Lower Layer"`` -> ``lower_layer_layer``."""
    return f"{node_label(label)}_layer"


def escape_string(value: str) -> str:
    """Escape backslashes and double quotes for a quoted property value."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def sanitize_filename(name: str) -> str:
    """Lowercase a device name and join alphanumeric runs with hyphens."""
    return _collapse(name.lower(), r"[^a-z0-9]", "-")


def export_filename(device_name: str, export_date: date | None = None) -> str:
    """Build ``<device>-<YYYY-MM-DD>.keymap`` for an export."""
    export_date = export_date or datetime.now(timezone.utc).date()
    stem = sanitize_filename(device_name) or "keymap"
    return f"{stem}-{export_date:%Y-%m-%d}.keymap"


def format_timestamp(value: datetime) -> str:
    """ISO-8601 with milliseconds; UTC is written with a ``Z`` suffix."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
        millis = value.microsecond // 1000
        return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{millis:03d}Z"
    return value.isoformat(timespec="milliseconds")


class KeymapGenerator:
    """Render a Keymap as a complete ZMK ``.keymap`` source file."""

    def __init__(
        self,
        tool_name: str = DEFAULT_TOOL_NAME,
        bindings_per_row: int = DEFAULT_BINDINGS_PER_ROW,
        include_footer: bool = True,
        key_name_fn: Callable[[int], str | None] = key_name_with_modifiers,
    ) -> None:
        """Initialize the generator.

        Args:
            tool_name: Name written into the header comment
            bindings_per_row: Bindings per line inside a ``bindings`` list
            include_footer: Whether to append the closing notes comment
            key_name_fn: Converts usage codes to key expressions
        """
        if bindings_per_row < 1:
            raise ValueError("bindings_per_row must be at least 1")
        self.tool_name = tool_name
        self.bindings_per_row = bindings_per_row
        self.include_footer = include_footer
        self.key_name_fn = key_name_fn

    def generate(
        self,
        keymap: Keymap,
        registry: BehaviorRegistry | None = None,
        warnings: list[str] | None = None,
    ) -> str:
        """Generate keymap source.

        Args:
            keymap: Layers plus device details
            registry: Optional device behavior registry
            warnings: Optional list collecting placeholder notes

        Returns:
            The full file content
        """
        metadata = ExportMetadata(
            timestamp=format_timestamp(keymap.timestamp),
            device_name=keymap.device_name,
            version=keymap.version,
            layer_count=len(keymap.layers),
        )
        logger.debug(
            "Generating keymap for %s with %d layers",
            keymap.device_name,
            len(keymap.layers),
        )

        parts = [
            self.generate_metadata(metadata),
            self.generate_includes(),
            self.generate_layer_constants(keymap.layers),
            self.generate_keymap_body(keymap.layers, registry, warnings),
        ]
        if self.include_footer:
            parts.append(self.generate_footer())
        return "\n\n".join(parts)

    def generate_metadata(self, metadata: ExportMetadata) -> str:
        return "\n".join(
            [
                "/*",
                f" * Exported from {self.tool_name}",
                f" * Date: {metadata.timestamp}",
                f" * Device: {metadata.device_name}",
                f" * Version: {metadata.version}",
                f" * Layers: {metadata.layer_count}",
                " */",
            ]
        )

    def generate_includes(self) -> str:
        return "\n".join(INCLUDES)

    def generate_layer_constants(self, layers: list[Layer]) -> str:
        """One ``#define`` per layer, valued by its index."""
        return "\n".join(
            f"#define {self._constant_for(layer.label, index)} {index}"
            for index, layer in enumerate(layers)
        )

    def generate_keymap_body(
        self,
        layers: list[Layer],
        registry: BehaviorRegistry | None = None,
        warnings: list[str] | None = None,
    ) -> str:
        layer_blocks = "\n\n".join(
            self.generate_layer(layer, registry, warnings, index)
            for index, layer in enumerate(layers)
        )
        return "\n".join(
            [
                "/ {",
                "  keymap {",
                '    compatible = "zmk,keymap";',
                "",
                layer_blocks,
                "  };",
                "};",
            ]
        )

    def generate_layer(
        self,
        layer: Layer,
        registry: BehaviorRegistry | None = None,
        warnings: list[str] | None = None,
        index: int | None = None,
    ) -> str:
        """Render one layer node with its bindings grouped into rows."""
        formatted = [
            format_binding_with_registry(binding, self.key_name_fn, registry, warnings)
            for binding in layer.bindings
        ]
        rows = [
            _BINDING_INDENT + " ".join(formatted[start : start + self.bindings_per_row])
            for start in range(0, len(formatted), self.bindings_per_row)
        ]

        node = node_label(layer.label)
        if not node:
            node = f"layer_{layer.id if index is None else index}"

        lines = [
            f"    {node}_layer {{",
            f'      label = "{escape_string(layer.label)}";',
            "      bindings = <",
            *rows,
            "      >;",
            "    };",
        ]
        return "\n".join(lines)

    def generate_footer(self) -> str:
        return FOOTER

    @staticmethod
    def _constant_for(label: str, index: int) -> str:
        return constant_name(label) or f"LAYER_{index}"


def create_keymap_generator(
    tool_name: str = DEFAULT_TOOL_NAME,
    bindings_per_row: int = DEFAULT_BINDINGS_PER_ROW,
    include_footer: bool = True,
) -> KeymapGenerator:
    """Create a KeymapGenerator instance."""
    return KeymapGenerator(
        tool_name=tool_name,
        bindings_per_row=bindings_per_row,
        include_footer=include_footer,
    )


__all__ = [
    "DEFAULT_TOOL_NAME",
    "DEFAULT_BINDINGS_PER_ROW",
    "INCLUDES",
    "FOOTER",
    "KeymapGenerator",
    "create_keymap_generator",
    "constant_name",
    "node_label",
    "layer_node_name",
    "escape_string",
    "sanitize_filename",
    "export_filename",
    "format_timestamp",
]
