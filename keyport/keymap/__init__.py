"""Keymap source generation and parsing."""

from keyport.keymap.generator import (
    KeymapGenerator,
    constant_name,
    create_keymap_generator,
    export_filename,
    layer_node_name,
    sanitize_filename,
)
from keyport.keymap.parser import (
    DeviceTreeParser,
    ParseErrorCode,
    ParseResult,
    create_keymap_parser,
    parse_binding,
    tokenize_bindings,
)


__all__ = [
    "KeymapGenerator",
    "create_keymap_generator",
    "constant_name",
    "layer_node_name",
    "sanitize_filename",
    "export_filename",
    "DeviceTreeParser",
    "ParseErrorCode",
    "ParseResult",
    "create_keymap_parser",
    "parse_binding",
    "tokenize_bindings",
]
