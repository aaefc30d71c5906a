"""Core data models for Keyport."""

from .base import KeyportBaseModel
from .keymap import (
    BehaviorRegistry,
    BehaviorRegistryEntry,
    Binding,
    ConvertedBinding,
    ConvertedLayer,
    ExportMetadata,
    KeyCategory,
    KeyCode,
    Keymap,
    KeymapMetadata,
    Layer,
    ParsedBinding,
    ParsedLayer,
    PartialConvertedBinding,
)
from .results import BaseResult, ResultError


__all__ = [
    "KeyportBaseModel",
    "BaseResult",
    "ResultError",
    "Binding",
    "Layer",
    "BehaviorRegistryEntry",
    "BehaviorRegistry",
    "Keymap",
    "ExportMetadata",
    "KeymapMetadata",
    "KeyCode",
    "KeyCategory",
    "ParsedLayer",
    "ParsedBinding",
    "PartialConvertedBinding",
    "ConvertedBinding",
    "ConvertedLayer",
]
