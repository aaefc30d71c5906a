"""Keymap data models shared by the export and import pipelines.

These are immutable value objects created fresh for every transcode call.
Field aliases follow the camelCase names used by the editor and device RPC
payloads, so JSON produced by those collaborators validates directly.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Literal, TypeAlias

from pydantic import ConfigDict, Field, computed_field

from keyport.models.base import KeyportBaseModel


KeyCategory: TypeAlias = Literal[
    "letter", "number", "modifier", "function", "special", "media"
]


class Binding(KeyportBaseModel):
    """A behavior plus up to two parameters assigned to one key position."""

    model_config = ConfigDict(frozen=True)

    behavior_id: int = Field(alias="behaviorId")
    param1: int | None = None
    param2: int | None = None
    position: int = 0


class Layer(KeyportBaseModel):
    """An ordered set of bindings addressable by position."""

    model_config = ConfigDict(frozen=True)

    id: int
    label: str
    bindings: list[Binding] = Field(default_factory=list)


class BehaviorRegistryEntry(KeyportBaseModel):
    """A device-supplied behavior id and its display name."""

    model_config = ConfigDict(frozen=True)

    id: int
    display_name: str = Field(alias="displayName")


BehaviorRegistry: TypeAlias = Mapping[int, BehaviorRegistryEntry]


class Keymap(KeyportBaseModel):
    """Complete keyboard configuration handed to the generator."""

    model_config = ConfigDict(frozen=True)

    layers: list[Layer]
    device_name: str = Field(alias="deviceName")
    layout_name: str = Field(default="default", alias="layoutName")
    timestamp: datetime = Field(default_factory=datetime.now)
    version: str = "1.0.0"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_bindings(self) -> int:
        return sum(len(layer.bindings) for layer in self.layers)


class ExportMetadata(KeyportBaseModel):
    """Values rendered into the metadata comment block."""

    model_config = ConfigDict(frozen=True)

    timestamp: str
    device_name: str
    version: str
    layer_count: int


class KeymapMetadata(KeyportBaseModel):
    """Metadata recovered from the header comment of a keymap file."""

    device: str | None = None
    date: str | None = None
    version: str | None = None
    layer_count: int | None = None


class KeyCode(KeyportBaseModel):
    """A usage code together with its symbolic name and category."""

    model_config = ConfigDict(frozen=True)

    usage: int
    name: str
    label: str
    category: KeyCategory


class ParsedLayer(KeyportBaseModel):
    """A layer recovered from source text; bindings are still raw text."""

    label: str
    bindings: list[str] = Field(default_factory=list)


class ParsedBinding(KeyportBaseModel):
    """A single binding split into behavior tag and parameter tokens."""

    model_config = ConfigDict(frozen=True)

    behavior_tag: str
    params: list[str] = Field(default_factory=list)


class PartialConvertedBinding(KeyportBaseModel):
    """A decoded binding that does not yet know its position."""

    model_config = ConfigDict(frozen=True)

    behavior_id: int = Field(alias="behaviorId")
    param1: int | None = None
    param2: int | None = None

    def at(self, position: int) -> "ConvertedBinding":
        return ConvertedBinding(
            behavior_id=self.behavior_id,
            param1=self.param1,
            param2=self.param2,
            position=position,
        )


class ConvertedBinding(PartialConvertedBinding):
    """A decoded binding placed at a key position."""

    position: int


class ConvertedLayer(KeyportBaseModel):
    """A decoded layer ready to be written back to a device."""

    model_config = ConfigDict(frozen=True)

    id: int
    label: str
    bindings: list[ConvertedBinding] = Field(default_factory=list)


__all__ = [
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
