"""Core test fixtures for the keyport project."""

import os
from collections.abc import Generator
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from keyport.codec.usage import make_usage
from keyport.models.keymap import BehaviorRegistryEntry, Binding, Layer


KEYBOARD = 0x07
CONSUMER = 0x0C

FIXED_TIMESTAMP = datetime(2024, 3, 9, 14, 5, 7, 123000, tzinfo=timezone.utc)


def key(usage_id: int, modifiers: int = 0) -> int:
    """Keyboard page usage code."""
    return make_usage(KEYBOARD, usage_id, modifiers)


class RecordingSink:
    """Artifact sink that keeps written files in memory."""

    def __init__(self, error: Exception | None = None) -> None:
        self.files: dict[str, str] = {}
        self.error = error

    async def write(self, filename: str, content: str) -> None:
        if self.error is not None:
            raise self.error
        self.files[filename] = content


class MemoryTextSource:
    """Text source serving fixed content, or raising for unknown sources."""

    def __init__(self, files: dict[str, str]) -> None:
        self.files = files

    async def read_text(self, source: str) -> str:
        if source not in self.files:
            raise FileNotFoundError(f"No such file: {source}")
        return self.files[source]


class RecordingWriter:
    """Binding writer that records calls and can reject one position."""

    def __init__(self, fail_at: tuple[int, int] | None = None) -> None:
        self.calls: list[tuple[int, int, Any]] = []
        self.fail_at = fail_at

    async def set_binding(self, layer_id: int, position: int, binding: Any) -> None:
        if self.fail_at == (layer_id, position):
            raise ConnectionError("Device rejected the write")
        self.calls.append((layer_id, position, binding))


# ---- Base Fixtures ----


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def fixed_clock() -> Any:
    return lambda: FIXED_TIMESTAMP


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def recording_writer() -> RecordingWriter:
    return RecordingWriter()


# ---- Test Isolation Fixtures ----


@pytest.fixture
def clean_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[Path, None, None]:
    """Run in an empty directory with no KEYPORT_ variables or user config."""
    for name in list(os.environ):
        if name.upper().startswith("KEYPORT_"):
            monkeypatch.delenv(name)

    xdg_home = tmp_path / "xdg"
    xdg_home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg_home))

    work_dir = tmp_path / "work"
    work_dir.mkdir()
    monkeypatch.chdir(work_dir)
    yield work_dir


# ---- Keymap Fixtures ----


@pytest.fixture
def sample_layers() -> list[Layer]:
    """Two small layers covering each static behavior."""
    base = Layer(
        id=0,
        label="Base",
        bindings=[
            Binding(behavior_id=1, param1=key(0x04), position=0),
            Binding(behavior_id=2, param1=key(0xE0), param2=key(0x05), position=1),
            Binding(behavior_id=3, param1=1, param2=key(0x2B), position=2),
            Binding(behavior_id=4, param1=1, position=3),
            Binding(behavior_id=0, position=4),
        ],
    )
    lower = Layer(
        id=1,
        label="Lower Layer",
        bindings=[
            Binding(behavior_id=5, param1=0, position=0),
            Binding(behavior_id=6, param1=2, position=1),
            Binding(behavior_id=1, param1=make_usage(CONSUMER, 0xE9), position=2),
        ],
    )
    return [base, lower]


@pytest.fixture
def sample_registry() -> dict[int, BehaviorRegistryEntry]:
    """Device registry with shuffled ids and one unsupported behavior."""
    return {
        10: BehaviorRegistryEntry(id=10, display_name="Key Press"),
        11: BehaviorRegistryEntry(id=11, display_name="Layer-Tap"),
        12: BehaviorRegistryEntry(id=12, display_name="Caps Word"),
    }


@pytest.fixture
def sample_keymap_source() -> str:
    """Hand-written keymap with defines, comments and a named layer reference."""
    return """/*
 * Exported from ZMK Studio
 * Date: 2024-03-09T14:05:07.123Z
 * Device: Corne
 * Version: 1.0.0
 * Layers: 2
 */

#include <behaviors.dtsi>
#include <dt-bindings/zmk/keys.h>

#define BASE 0
#define LOWER 1

/ {
  keymap {
    compatible = "zmk,keymap";

    default_layer {
      label = "Base";
      // home row
      bindings = <
        &kp Q &mt LCTRL A &lt LOWER TAB
        &mo LOWER &trans &kp LG(Z)
      >;
    };

    lower_layer {
      display-name = "Lower";
      bindings = <
        &bt BT_SEL 1 &bt BT_CLR &tog BASE
        &kp C_VOL_UP &none &studio_unlock
      >;
    };
  };
};
"""
