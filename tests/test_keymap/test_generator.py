"""Tests for keymap source generation."""

import re
from datetime import date, datetime

import pytest

from keyport.keymap.generator import (
    FOOTER,
    KeymapGenerator,
    constant_name,
    create_keymap_generator,
    escape_string,
    export_filename,
    format_timestamp,
    layer_node_name,
    node_label,
    sanitize_filename,
)
from keyport.models.keymap import BehaviorRegistryEntry, Binding, Keymap, Layer
from tests.conftest import FIXED_TIMESTAMP, key


def make_keymap(layers, device_name="Corne") -> Keymap:
    return Keymap(layers=layers, device_name=device_name, timestamp=FIXED_TIMESTAMP)


EXPECTED_SINGLE_LAYER = """/*
 * Exported from ZMK Studio
 * Date: 2024-03-09T14:05:07.123Z
 * Device: Corne
 * Version: 1.0.0
 * Layers: 1
 */

#include <behaviors.dtsi>
#include <dt-bindings/zmk/keys.h>
#include <dt-bindings/zmk/bt.h>

#define BASE 0

/ {
  keymap {
    compatible = "zmk,keymap";

    base_layer {
      label = "Base";
      bindings = <
        &kp A &trans
      >;
    };
  };
};

"""


class TestNaming:
    @pytest.mark.parametrize(
        "label, constant, node",
        [
            ("Lower Layer", "LOWER_LAYER", "lower_layer_layer"),
            ("Base", "BASE", "base_layer"),
            ("  nav--keys!! ", "NAV_KEYS", "nav_keys_layer"),
            ("Fn 2", "FN_2", "fn_2_layer"),
        ],
    )
    def test_layer_names(self, label, constant, node):
        assert constant_name(label) == constant
        assert layer_node_name(label) == node

    @pytest.mark.parametrize("value", ["Lower Layer", "__a__b__", "ÄÖ x", "", "!!"])
    def test_sanitizers_are_idempotent(self, value):
        assert constant_name(constant_name(value)) == constant_name(value)
        assert node_label(node_label(value)) == node_label(value)
        assert sanitize_filename(sanitize_filename(value)) == sanitize_filename(value)

    def test_filename(self):
        assert export_filename("Test@#$%Keyboard!!!", date(2024, 3, 9)) == (
            "test-keyboard-2024-03-09.keymap"
        )

    def test_filename_defaults_to_today(self):
        assert re.fullmatch(
            r"test-keyboard-\d{4}-\d{2}-\d{2}\.keymap",
            export_filename("Test@#$%Keyboard!!!"),
        )

    def test_filename_without_usable_characters(self):
        assert export_filename("!!!", date(2024, 1, 2)) == "keymap-2024-01-02.keymap"

    def test_timestamps(self):
        assert format_timestamp(FIXED_TIMESTAMP) == "2024-03-09T14:05:07.123Z"
        assert format_timestamp(datetime(2024, 3, 9, 1, 2, 3)) == "2024-03-09T01:02:03.000"


class TestKeymapGenerator:
    def test_exact_output(self):
        layer = Layer(
            id=0,
            label="Base",
            bindings=[
                Binding(behavior_id=1, param1=key(0x04), position=0),
                Binding(behavior_id=0, position=1),
            ],
        )
        content = KeymapGenerator().generate(make_keymap([layer]))
        assert content == EXPECTED_SINGLE_LAYER + FOOTER

    def test_without_footer(self, sample_layers):
        content = create_keymap_generator(include_footer=False).generate(
            make_keymap(sample_layers)
        )
        assert content.endswith("  };\n};")
        assert "NOTE: This export" not in content

    def test_deterministic(self, sample_layers):
        generator = KeymapGenerator()
        keymap = make_keymap(sample_layers)
        assert generator.generate(keymap) == generator.generate(keymap)

    def test_layer_constants_and_nodes(self, sample_layers):
        content = KeymapGenerator().generate(make_keymap(sample_layers))
        assert "#define BASE 0\n#define LOWER_LAYER 1" in content
        assert "    lower_layer_layer {" in content
        assert '      label = "Lower Layer";' in content
        assert " * Layers: 2" in content

    def test_bindings_per_row(self):
        bindings = [
            Binding(behavior_id=1, param1=key(0x04 + i), position=i) for i in range(5)
        ]
        layer = Layer(id=0, label="Base", bindings=bindings)
        content = KeymapGenerator(bindings_per_row=2).generate(make_keymap([layer]))
        assert "        &kp A &kp B\n        &kp C &kp D\n        &kp E\n      >;" in content

    def test_rejects_zero_bindings_per_row(self):
        with pytest.raises(ValueError):
            KeymapGenerator(bindings_per_row=0)

    def test_empty_label_fallbacks(self):
        layers = [
            Layer(id=0, label="Base", bindings=[]),
            Layer(id=1, label="!!", bindings=[]),
        ]
        content = KeymapGenerator().generate(make_keymap(layers))
        assert "#define LAYER_1 1" in content
        assert "    layer_1_layer {" in content

    def test_label_is_escaped(self):
        layers = [Layer(id=0, label='Say "hi" \\ bye', bindings=[])]
        content = KeymapGenerator().generate(make_keymap(layers))
        assert '      label = "Say \\"hi\\" \\\\ bye";' in content
        assert escape_string("plain") == "plain"

    def test_registry_and_warnings(self, sample_registry):
        layer = Layer(
            id=0,
            label="Base",
            bindings=[
                Binding(behavior_id=10, param1=key(0x05), position=0),
                Binding(behavior_id=12, position=1),
                Binding(behavior_id=99, position=2),
                Binding(behavior_id=1, param1=key(0x03), position=3),
            ],
        )
        warnings: list[str] = []
        content = KeymapGenerator().generate(
            make_keymap([layer]), sample_registry, warnings
        )
        assert (
            "&kp B /* Unknown behavior: Caps Word (id=12) */ "
            "/* Unknown behavior 99 */ &kp /* HID 0x70003 */"
        ) in content
        assert len(warnings) == 3

    def test_custom_tool_name(self):
        generator = KeymapGenerator(tool_name="Keyport")
        content = generator.generate(make_keymap([Layer(id=0, label="Base")]))
        assert content.startswith("/*\n * Exported from Keyport\n")

    def test_registry_entry_alias(self):
        entry = BehaviorRegistryEntry.model_validate({"id": 3, "displayName": "Bluetooth"})
        layer = Layer(id=0, label="Base", bindings=[Binding(behavior_id=3, param1=1)])
        content = KeymapGenerator().generate(make_keymap([layer]), {3: entry})
        assert "&bt 1" in content
