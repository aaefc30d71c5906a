"""Tests for usage code packing and key name resolution."""

import pytest

from keyport.codec.usage import (
    base_usage,
    has_modifiers,
    is_modifier,
    key_code,
    key_name_from_usage,
    key_name_with_modifiers,
    make_usage,
    modifier_flags,
    modifier_prefix,
    modifier_suffix,
    page_and_id,
)


class TestUsagePacking:
    def test_make_usage_layout(self):
        assert make_usage(0x07, 0x04) == 0x00070004
        assert make_usage(0x07, 0x1D, 0x08) == 0x0807001D
        assert make_usage(0x0C, 0xE9, 0x05) == 0x050C00E9

    def test_split_usage(self):
        usage = 0x0807001D
        assert page_and_id(usage) == (0x07, 0x1D)
        assert modifier_flags(usage) == 0x08
        assert base_usage(usage) == 0x0007001D
        assert has_modifiers(usage)
        assert not has_modifiers(base_usage(usage))

    def test_modifier_wrappers(self):
        assert modifier_prefix(0x05) == "LC(LA("
        assert modifier_suffix(0x05) == "))"
        assert modifier_prefix(0) == ""
        assert modifier_suffix(0xFF) == ")" * 8


class TestKeyNameFromUsage:
    @pytest.mark.parametrize(
        "usage_id, expected",
        [
            (0x04, "A"),
            (0x1D, "Z"),
            (0x1E, "N1"),
            (0x27, "N0"),
            (0x28, "ENTER"),
            (0x2A, "BSPC"),
            (0x2B, "TAB"),
            (0x2C, "SPACE"),
            (0x3A, "F1"),
            (0x68, "F13"),
            (0x4B, "PG_UP"),
            (0x4F, "RIGHT"),
            (0x59, "KP_N1"),
            (0x7A, "UNDO"),
            (0xE0, "LCTRL"),
            (0xE4, "RCTRL"),
            (0xE6, "RALT"),
            (0xE7, "RGUI"),
        ],
    )
    def test_keyboard_page(self, usage_id, expected):
        assert key_name_from_usage(make_usage(0x07, usage_id)) == expected

    def test_consumer_page(self):
        assert key_name_from_usage(make_usage(0x0C, 0xE9)) == "C_VOL_UP"
        assert key_name_from_usage(make_usage(0x0C, 0xCD)) == "C_PP"

    def test_unmapped_values(self):
        assert key_name_from_usage(make_usage(0x07, 0x03)) is None
        assert key_name_from_usage(make_usage(0x0C, 0x01)) is None
        assert key_name_from_usage(make_usage(0x01, 0x04)) is None

    def test_modifier_mask_is_ignored(self):
        assert key_name_from_usage(0x0807001D) == "Z"


class TestKeyNameWithModifiers:
    def test_plain_key(self):
        assert key_name_with_modifiers(0x00070004) == "A"

    def test_left_gui(self):
        assert key_name_with_modifiers(0x0807001D) == "LG(Z)"

    def test_nested_wrappers_outer_to_inner(self):
        assert key_name_with_modifiers(0x05070004) == "LC(LA(A))"
        assert key_name_with_modifiers(make_usage(0x07, 0x04, 0xFF)) == (
            "LC(LS(LA(LG(RC(RS(RA(RG(A))))))))"
        )

    def test_consumer_key_with_modifier(self):
        assert key_name_with_modifiers(make_usage(0x0C, 0xE9, 0x02)) == "LS(C_VOL_UP)"

    def test_unknown_base_key(self):
        assert key_name_with_modifiers(make_usage(0x07, 0x03, 0x01)) is None


class TestKeyCode:
    def test_categories(self):
        assert key_code(make_usage(0x07, 0x04)).category == "letter"
        assert key_code(make_usage(0x07, 0x1E)).category == "number"
        assert key_code(make_usage(0x07, 0x3A)).category == "function"
        assert key_code(make_usage(0x07, 0xE1)).category == "modifier"
        assert key_code(make_usage(0x0C, 0xE2)).category == "media"
        assert key_code(make_usage(0x07, 0x2B)).category == "special"

    def test_labels(self):
        code = key_code(make_usage(0x07, 0x28))
        assert code.name == "ENTER"
        assert code.label == "Ret"
        assert key_code(make_usage(0x0C, 0xE9)).label == "Volume Increment"

    def test_unknown(self):
        assert key_code(make_usage(0x07, 0x03)) is None

    def test_is_modifier(self):
        assert is_modifier(make_usage(0x07, 0xE5))
        assert not is_modifier(make_usage(0x07, 0x04))
