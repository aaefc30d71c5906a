"""Conversion between HID usage codes and ZMK key names.

A usage code packs an optional modifier mask above the page and id::

    (modifiers:8 << 24) | (page:8 << 16) | id:16

Modifier bits, low to high: LeftCtrl, LeftShift, LeftAlt, LeftGui,
RightCtrl, RightShift, RightAlt, RightGui. A usage with a zero mask is a
"base usage". Only the keyboard (0x07) and consumer (0x0C) pages resolve.
"""

import logging
import re

from keyport.models.keymap import KeyCategory, KeyCode

from .hid_tables import (
    CONSUMER_KEYS,
    HID_PAGE_CONSUMER,
    HID_PAGE_KEYBOARD,
    KEY_NAME_OVERRIDES,
    KEYBOARD_USAGE_LABELS,
    MODIFIER_FUNCTIONS,
    MODIFIER_KEY_NAMES,
    MODIFIER_USAGE_MAX,
    MODIFIER_USAGE_MIN,
)


logger = logging.getLogger(__name__)

_SINGLE_LETTER = re.compile(r"^[A-Z]$")
_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")
_UNDERSCORE_RUN = re.compile(r"_+")


def make_usage(page: int, usage_id: int, modifiers: int = 0) -> int:
    """Pack a modifier mask, page and id into one usage code."""
    return ((modifiers & 0xFF) << 24) | ((page & 0xFF) << 16) | (usage_id & 0xFFFF)


def page_and_id(usage: int) -> tuple[int, int]:
    """Split a usage code into its 8-bit page and 16-bit id."""
    return (usage >> 16) & 0xFF, usage & 0xFFFF


def modifier_flags(usage: int) -> int:
    """Return the modifier mask stored in bits 24-31."""
    return (usage >> 24) & 0xFF


def base_usage(usage: int) -> int:
    """Strip the modifier mask, keeping page and id."""
    page, usage_id = page_and_id(usage)
    return (page << 16) | usage_id


def has_modifiers(usage: int) -> bool:
    return modifier_flags(usage) != 0


def modifier_prefix(modifiers: int) -> str:
    """Opening wrappers for a modifier mask, e.g. ``LC(LA(`` for 0x05."""
    return "".join(f"{func}(" for bit, func in MODIFIER_FUNCTIONS if modifiers & bit)


def modifier_suffix(modifiers: int) -> str:
    """One closing parenthesis per set modifier bit."""
    return ")" * bin(modifiers & 0xFF).count("1")


def _generic_key_name(label: str) -> str:
    clean = label.removeprefix("Keyboard ")
    clean = _NON_ALNUM.sub("_", clean)
    clean = _UNDERSCORE_RUN.sub("_", clean)
    return clean.strip("_").upper()


def key_name_from_usage(usage: int) -> str | None:
    """Resolve a base usage (page + id) to a ZMK key name.

    Args:
        usage: Usage code; any modifier mask is ignored

    Returns:
        ZMK key name, or None when the page or id is not mapped
    """
    page, usage_id = page_and_id(usage)

    if page == HID_PAGE_CONSUMER:
        entry = CONSUMER_KEYS.get(usage_id)
        return entry[0] if entry else None

    if page != HID_PAGE_KEYBOARD:
        return None

    # Left and right modifiers share a label, so resolve them by id
    if MODIFIER_USAGE_MIN <= usage_id <= MODIFIER_USAGE_MAX:
        return MODIFIER_KEY_NAMES[usage_id]

    label = KEYBOARD_USAGE_LABELS.get(usage_id)
    if not label:
        return None

    override = KEY_NAME_OVERRIDES.get(label)
    if override:
        return override

    if _SINGLE_LETTER.match(label):
        return label

    return _generic_key_name(label)


def key_name_with_modifiers(usage: int) -> str | None:
    """Resolve a usage code, wrapping the key name in modifier functions.

    Examples:
        ``0x00070004`` -> ``A``
        ``0x0807001D`` -> ``LG(Z)``
        ``0x05070004`` -> ``LC(LA(A))``

    Returns:
        Key expression, or None when the base key is unknown
    """
    modifiers = modifier_flags(usage)
    key_name = key_name_from_usage(base_usage(usage))
    if key_name is None:
        logger.debug("Unresolved usage 0x%x", usage)
        return None

    if modifiers == 0:
        return key_name

    return f"{modifier_prefix(modifiers)}{key_name}{modifier_suffix(modifiers)}"


def is_modifier(usage: int) -> bool:
    """Check whether a usage is one of the eight modifier keys."""
    return key_name_from_usage(usage) in MODIFIER_KEY_NAMES.values()


def _categorize(name: str) -> KeyCategory:
    if _SINGLE_LETTER.match(name):
        return "letter"
    if re.match(r"^F[0-9]+$", name):
        return "function"
    if re.match(r"^N[0-9]$", name):
        return "number"
    if name in MODIFIER_KEY_NAMES.values():
        return "modifier"
    if name.startswith("C_"):
        return "media"
    return "special"


def key_code(usage: int) -> KeyCode | None:
    """Describe a usage code with its name, label and category."""
    name = key_name_from_usage(usage)
    if name is None:
        return None

    page, usage_id = page_and_id(usage)
    if page == HID_PAGE_CONSUMER:
        label = CONSUMER_KEYS[usage_id][1]
    else:
        label = KEYBOARD_USAGE_LABELS.get(usage_id, "")

    return KeyCode(usage=usage, name=name, label=label, category=_categorize(name))


__all__ = [
    "make_usage",
    "page_and_id",
    "modifier_flags",
    "base_usage",
    "has_modifiers",
    "modifier_prefix",
    "modifier_suffix",
    "key_name_from_usage",
    "key_name_with_modifiers",
    "is_modifier",
    "key_code",
]
