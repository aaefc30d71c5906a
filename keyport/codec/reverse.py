"""Inverse mappings used when importing keymap source.

Key names are mapped back to usage codes from the same tables the export
side reads, so every name the generator can emit re-imports to the usage it
came from. A handful of common ZMK aliases are accepted in addition.
"""

import logging
import re
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Final

from keyport.models.keymap import ParsedBinding, PartialConvertedBinding

from .behavior import STATIC_BEHAVIORS, BehaviorKind
from .hid_tables import (
    CONSUMER_KEYS,
    HID_PAGE_CONSUMER,
    HID_PAGE_KEYBOARD,
    KEYBOARD_USAGE_LABELS,
    MODIFIER_FUNCTIONS,
    MODIFIER_KEY_NAMES,
)
from .usage import key_name_from_usage, make_usage


logger = logging.getLogger(__name__)

UsageFn = Callable[[str], int | None]

_WRAPPER = re.compile(r"^(LC|LS|LA|LG|RC|RS|RA|RG)\((.*)\)$")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _build_keyboard_names() -> dict[str, int]:
    names: dict[str, int] = {}
    for usage_id in KEYBOARD_USAGE_LABELS:
        name = key_name_from_usage(make_usage(HID_PAGE_KEYBOARD, usage_id))
        if name is not None:
            names[name] = usage_id
    return names


# ZMK key name -> keyboard page usage id
KEYBOARD_KEY_IDS: Final[Mapping[str, int]] = MappingProxyType(_build_keyboard_names())

# ZMK consumer key name -> consumer page usage id
CONSUMER_KEY_IDS: Final[Mapping[str, int]] = MappingProxyType(
    {name: usage_id for usage_id, (name, _label) in CONSUMER_KEYS.items()}
)

# Alternative spellings from ZMK's keys.h -> canonical name
KEY_ALIASES: Final[Mapping[str, str]] = MappingProxyType(
    {
        "RET": "ENTER",
        "RETURN": "ENTER",
        "ESCAPE": "ESC",
        "BACKSPACE": "BSPC",
        "SPC": "SPACE",
        "CAPSLOCK": "CAPS",
        "DELETE": "DEL",
        "INSERT": "INS",
        "PAGE_UP": "PG_UP",
        "PAGE_DOWN": "PG_DN",
        "RIGHT_ARROW": "RIGHT",
        "LEFT_ARROW": "LEFT",
        "DOWN_ARROW": "DOWN",
        "UP_ARROW": "UP",
        "PRINTSCREEN": "PSCRN",
        "SCROLLLOCK": "SLCK",
        "SLASH": "FSLH",
        "BACKSLASH": "BSLH",
        "SEMICOLON": "SEMI",
        "APOSTROPHE": "SQT",
        "APOS": "SQT",
        "SINGLE_QUOTE": "SQT",
        "PERIOD": "DOT",
        "LEFT_BRACKET": "LBKT",
        "RIGHT_BRACKET": "RBKT",
        "LSHIFT": "LSHFT",
        "RSHIFT": "RSHFT",
        "LEFT_SHIFT": "LSHFT",
        "RIGHT_SHIFT": "RSHFT",
        "LCTL": "LCTRL",
        "RCTL": "RCTRL",
        "LEFT_CONTROL": "LCTRL",
        "RIGHT_CONTROL": "RCTRL",
        "LEFT_ALT": "LALT",
        "RIGHT_ALT": "RALT",
        "LEFT_GUI": "LGUI",
        "RIGHT_GUI": "RGUI",
        "LCMD": "LGUI",
        "RCMD": "RGUI",
        "LWIN": "LGUI",
        "RWIN": "RGUI",
        "C_PLAY_PAUSE": "C_PP",
        "C_VOLUME_UP": "C_VOL_UP",
        "C_VOLUME_DOWN": "C_VOL_DN",
        "C_PREVIOUS": "C_PREV",
        "C_FAST_FORWARD": "C_FF",
        "C_REWIND": "C_RW",
        "C_BRIGHTNESS_INC": "C_BRI_UP",
        "C_BRIGHTNESS_DEC": "C_BRI_DN",
        **{f"NUMBER_{digit}": f"N{digit}" for digit in range(10)},
    }
)

_MODIFIER_BITS: Final[Mapping[str, int]] = MappingProxyType(
    {func: bit for bit, func in MODIFIER_FUNCTIONS}
)


def _canonical(name: str) -> str:
    name = name.strip()
    return KEY_ALIASES.get(name, name)


def usage_from_key_name(key_name: str) -> int | None:
    """Map a keyboard page key name to its usage code.

    Args:
        key_name: ZMK key name such as ``A``, ``N1``, ``PG_UP`` or ``LSHFT``

    Returns:
        Usage code (page 0x07), or None for unknown names
    """
    usage_id = KEYBOARD_KEY_IDS.get(_canonical(key_name))
    if usage_id is None:
        return None
    return make_usage(HID_PAGE_KEYBOARD, usage_id)


def usage_from_consumer_name(key_name: str) -> int | None:
    usage_id = CONSUMER_KEY_IDS.get(_canonical(key_name))
    if usage_id is None:
        return None
    return make_usage(HID_PAGE_CONSUMER, usage_id)


def usage_from_key_expression(expression: str) -> int | None:
    """Parse a possibly modifier-wrapped key expression into a usage code.

    Examples:
        ``A`` -> ``0x00070004``
        ``LG(Z)`` -> ``0x0807001D``
        ``LC(LA(C_VOL_UP))`` -> ``0x050C00E9``

    Returns:
        Usage code with the modifier mask in the top byte, or None when the
        innermost key name is unknown
    """
    modifiers = 0
    inner = expression.strip()
    while match := _WRAPPER.match(inner):
        modifiers |= _MODIFIER_BITS[match.group(1)]
        inner = match.group(2).strip()

    base = usage_from_key_name(inner)
    if base is None:
        base = usage_from_consumer_name(inner)
    if base is None:
        return None

    return (modifiers << 24) | base


def is_modifier_name(key_name: str) -> bool:
    return _canonical(key_name) in MODIFIER_KEY_NAMES.values()


def all_key_names() -> list[str]:
    """Canonical key names that resolve, keyboard page first."""
    return [*KEYBOARD_KEY_IDS, *CONSUMER_KEY_IDS]


# Behavior tag -> static behavior id
BEHAVIOR_IDS: Final[Mapping[str, int]] = MappingProxyType(
    {
        descriptor.tag: behavior_id
        for behavior_id, descriptor in STATIC_BEHAVIORS.items()
    }
)


def behavior_id_from_tag(tag: str) -> int | None:
    """Static id for a behavior tag (``kp`` -> 1), None when unknown."""
    return BEHAVIOR_IDS.get(tag)


def is_layer_tag(tag: str) -> bool:
    return BehaviorKind.from_tag(tag).is_layer_behavior


def parse_int(token: str | None) -> int | None:
    """Leading-integer parse; None when the token has no leading digits."""
    if token is None:
        return None
    match = _LEADING_INT.match(token)
    return int(match.group(1)) if match else None


def _layer_index(
    token: str | None, layer_constants: Mapping[str, int] | None
) -> int | None:
    if token is not None and layer_constants and token in layer_constants:
        return layer_constants[token]
    return parse_int(token)


def _param(params: list[str], index: int) -> str | None:
    return params[index] if index < len(params) else None


def _usage(usage_fn: UsageFn, token: str | None) -> int | None:
    return usage_fn(token) if token is not None else None


def binding_from_parsed(
    parsed: ParsedBinding,
    usage_fn: UsageFn = usage_from_key_expression,
    layer_constants: Mapping[str, int] | None = None,
) -> PartialConvertedBinding | None:
    """Rebuild numeric parameters for a parsed binding.

    Layer parameters are integers, or names from ``layer_constants`` when
    the source refers to layers by their ``#define``. Unresolved keys become
    None so the rest of the binding survives.

    Returns:
        Partial binding, or None when the behavior tag is unknown
    """
    behavior_id = behavior_id_from_tag(parsed.behavior_tag)
    if behavior_id is None:
        return None

    kind = BehaviorKind.from_tag(parsed.behavior_tag)
    first = _param(parsed.params, 0)
    second = _param(parsed.params, 1)

    if kind is BehaviorKind.TRANS:
        return PartialConvertedBinding(behavior_id=behavior_id)

    if kind is BehaviorKind.KP:
        return PartialConvertedBinding(
            behavior_id=behavior_id, param1=_usage(usage_fn, first)
        )

    if kind is BehaviorKind.MT:
        return PartialConvertedBinding(
            behavior_id=behavior_id,
            param1=_usage(usage_fn, first),
            param2=_usage(usage_fn, second),
        )

    if kind is BehaviorKind.LT:
        return PartialConvertedBinding(
            behavior_id=behavior_id,
            param1=_layer_index(first, layer_constants),
            param2=_usage(usage_fn, second),
        )

    if kind in (BehaviorKind.MO, BehaviorKind.TOG):
        return PartialConvertedBinding(
            behavior_id=behavior_id, param1=_layer_index(first, layer_constants)
        )

    # Bluetooth: named commands, or the raw integer the generator emits
    if first == "BT_CLR":
        param1: int | None = 0
    elif first == "BT_SEL":
        param1 = parse_int(second)
    elif first is not None and first.isdecimal():
        param1 = int(first)
    else:
        logger.debug("Unsupported bluetooth command %r", first)
        param1 = None
    return PartialConvertedBinding(behavior_id=behavior_id, param1=param1)


__all__ = [
    "KEYBOARD_KEY_IDS",
    "CONSUMER_KEY_IDS",
    "KEY_ALIASES",
    "BEHAVIOR_IDS",
    "usage_from_key_name",
    "usage_from_consumer_name",
    "usage_from_key_expression",
    "is_modifier_name",
    "all_key_names",
    "behavior_id_from_tag",
    "is_layer_tag",
    "parse_int",
    "binding_from_parsed",
]
