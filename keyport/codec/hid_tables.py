"""Static HID usage tables.

Labels follow the short display names a key picker shows (``Ret``, ``BkSp``,
``␣``) where one exists and the full HID Usage Tables name otherwise. All
tables are read-only mappings built once at import time.
"""

from types import MappingProxyType
from typing import Final


HID_PAGE_KEYBOARD: Final = 0x07
HID_PAGE_CONSUMER: Final = 0x0C

MODIFIER_USAGE_MIN: Final = 0xE0
MODIFIER_USAGE_MAX: Final = 0xE7


def _keyboard_labels() -> dict[int, str]:
    labels: dict[int, str] = {}

    for offset in range(26):
        labels[0x04 + offset] = chr(ord("A") + offset)
    for offset, digit in enumerate("1234567890"):
        labels[0x1E + offset] = digit
    for offset in range(12):
        labels[0x3A + offset] = f"F{offset + 1}"
    for offset in range(12):
        labels[0x68 + offset] = f"Keyboard F{offset + 13}"

    labels.update(
        {
            0x28: "Ret",
            0x29: "ESC",
            0x2A: "BkSp",
            0x2B: "TAB",
            0x2C: "␣",
            0x2D: "-",
            0x2E: "=",
            0x2F: "{",
            0x30: "}",
            0x31: "\\",
            0x32: "Keyboard Non-US # and ~",
            0x33: ";",
            0x34: "'",
            0x35: "`",
            0x36: ",",
            0x37: ".",
            0x38: "/",
            0x39: "CAPS",
            0x46: "PrtSc",
            0x47: "ScrLk",
            0x48: "Pause",
            0x49: "INS",
            0x4A: "HOME",
            0x4B: "PGUP",
            0x4C: "DEL",
            0x4D: "END",
            0x4E: "PGDN",
            0x4F: "→",
            0x50: "←",
            0x51: "↓",
            0x52: "↑",
            0x53: "Keypad Num Lock and Clear",
            0x54: "Keypad /",
            0x55: "Keypad *",
            0x56: "Keypad -",
            0x57: "Keypad +",
            0x58: "Keypad ENTER",
            0x59: "Keypad 1 and End",
            0x5A: "Keypad 2 and Down Arrow",
            0x5B: "Keypad 3 and PageDn",
            0x5C: "Keypad 4 and Left Arrow",
            0x5D: "Keypad 5",
            0x5E: "Keypad 6 and Right Arrow",
            0x5F: "Keypad 7 and Home",
            0x60: "Keypad 8 and Up Arrow",
            0x61: "Keypad 9 and PageUp",
            0x62: "Keypad 0 and Insert",
            0x63: "Keypad . and Delete",
            0x64: "Keyboard Non-US \\ and |",
            0x65: "Keyboard Application",
            0x66: "Keyboard Power",
            0x67: "Keypad =",
            0x74: "Keyboard Execute",
            0x75: "Keyboard Help",
            0x76: "Keyboard Menu",
            0x77: "Keyboard Select",
            0x78: "Keyboard Stop",
            0x79: "Keyboard Again",
            0x7A: "Keyboard Undo",
            0x7B: "Keyboard Cut",
            0x7C: "Keyboard Copy",
            0x7D: "Keyboard Paste",
            0x7E: "Keyboard Find",
            0x7F: "Keyboard Mute",
            0x80: "Keyboard Volume Up",
            0x81: "Keyboard Volume Down",
            # Left and right modifiers share labels
            0xE0: "Ctrl",
            0xE1: "Shft",
            0xE2: "Alt",
            0xE3: "GUI",
            0xE4: "Ctrl",
            0xE5: "Shft",
            0xE6: "AltG",
            0xE7: "GUI",
        }
    )
    return labels


# Keyboard/Keypad page (0x07) usage id -> display label
KEYBOARD_USAGE_LABELS: Final = MappingProxyType(_keyboard_labels())

# Display label -> ZMK key name, for labels that don't follow the generic transform
KEY_NAME_OVERRIDES: Final = MappingProxyType(
    {
        # Numbers
        "1": "N1",
        "2": "N2",
        "3": "N3",
        "4": "N4",
        "5": "N5",
        "6": "N6",
        "7": "N7",
        "8": "N8",
        "9": "N9",
        "0": "N0",
        # Special characters
        "␣": "SPACE",
        "Ret": "ENTER",
        "ESC": "ESC",
        "BkSp": "BSPC",
        "TAB": "TAB",
        "CAPS": "CAPS",
        # Modifiers
        "Ctrl": "LCTRL",
        "Shft": "LSHFT",
        "Alt": "LALT",
        "GUI": "LGUI",
        "AltG": "RALT",
        # Arrow keys
        "→": "RIGHT",
        "←": "LEFT",
        "↓": "DOWN",
        "↑": "UP",
        # Navigation and system keys
        "HOME": "HOME",
        "END": "END",
        "PGUP": "PG_UP",
        "PGDN": "PG_DN",
        "INS": "INS",
        "DEL": "DEL",
        "PrtSc": "PSCRN",
        "ScrLk": "SLCK",
        "Pause": "PAUSE_BREAK",
        "Keyboard Application": "K_APP",
        "Keyboard Power": "K_PWR",
        # Punctuation
        "-": "MINUS",
        "=": "EQUAL",
        "{": "LBKT",
        "}": "RBKT",
        "\\": "BSLH",
        ";": "SEMI",
        "'": "SQT",
        "`": "GRAVE",
        ",": "COMMA",
        ".": "DOT",
        "/": "FSLH",
        "Keyboard Non-US # and ~": "NON_US_HASH",
        "Keyboard Non-US \\ and |": "NON_US_BSLH",
        # Keypad
        "Keypad Num Lock and Clear": "KP_NUM",
        "Keypad /": "KP_SLASH",
        "Keypad *": "KP_MULTIPLY",
        "Keypad -": "KP_MINUS",
        "Keypad +": "KP_PLUS",
        "Keypad ENTER": "KP_ENTER",
        "Keypad 1 and End": "KP_N1",
        "Keypad 2 and Down Arrow": "KP_N2",
        "Keypad 3 and PageDn": "KP_N3",
        "Keypad 4 and Left Arrow": "KP_N4",
        "Keypad 5": "KP_N5",
        "Keypad 6 and Right Arrow": "KP_N6",
        "Keypad 7 and Home": "KP_N7",
        "Keypad 8 and Up Arrow": "KP_N8",
        "Keypad 9 and PageUp": "KP_N9",
        "Keypad 0 and Insert": "KP_N0",
        "Keypad . and Delete": "KP_DOT",
        "Keypad =": "KP_EQUAL",
    }
)

# Keyboard page modifier usage id -> side-specific ZMK name
MODIFIER_KEY_NAMES: Final = MappingProxyType(
    {
        0xE0: "LCTRL",
        0xE1: "LSHFT",
        0xE2: "LALT",
        0xE3: "LGUI",
        0xE4: "RCTRL",
        0xE5: "RSHFT",
        0xE6: "RALT",
        0xE7: "RGUI",
    }
)

# Consumer page (0x0C) usage id -> (ZMK name, display label)
CONSUMER_KEYS: Final = MappingProxyType(
    {
        # Media playback
        0xB0: ("C_PLAY", "Play"),
        0xB1: ("C_PAUSE", "Pause"),
        0xB3: ("C_FF", "Fast Forward"),
        0xB4: ("C_RW", "Rewind"),
        0xB5: ("C_NEXT", "Scan Next Track"),
        0xB6: ("C_PREV", "Scan Previous Track"),
        0xB7: ("C_STOP", "Stop"),
        0xB8: ("C_EJECT", "Eject"),
        0xCD: ("C_PP", "Play/Pause"),
        # Volume
        0xE2: ("C_MUTE", "Mute"),
        0xE9: ("C_VOL_UP", "Volume Increment"),
        0xEA: ("C_VOL_DN", "Volume Decrement"),
        # Display brightness
        0x6F: ("C_BRI_UP", "Display Brightness Increment"),
        0x70: ("C_BRI_DN", "Display Brightness Decrement"),
    }
)

# Modifier mask bit -> wrapper function name, outermost first
MODIFIER_FUNCTIONS: Final = (
    (0x01, "LC"),
    (0x02, "LS"),
    (0x04, "LA"),
    (0x08, "LG"),
    (0x10, "RC"),
    (0x20, "RS"),
    (0x40, "RA"),
    (0x80, "RG"),
)
