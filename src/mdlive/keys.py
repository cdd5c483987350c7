"""Raw terminal input to key identifiers.

Turns one complete input sequence (as split by :class:`StdinBuffer`) into a
key id such as ``"a"``, ``"enter"``, ``"ctrl+c"`` or ``"shift+up"``.
"""

from __future__ import annotations

import re


class Key:
    """Named key ids used by the editor bindings."""

    enter = "enter"
    tab = "tab"
    escape = "escape"
    backspace = "backspace"
    up = "up"
    down = "down"
    left = "left"
    right = "right"

    @staticmethod
    def ctrl(key: str) -> str:
        return f"ctrl+{key}"


# ---------------------------------------------------------------------------
# Legacy sequences
# ---------------------------------------------------------------------------

LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1b[1~": "home",
    "\x1b[4~": "end",
    "\x1b[2~": "insert",
    "\x1b[3~": "delete",
    "\x1b[5~": "pageUp",
    "\x1b[6~": "pageDown",
}

# xterm modifier parameter -> prefix (CSI 1;<mod> <final>)
MODIFIER_PREFIXES: dict[int, str] = {
    2: "shift+",
    3: "alt+",
    4: "shift+alt+",
    5: "ctrl+",
    6: "ctrl+shift+",
    7: "ctrl+alt+",
    8: "ctrl+shift+alt+",
}

_CSI_FINALS: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
}

_MODIFIED_CSI_RE = re.compile(r"^\x1b\[1;(\d+)([ABCDHF])$")


def parse_key(data: str) -> str | None:
    """Parse raw terminal input and return the key identifier, or ``None``."""
    if not data:
        return None

    if data in LEGACY_KEY_SEQUENCES:
        return LEGACY_KEY_SEQUENCES[data]

    modified = _MODIFIED_CSI_RE.match(data)
    if modified:
        prefix = MODIFIER_PREFIXES.get(int(modified.group(1)), "")
        return prefix + _CSI_FINALS[modified.group(2)]

    if data == "\x1b":
        return "escape"
    if data in ("\r", "\n"):
        return "enter"
    if data == "\t":
        return "tab"
    if data in ("\x7f", "\x08"):
        return "backspace"

    # Ctrl + letter (0x01 - 0x1a)
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return "ctrl+" + chr(ord(data) + ord("a") - 1)

    # Alt + key (ESC prefix)
    if len(data) == 2 and data[0] == "\x1b" and data[1].isprintable():
        return "alt+" + data[1].lower()

    if len(data) == 1 and data.isprintable():
        return data

    return None
