"""Host-neutral input events consumed by the param engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias


KEY_UP = "Up"
KEY_DOWN = "Down"
KEY_LEFT = "Left"
KEY_RIGHT = "Right"
KEY_ENTER = "Enter"
KEY_ESC = "Esc"
KEY_BACKSPACE = "Backspace"
KEY_TAB = "Tab"
KEY_BACKTAB = "BackTab"

NAMED_KEYS = frozenset(
    (KEY_UP, KEY_DOWN, KEY_LEFT, KEY_RIGHT, KEY_ENTER, KEY_ESC, KEY_BACKSPACE, KEY_TAB, KEY_BACKTAB)
)

MOD_NONE = 0
MOD_SHIFT = 1
MOD_CONTROL = 2
MOD_ALT = 4

MOUSE_CLICK = "click"
MOUSE_SCROLL_UP = "scroll_up"
MOUSE_SCROLL_DOWN = "scroll_down"


@dataclass(frozen=True, slots=True)
class KeyEvent:
    """`code` is a named key (see NAMED_KEYS) or a single printable character."""

    code: str
    modifiers: int = MOD_NONE

    def is_char(self) -> bool:
        return len(self.code) == 1 and self.code not in NAMED_KEYS and not (self.modifiers & (MOD_CONTROL | MOD_ALT))

    def has(self, modifier: int) -> bool:
        return bool(self.modifiers & modifier)


@dataclass(frozen=True, slots=True)
class MouseEvent:
    """`row` is a row position in the active level's row view, when known."""

    kind: str
    row: int | None = None


InputEvent: TypeAlias = KeyEvent | MouseEvent


def key(code: str, modifiers: int = MOD_NONE) -> KeyEvent:
    return KeyEvent(code, modifiers)
