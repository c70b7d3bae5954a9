"""Keyboard and button adapter for the calcpad engine.

Maps keyboard keys (as a browser keydown would report them) and on-screen
button labels to engine operations, and returns the rendered display after
every press.

Key sequences in text form use single characters for printable keys and
braces for named keys:

    5+3*2{Enter}     -> 16
    12{Backspace}.5= -> 1.5
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator

from calcpad.engine import CalculatorEngine
from calcpad.models import Display, Operator

logger = logging.getLogger("calcpad.keys")


class Action(str, Enum):
    """What a key or button does to the engine."""

    APPEND = "append"
    OPERATOR = "operator"
    COMPUTE = "compute"
    DELETE = "delete"
    CLEAR = "clear"


@dataclass(frozen=True)
class Binding:
    """A key or button bound to an engine action."""

    action: Action
    token: str = ""

    @property
    def description(self) -> str:
        if self.action is Action.APPEND:
            return "decimal point" if self.token == "." else f"digit {self.token}"
        if self.action is Action.OPERATOR:
            return Operator.from_key(self.token).value
        return self.action.value

    def apply(self, engine: CalculatorEngine) -> None:
        if self.action is Action.APPEND:
            engine.append_digit_or_point(self.token)
        elif self.action is Action.OPERATOR:
            engine.choose_operator(Operator.from_key(self.token))
        elif self.action is Action.COMPUTE:
            engine.compute()
        elif self.action is Action.DELETE:
            engine.delete_last_char()
        elif self.action is Action.CLEAR:
            engine.clear()


_ENTRY = {ch: Binding(Action.APPEND, ch) for ch in "0123456789."}

KEY_BINDINGS: dict[str, Binding] = {
    **_ENTRY,
    "+": Binding(Action.OPERATOR, "+"),
    "-": Binding(Action.OPERATOR, "-"),
    "*": Binding(Action.OPERATOR, "*"),
    "/": Binding(Action.OPERATOR, "/"),
    "Enter": Binding(Action.COMPUTE),
    "=": Binding(Action.COMPUTE),
    "Backspace": Binding(Action.DELETE),
    "Escape": Binding(Action.CLEAR),
}

BUTTON_LABELS: dict[str, Binding] = {
    **_ENTRY,
    "+": Binding(Action.OPERATOR, "+"),
    "-": Binding(Action.OPERATOR, "-"),
    "*": Binding(Action.OPERATOR, "*"),
    "×": Binding(Action.OPERATOR, "×"),
    "÷": Binding(Action.OPERATOR, "÷"),
    "=": Binding(Action.COMPUTE),
    "DEL": Binding(Action.DELETE),
    "AC": Binding(Action.CLEAR),
}

# Named keys accepted inside braces, matched case-insensitively.
_NAMED_KEYS = {
    "enter": "Enter",
    "return": "Enter",
    "backspace": "Backspace",
    "bs": "Backspace",
    "escape": "Escape",
    "esc": "Escape",
}


def press_key(engine: CalculatorEngine, key: str) -> Display:
    """Apply a keyboard key. Unbound keys are ignored."""
    binding = KEY_BINDINGS.get(key)
    if binding is None:
        logger.debug("Ignoring unbound key %r", key)
    else:
        binding.apply(engine)
    return engine.render_display()


def press_button(engine: CalculatorEngine, label: str) -> Display:
    """Apply an on-screen button by its label.

    Raises:
        ValueError: no button has this label.
    """
    binding = BUTTON_LABELS.get(label)
    if binding is None:
        raise ValueError(f"Unknown button: {label!r}")
    binding.apply(engine)
    return engine.render_display()


def parse_key_sequence(text: str) -> list[str]:
    """Split text into key names: single characters, or ``{Name}`` for named keys.

    Raises:
        ValueError: a ``{`` without a closing ``}``.
    """
    keys: list[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch != "{":
            keys.append(ch)
            i += 1
            continue
        end = text.find("}", i)
        if end == -1:
            raise ValueError(f"Unterminated '{{' at position {i} in {text!r}")
        name = text[i + 1:end]
        keys.append(_NAMED_KEYS.get(name.lower(), name))
        i = end + 1
    return keys


def press_keys(engine: CalculatorEngine, keys: Iterable[str]) -> Iterator[tuple[str, Display]]:
    """Apply keys in order, yielding each key with the display after it."""
    for key in keys:
        yield key, press_key(engine, key)
