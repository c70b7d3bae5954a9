"""Data models for the calcpad engine.

Operator enum, the Entry / Pending / Failed state union, and the Display pair
that flows from engine → key adapter → CLI.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class Operator(str, Enum):
    """Binary operators the calculator can stage."""

    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"

    @property
    def symbol(self) -> str:
        """Symbol shown after the previous operand on the top display line."""
        return _SYMBOLS[self]

    @classmethod
    def from_key(cls, key: str) -> Optional[Operator]:
        """Resolve a keyboard key or button label ('/', '÷', '×', ...) to an operator."""
        return _KEY_OPERATORS.get(key)


_SYMBOLS = {
    Operator.ADD: "+",
    Operator.SUBTRACT: "-",
    Operator.MULTIPLY: "*",
    Operator.DIVIDE: "÷",
}

# Keyboard sends '/', the on-screen button is labelled '÷'.
_KEY_OPERATORS = {
    "+": Operator.ADD,
    "-": Operator.SUBTRACT,
    "*": Operator.MULTIPLY,
    "×": Operator.MULTIPLY,
    "/": Operator.DIVIDE,
    "÷": Operator.DIVIDE,
}


@dataclass(frozen=True)
class Entry:
    """No operator staged: idle ("0") or typing the first operand."""

    current: str = "0"


@dataclass(frozen=True)
class Pending:
    """An operand and operator are staged, waiting for the right operand.

    ``current`` is empty right after the operator was chosen.
    """

    previous: str
    operator: Operator
    current: str = ""


@dataclass(frozen=True)
class Failed:
    """Error display; ``message`` replaces the current operand."""

    message: str


State = Union[Entry, Pending, Failed]

CLEARED = Entry()


@dataclass(frozen=True)
class Display:
    """The two display lines: current operand and 'previous + operator'."""

    current: str
    previous: str = ""
