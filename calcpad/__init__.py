"""calcpad: a two-line calculator state machine.

Digits, a decimal point, four binary operators, delete, clear and equals drive
a small engine; after every key the engine renders a "previous operand +
operator" line and a "current operand" line. Evaluation is left to right, and
integer digits are grouped South-Asian style (10,00,000) by default.

Usage:
    python -m calcpad press "5+3*2="   # 16
    python -m calcpad repl             # Interactive session
    python -m calcpad keys             # Show key bindings
"""

from calcpad.engine import CalculatorEngine
from calcpad.models import Display, Entry, Failed, Operator, Pending

__version__ = "1.0.0"

__all__ = [
    "CalculatorEngine",
    "Display",
    "Entry",
    "Failed",
    "Operator",
    "Pending",
]
