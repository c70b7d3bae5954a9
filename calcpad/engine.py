"""The calcpad state machine.

CalculatorEngine holds one State value (Entry, Pending or Failed) and moves it
through the five input events: append a digit or point, choose an operator,
delete, clear, and compute. Display text is pulled with render_display() after
each event; the engine never talks to a UI itself.

Evaluation is strictly left to right. Choosing an operator while another is
staged folds the staged computation first, so "5 + 3 * 2 =" gives 16.
"""

from __future__ import annotations

import logging
import math
import operator
from dataclasses import replace
from typing import Optional

from calcpad.errors import (
    CalculatorError,
    DivideByZeroError,
    InvalidOperandError,
    MissingOperandError,
)
from calcpad.formatting import (
    Grouping,
    format_integer_part,
    group_south_asian,
    number_text,
    parse_operand,
    round_result,
)
from calcpad.models import CLEARED, Display, Entry, Failed, Operator, Pending, State

logger = logging.getLogger("calcpad.engine")

DEFAULT_PRECISION = 13
MAX_PRECISION = 20

_ENTRY_TOKENS = frozenset("0123456789.")

_ARITHMETIC = {
    Operator.ADD: operator.add,
    Operator.SUBTRACT: operator.sub,
    Operator.MULTIPLY: operator.mul,
    Operator.DIVIDE: operator.truediv,
}


class CalculatorEngine:
    """Two-line calculator: operand entry, one pending operator, error display.

    Args:
        grouping: Formats the integer digits of displayed numbers.
            Defaults to South-Asian (lakh/crore) grouping.
        precision: Fractional digits kept when rounding results, 0 to MAX_PRECISION.

    Raises:
        ValueError: precision out of range.
    """

    def __init__(
        self,
        grouping: Grouping = group_south_asian,
        precision: int = DEFAULT_PRECISION,
    ) -> None:
        self.grouping = grouping
        if not 0 <= precision <= MAX_PRECISION:
            raise ValueError(f"precision must be between 0 and {MAX_PRECISION}, got {precision}")
        self.precision = precision
        self.state: State = CLEARED

    # --- Flat view of the state ---

    @property
    def current_operand(self) -> str:
        """Operand being typed, the last result, or the error message."""
        if isinstance(self.state, Failed):
            return self.state.message
        return self.state.current

    @property
    def previous_operand(self) -> str:
        """Left operand of the staged operation, or "" when nothing is staged."""
        if isinstance(self.state, Pending):
            return self.state.previous
        return ""

    @property
    def pending_operator(self) -> Optional[Operator]:
        """Operator waiting for its right operand, or None."""
        if isinstance(self.state, Pending):
            return self.state.operator
        return None

    @property
    def error_state(self) -> bool:
        """True while the display shows an error message."""
        return isinstance(self.state, Failed)

    # --- Input events ---

    def clear(self) -> None:
        """Reset to the cleared state."""
        self.state = CLEARED
        logger.debug("Cleared")

    def append_digit_or_point(self, token: str) -> None:
        """Type a digit or the decimal point into the current operand.

        A second point is ignored, and a lone "0" is replaced by the next
        digit so no leading zeros build up.
        """
        if token not in _ENTRY_TOKENS or len(token) != 1:
            raise ValueError(f"Expected a digit or '.', got {token!r}")
        self._recover()

        current = self.current_operand
        if token == "." and "." in current:
            return
        if current == "0" and token != ".":
            self._set_current(token)
        else:
            self._set_current(current + token)

    def choose_operator(self, op: Operator) -> None:
        """Stage a binary operator, folding any computation already staged."""
        if isinstance(self.state, Failed):
            self._recover()
            # Stage straight away on the cleared "0"; no digit needs typing first.
            self.state = Pending(previous=self.current_operand, operator=op)
            logger.debug("Staged %s after error", op.value)
            return

        state = self.state
        if isinstance(state, Pending):
            if state.current == "":
                # Operator pressed twice in a row: replace the staged one.
                self.state = replace(state, operator=op)
                logger.debug("Replaced staged operator with %s", op.value)
                return
            self.compute()
            if self.error_state:
                return

        self.state = Pending(previous=self.current_operand, operator=op)
        logger.debug("Staged %s %s", self.previous_operand, op.value)

    def delete_last_char(self) -> None:
        """Remove the last typed character; an emptied operand becomes "0"."""
        if isinstance(self.state, Failed):
            self._recover()
            return

        current = self.current_operand
        if current == "0":
            return
        self._set_current(current[:-1] or "0")

    def compute(self) -> None:
        """Fold the staged operand and operator into the current operand.

        Errors switch the engine to the error display and never raise. Does
        nothing while already showing an error or when nothing is staged.
        """
        if isinstance(self.state, Failed):
            return

        try:
            result = self._evaluate(self.state)
        except CalculatorError as err:
            logger.info("%s: %s", type(err).__name__, err)
            self.state = Failed(err.display_message)
            return

        if result is not None:
            self.state = result
            logger.debug("Computed %s", result.current)

    # --- Display ---

    def format_for_display(self, text: str) -> str:
        """Group the integer digits of ``text``; the fraction is kept verbatim.

        Error messages pass through unchanged.
        """
        if self.error_state:
            return text
        integer, point, fraction = text.partition(".")
        integer_display = format_integer_part(integer, self.grouping)
        if point:
            return f"{integer_display}.{fraction}"
        return integer_display

    def render_display(self) -> Display:
        """Current line and the "previous operand + operator" line."""
        current = self.format_for_display(self.current_operand)
        state = self.state
        if not isinstance(state, Pending):
            return Display(current=current)
        previous = f"{self.format_for_display(state.previous)} {state.operator.symbol}"
        return Display(current=current, previous=previous)

    # --- Helpers ---

    def _recover(self) -> None:
        """Leave the error display by clearing; no-op otherwise."""
        if isinstance(self.state, Failed):
            logger.debug("Clearing error: %s", self.state.message)
            self.state = CLEARED

    def _set_current(self, text: str) -> None:
        if isinstance(self.state, Pending):
            self.state = replace(self.state, current=text)
        else:
            self.state = Entry(text)

    def _evaluate(self, state: State) -> Optional[Entry]:
        """Apply the staged operator. Returns None when there is nothing to do."""
        if isinstance(state, Pending):
            previous_text, op = state.previous, state.operator
        else:
            previous_text, op = "", None

        previous = parse_operand(previous_text)
        current = parse_operand(state.current)

        if previous is None or current is None:
            if previous is None and op is None:
                return None
            if previous is not None and op is not None:
                # "7 + =" drops the operator and shows 7 again.
                return Entry(previous_text)
            raise MissingOperandError(
                f"previous={previous_text!r} current={state.current!r}"
            )

        if op is Operator.DIVIDE and current == 0:
            raise DivideByZeroError(f"{previous_text} / {state.current}")

        value = round_result(_ARITHMETIC[op](previous, current), self.precision)
        if not math.isfinite(value):
            raise InvalidOperandError(f"result out of range: {value}")
        return Entry(number_text(value))
