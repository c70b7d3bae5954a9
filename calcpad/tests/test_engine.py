"""Tests for the calcpad state machine.

Covers entry, deletion, operator staging and folding, compute edge cases,
error entry and recovery, and the rendered two-line display.
"""

import logging

import pytest

from calcpad.engine import MAX_PRECISION, CalculatorEngine
from calcpad.formatting import group_western
from calcpad.models import Display, Entry, Failed, Operator, Pending

_OPERATOR_KEYS = {"+": Operator.ADD, "-": Operator.SUBTRACT, "*": Operator.MULTIPLY, "/": Operator.DIVIDE}


def _type(engine: CalculatorEngine, keys: str) -> CalculatorEngine:
    """Drive the engine directly: digits/point append, operators stage, '=' computes, '<' deletes."""
    for key in keys:
        if key in _OPERATOR_KEYS:
            engine.choose_operator(_OPERATOR_KEYS[key])
        elif key == "=":
            engine.compute()
        elif key == "<":
            engine.delete_last_char()
        else:
            engine.append_digit_or_point(key)
    return engine


@pytest.fixture
def engine():
    return CalculatorEngine()


# --- Cleared state ---

def test_starts_cleared(engine):
    assert engine.current_operand == "0"
    assert engine.previous_operand == ""
    assert engine.pending_operator is None
    assert engine.error_state is False
    assert engine.render_display() == Display(current="0", previous="")


def test_clear_resets_everything(engine):
    _type(engine, "12+34")
    engine.clear()
    assert engine.state == Entry("0")


def test_instances_are_independent():
    a, b = CalculatorEngine(), CalculatorEngine()
    _type(a, "9+")
    assert b.state == Entry("0")


# --- Digit and point entry ---

def test_first_digit_replaces_zero(engine):
    assert _type(engine, "5").current_operand == "5"


def test_no_leading_zeros(engine):
    assert _type(engine, "007800").current_operand == "7800"


def test_zero_on_zero_stays_zero(engine):
    assert _type(engine, "00").current_operand == "0"


def test_point_after_zero_keeps_zero(engine):
    assert _type(engine, ".").current_operand == "0."


def test_second_point_ignored(engine):
    assert _type(engine, "1.2.3").current_operand == "1.23"


def test_digits_only_sequence_has_only_digits(engine):
    _type(engine, "0304050")
    assert engine.current_operand.isdigit()
    assert not engine.current_operand.startswith("0")


@pytest.mark.parametrize("token", ["a", "12", "", "+"])
def test_invalid_token_raises(engine, token):
    with pytest.raises(ValueError):
        engine.append_digit_or_point(token)


# --- Delete ---

def test_delete_last_char(engine):
    assert _type(engine, "123<").current_operand == "12"


def test_delete_to_empty_becomes_zero(engine):
    assert _type(engine, "5<").current_operand == "0"


def test_delete_on_zero_is_noop(engine):
    assert _type(engine, "<<").state == Entry("0")


def test_delete_point(engine):
    assert _type(engine, ".<").current_operand == "0"


def test_delete_right_after_operator_keeps_staged(engine):
    _type(engine, "7+<")
    assert engine.state == Pending("7", Operator.ADD, "0")
    assert engine.render_display() == Display(current="0", previous="7 +")


def test_delete_then_type_second_operand(engine):
    assert _type(engine, "7+<5=").current_operand == "12"


# --- Arithmetic ---

@pytest.mark.parametrize("keys, expected", [
    ("5+3=", "8"),
    ("8-10=", "-2"),
    ("2.5*4=", "10"),
    ("7/2=", "3.5"),
    ("1/3=", "0.3333333333333"),
    ("2/3=", "0.6666666666667"),
    ("0.5-1=", "-0.5"),
])
def test_arithmetic(engine, keys, expected):
    assert _type(engine, keys).current_operand == expected
    assert engine.pending_operator is None
    assert engine.previous_operand == ""


def test_float_noise_rounded_away(engine):
    _type(engine, "0.1+0.2=")
    assert engine.current_operand == "0.3"
    assert engine.render_display().current == "0.3"


def test_float_noise_in_product(engine):
    assert _type(engine, "0.1*3=").current_operand == "0.3"


def test_custom_precision():
    engine = CalculatorEngine(precision=2)
    assert _type(engine, "1/3=").current_operand == "0.33"


# --- Operator staging and chaining ---

def test_operator_moves_operand_up(engine):
    _type(engine, "1234+")
    assert engine.state == Pending("1234", Operator.ADD, "")
    assert engine.render_display() == Display(current="", previous="1,234 +")


def test_operator_on_fresh_state_stages_zero(engine):
    _type(engine, "+")
    assert engine.state == Pending("0", Operator.ADD, "")


def test_chained_operators_fold_left_to_right(engine):
    _type(engine, "5+3*")
    assert engine.previous_operand == "8"
    assert engine.pending_operator is Operator.MULTIPLY
    assert engine.current_operand == ""

    _type(engine, "2=")
    assert engine.current_operand == "16"
    assert engine.render_display().current == "16"


def test_operator_correction(engine):
    _type(engine, "7+*")
    assert engine.pending_operator is Operator.MULTIPLY
    assert engine.previous_operand == "7"
    assert engine.current_operand == ""


def test_operator_after_result_continues(engine):
    assert _type(engine, "5+3=*2=").current_operand == "16"


def test_digit_after_result_appends(engine):
    assert _type(engine, "5+3=2").current_operand == "82"


def test_divide_renders_division_sign(engine):
    _type(engine, "9/")
    assert engine.render_display().previous == "9 ÷"


# --- Compute edge cases ---

def test_idle_equals_is_noop(engine):
    assert _type(engine, "=").state == Entry("0")


def test_equals_without_operator_is_noop(engine):
    assert _type(engine, "5=").state == Entry("5")


def test_repeated_equals_is_idempotent(engine):
    _type(engine, "5+3=")
    first = engine.state
    engine.compute()
    assert engine.state == first == Entry("8")


def test_equals_right_after_operator_cancels_it(engine):
    _type(engine, "7+=")
    assert engine.state == Entry("7")
    assert engine.error_state is False


def test_lone_point_is_invalid(engine):
    engine.state = Entry(".")
    engine.compute()
    assert engine.state == Failed("Error")


def test_missing_previous_operand_is_error(engine):
    engine.state = Pending("", Operator.ADD, "3")
    engine.compute()
    assert engine.error_state is True
    assert engine.current_operand == "Error"


def test_invalid_previous_operand_is_error(engine):
    engine.state = Pending(".", Operator.ADD, "3")
    engine.compute()
    assert engine.current_operand == "Error"


def test_overflow_is_error(engine):
    engine.state = Pending("1e308", Operator.MULTIPLY, "10")
    engine.compute()
    assert engine.state == Failed("Error")


def test_large_result_written_positionally(engine):
    engine.state = Pending("1000000000000", Operator.MULTIPLY, "1000000000")
    engine.compute()
    assert engine.current_operand == "1000000000000000000000"


def test_small_result_written_positionally(engine):
    _type(engine, "1/10000000=")
    assert engine.current_operand == "0.0000001"
    assert engine.render_display().current == "0.0000001"


@pytest.mark.parametrize("precision", [-1, 21, 400])
def test_precision_out_of_range_rejected(precision):
    with pytest.raises(ValueError, match="precision"):
        CalculatorEngine(precision=precision)


def test_max_precision_computes():
    engine = CalculatorEngine(precision=MAX_PRECISION)
    engine.state = Pending("1", Operator.ADD, "1")
    engine.compute()
    assert engine.state == Entry("2")


# --- Division by zero ---

def test_divide_by_zero(engine):
    _type(engine, "8/0=")
    assert engine.error_state is True
    assert engine.current_operand == "Can't divide by 0"
    assert engine.render_display() == Display(current="Can't divide by 0", previous="")


def test_divide_by_zero_point_zero(engine):
    _type(engine, "8/0.0=")
    assert engine.current_operand == "Can't divide by 0"


def test_divide_by_zero_in_chain_does_not_stage(engine):
    _type(engine, "8/0+")
    assert engine.state == Failed("Can't divide by 0")


def test_divide_by_zero_logged(engine, caplog):
    caplog.set_level(logging.INFO, logger="calcpad.engine")
    _type(engine, "8/0=")
    assert "DivideByZeroError" in caplog.text


# --- Error recovery ---

def test_digit_after_error_starts_fresh(engine):
    _type(engine, "8/0=4")
    assert engine.current_operand == "4"
    assert engine.error_state is False
    assert engine.pending_operator is None


def test_point_after_error_starts_fresh(engine):
    assert _type(engine, "8/0=.").current_operand == "0."


def test_operator_after_error_stages_zero(engine):
    _type(engine, "8/0=+")
    assert engine.state == Pending("0", Operator.ADD, "")
    assert engine.render_display() == Display(current="", previous="0 +")


def test_delete_after_error_equals_clear(engine):
    _type(engine, "8/0=<")
    assert engine.state == CalculatorEngine().state


def test_equals_after_error_is_noop(engine):
    _type(engine, "8/0==")
    assert engine.state == Failed("Can't divide by 0")


def test_error_message_not_grouped(engine):
    engine.state = Failed("Error")
    assert engine.format_for_display("1234567") == "1234567"


# --- Display ---

def test_grouped_display(engine):
    _type(engine, "1000000")
    assert engine.render_display().current == "10,00,000"


def test_fraction_kept_verbatim(engine):
    _type(engine, "1234567.8900")
    assert engine.render_display().current == "12,34,567.8900"


def test_trailing_point_shown(engine):
    _type(engine, "12.")
    assert engine.render_display().current == "12."


def test_negative_display(engine):
    _type(engine, "1-1000000=")
    assert engine.render_display().current == "-9,99,999"


def test_negative_fraction_display(engine):
    _type(engine, "0.5-1=")
    assert engine.render_display().current == "-0.5"


def test_empty_integer_part(engine):
    assert engine.format_for_display(".5") == ".5"


def test_western_grouping():
    engine = CalculatorEngine(grouping=group_western)
    _type(engine, "1000000")
    assert engine.render_display().current == "1,000,000"


@pytest.mark.parametrize("keys", ["1234567.25", "98765*4321=", "0.1+0.2=", "1-1000000=", "7/3=", "1/10000000="])
def test_display_round_trips_to_stored_value(engine, keys):
    _type(engine, keys)
    shown = engine.render_display().current.replace(",", "")
    assert float(shown) == float(engine.current_operand)
