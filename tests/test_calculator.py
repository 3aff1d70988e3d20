"""Tests for calculator.py - expression building, evaluation and formatting.

The builder functions take and return the display buffer explicitly, so
they are exercised here without any UI.
"""

import pytest

from calculator import (
    Calculator,
    DivisionByZero,
    InvalidExpression,
    MismatchedParentheses,
    append,
    clear,
    delete_last,
    evaluate,
    format_number,
    key_to_button,
)


def build(tokens, buffer=""):
    for token in tokens:
        buffer = append(buffer, token)
    return buffer


class TestAppend:
    """Tests for append()."""

    @pytest.mark.parametrize("tokens", [
        "12+34",
        "7×8÷2",
        "1.5-0.25",
        "9)+3",
        "(2+3)",
        "-4×-2",
    ])
    def test_plain_concatenation(self, tokens):
        """Without "(" after a number, append is string concatenation."""
        assert build(tokens) == tokens

    def test_paren_after_digit_inserts_multiply(self):
        assert append("5", "(") == "5×("

    def test_paren_after_closing_paren_inserts_multiply(self):
        assert append("(2+3)", "(") == "(2+3)×("

    def test_paren_after_operator_appends_directly(self):
        assert append("5+", "(") == "5+("

    def test_paren_on_empty_buffer(self):
        assert append("", "(") == "("

    def test_paren_after_decimal_point_appends_directly(self):
        assert append("5.", "(") == "5.("

    def test_digit_after_closing_paren_has_no_implicit_operator(self):
        assert append("(2)", "3") == "(2)3"


class TestDeleteLast:
    """Tests for delete_last() and clear()."""

    def test_removes_trailing_operator(self):
        assert delete_last("5-") == "5"

    def test_lone_minus_becomes_empty(self):
        assert delete_last("-") == ""

    def test_minus_left_behind_becomes_empty(self):
        assert delete_last("-5") == ""

    def test_empty_buffer_is_noop(self):
        assert delete_last("") == ""

    def test_removes_implicit_paren_one_char_at_a_time(self):
        assert delete_last("5×(") == "5×"

    def test_clear(self):
        assert clear() == ""


class TestEvaluate:
    """Tests for evaluate()."""

    def test_precedence_after_glyph_substitution(self):
        assert evaluate("2+3×4") == 14

    def test_parentheses(self):
        assert evaluate("(2+3)×4") == 20

    def test_implicit_multiplication(self):
        assert evaluate(build("5(2+1)")) == 15

    def test_division_produces_float(self):
        assert evaluate("7÷2") == 3.5

    def test_left_associativity(self):
        assert evaluate("10-4-3") == 3
        assert evaluate("64÷4÷2") == 8

    def test_unary_minus(self):
        assert evaluate("-5+3") == -2
        assert evaluate("2×-3") == -6
        assert evaluate("-(2+3)") == -5

    def test_decimal_forms(self):
        assert evaluate("1.5+.5") == 2.0
        assert evaluate("5.×2") == 10.0

    def test_ascii_operators_accepted(self):
        assert evaluate("6*7") == 42

    def test_division_by_zero(self):
        with pytest.raises(InvalidExpression):
            evaluate("5÷0")

    def test_division_by_zero_is_specific(self):
        with pytest.raises(DivisionByZero):
            evaluate("1÷(2-2)")

    def test_empty_expression(self):
        with pytest.raises(InvalidExpression):
            evaluate("")

    @pytest.mark.parametrize("expression", ["2+", "×3", "1.2.3", "()", "2 3", "abc"])
    def test_malformed(self, expression):
        with pytest.raises(InvalidExpression):
            evaluate(expression)

    @pytest.mark.parametrize("expression", ["(2+3", "2+3)", "((1)"])
    def test_unbalanced_parentheses(self, expression):
        with pytest.raises(MismatchedParentheses):
            evaluate(expression)

    def test_overflow_is_invalid(self):
        huge = "9" * 200
        with pytest.raises(InvalidExpression):
            evaluate(f"{huge}×{huge}×{huge}")


class TestFormatNumber:
    """Tests for format_number()."""

    def test_rounds_to_four_places(self):
        assert format_number(3.14159) == "3.1416"

    def test_whole_number(self):
        assert format_number(5.0) == "5"

    def test_negative_fraction(self):
        assert format_number(-0.5) == "-0.5"

    def test_strips_trailing_zeros(self):
        assert format_number(0.1 + 0.2) == "0.3"

    def test_no_grouping_separators(self):
        assert format_number(1234567.0) == "1234567"

    def test_tiny_values_round_to_zero(self):
        assert format_number(0.00004) == "0"
        assert format_number(-0.00004) == "0"

    def test_large_values_use_plain_notation(self):
        assert format_number(1e20) == "100000000000000000000"

    def test_non_finite_is_error(self):
        assert format_number(float("inf")) == "Error"
        assert format_number(float("nan")) == "Error"


class TestKeyToButton:
    """Tests for keyboard mapping."""

    def test_digits_and_operators(self):
        assert key_to_button("5", "5") == "5"
        assert key_to_button("+", "plus") == "+"

    def test_ascii_aliases(self):
        assert key_to_button("*", "asterisk") == "×"
        assert key_to_button("/", "slash") == "÷"

    def test_enter_and_equals(self):
        assert key_to_button("\r", "Return") == "="
        assert key_to_button("=", "equal") == "="

    def test_editing_keys(self):
        assert key_to_button("\x08", "BackSpace") == "⌫"
        assert key_to_button("\x1b", "Escape") == "C"

    def test_unknown_key(self):
        assert key_to_button("q", "q") is None
        assert key_to_button("", "Shift_L") is None


class TestCalculator:
    """Tests for the Calculator buffer holder."""

    def test_empty_display_shows_zero(self):
        assert Calculator().get_expression() == "0"

    def test_press_builds_expression(self):
        calc = Calculator()
        for button in "5(2+1":
            calc.press(button)
        assert calc.current_expression == "5×(2+1"

    def test_press_clear_and_delete(self):
        calc = Calculator()
        for button in "12":
            calc.press(button)
        assert calc.press("⌫") == "1"
        assert calc.press("C") == ""

    def test_press_ignores_unknown_buttons(self):
        calc = Calculator()
        calc.press("7")
        assert calc.press("%") == "7"
        assert calc.press("=") == "7"

    def test_calculate_success_leaves_result_in_buffer(self):
        calc = Calculator()
        calc.set_expression("2+3×4")
        assert calc.calculate() == ("2+3×4", "14")
        assert calc.current_expression == "14"

    def test_calculate_result_can_be_continued(self):
        calc = Calculator()
        calc.set_expression("10÷4")
        calc.calculate()
        calc.press("×")
        calc.press("2")
        assert calc.calculate() == ("2.5×2", "5")

    def test_calculate_failure_clears_buffer(self):
        calc = Calculator()
        calc.set_expression("5÷0")
        with pytest.raises(InvalidExpression) as excinfo:
            calc.calculate()
        assert calc.current_expression == ""
        assert str(excinfo.value) == "Cannot divide by zero"

    def test_calculate_empty_fails(self):
        calc = Calculator()
        with pytest.raises(InvalidExpression) as excinfo:
            calc.calculate()
        assert str(excinfo.value) == "Invalid math expression"
