"""
Calculator Engine for Calculator 3
Builds the display expression from keypad input and evaluates it
"""
import math
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN, localcontext

import config

MULTIPLY = "×"
DIVIDE = "÷"
OPERATORS = "+-" + MULTIPLY + DIVIDE
INPUT_TOKENS = "0123456789.()" + OPERATORS

# Keypad layout, top row first
KEYPAD = [
    ["C", "(", ")", "⌫", DIVIDE],
    ["7", "8", "9", MULTIPLY],
    ["4", "5", "6", "-"],
    ["1", "2", "3", "+"],
    ["0", ".", "="],
]

# Keyboard characters that stand in for keypad labels
KEY_ALIASES = {
    "*": MULTIPLY,
    "x": MULTIPLY,
    "/": DIVIDE,
    "=": "=",
    "\r": "=",
    "\n": "=",
}
KEYSYM_ALIASES = {
    "BackSpace": "⌫",
    "Escape": "C",
    "Delete": "C",
}


class InvalidExpression(Exception):
    """The display text cannot be evaluated to a finite number."""
    message = "Invalid math expression"

    def __init__(self, message=None):
        super().__init__(message or self.message)


class MismatchedParentheses(InvalidExpression):
    message = "Mismatched parentheses"


class DivisionByZero(InvalidExpression):
    message = "Cannot divide by zero"


# ── Expression builder ─────────────────────────────────────────────────────────

def append(buffer, token):
    """Return buffer with token added.

    A "(" typed right after a number or ")" gets an implicit "×" in front.
    """
    if buffer and token == "(" and (buffer[-1].isdigit() or buffer[-1] == ")"):
        return buffer + MULTIPLY + "("
    return buffer + token


def delete_last(buffer):
    """Drop the last character; a lone "-" left behind collapses to empty."""
    if not buffer:
        return buffer
    buffer = buffer[:-1]
    if buffer == "-":
        return ""
    return buffer


def clear():
    return ""


def key_to_button(char, keysym=""):
    """Map a keyboard event to a keypad label, or None if it has no meaning."""
    if keysym in KEYSYM_ALIASES:
        return KEYSYM_ALIASES[keysym]
    if char and char in INPUT_TOKENS:
        return char
    return KEY_ALIASES.get(char)


# ── Evaluator ──────────────────────────────────────────────────────────────────

_TOKEN_RE = re.compile(r"\s*(?:(\d+\.?\d*|\.\d+)|(.))")
_BINARY_PRECEDENCE = {"+": 1, "-": 1, "*": 2, "/": 2}


def _tokenize(expression):
    tokens = []
    expression = expression.strip()
    pos = 0
    while pos < len(expression):
        match = _TOKEN_RE.match(expression, pos)
        number, symbol = match.groups()
        if number is not None:
            tokens.append(float(number))
        elif symbol in "+-*/()":
            tokens.append(symbol)
        else:
            raise InvalidExpression()
        pos = match.end()
    return tokens


class _Parser:
    """Precedence-climbing parser for + - * / and parentheses."""

    def __init__(self, tokens):
        self.tokens = tokens
        self.pos = 0

    def _peek(self):
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def _next(self):
        token = self._peek()
        self.pos += 1
        return token

    def parse(self):
        if not self.tokens:
            raise InvalidExpression()
        value = self._expression(1)
        leftover = self._peek()
        if leftover == ")":
            raise MismatchedParentheses()
        if leftover is not None:
            raise InvalidExpression()
        return value

    def _expression(self, min_precedence):
        left = self._unary()
        while True:
            op = self._peek()
            if not isinstance(op, str) or op not in _BINARY_PRECEDENCE:
                return left
            precedence = _BINARY_PRECEDENCE[op]
            if precedence < min_precedence:
                return left
            self.pos += 1
            right = self._expression(precedence + 1)
            left = _apply(op, left, right)

    def _unary(self):
        token = self._peek()
        if token == "-" or token == "+":
            self.pos += 1
            value = self._unary()
            return -value if token == "-" else value
        return self._primary()

    def _primary(self):
        token = self._next()
        if isinstance(token, float):
            return token
        if token == "(":
            value = self._expression(1)
            if self._next() != ")":
                raise MismatchedParentheses()
            return value
        raise InvalidExpression()


def _apply(op, left, right):
    if op == "+":
        return left + right
    if op == "-":
        return left - right
    if op == "*":
        return left * right
    if right == 0:
        raise DivisionByZero()
    return left / right


def evaluate(display):
    """Evaluate display text such as "2+3×4" and return a float."""
    expression = display.replace(MULTIPLY, "*").replace(DIVIDE, "/")
    try:
        result = _Parser(_tokenize(expression)).parse()
    except RecursionError:
        raise InvalidExpression()
    if not math.isfinite(result):
        raise InvalidExpression()
    return result


# ── Result formatting ─────────────────────────────────────────────────────────

def format_number(value):
    """Plain decimal text with at most 4 fractional digits, e.g. 3.14159 -> "3.1416"."""
    try:
        if not math.isfinite(value):
            return "Error"
        with localcontext() as ctx:
            # wide enough for any finite double written out in full
            ctx.prec = 400
            quantum = Decimal(1).scaleb(-config.RESULT_MAX_FRACTION_DIGITS)
            rounded = Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_EVEN)
    except (InvalidOperation, TypeError, ValueError):
        return "Error"
    text = format(rounded, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text


class Calculator:
    """Owns the display buffer the keypad edits."""

    def __init__(self):
        self.current_expression = ""

    def press(self, button):
        """Apply an editing key (digits, operators, C, ⌫) and return the buffer.

        "=" is not handled here; callers use calculate() so they can record
        the result.
        """
        if button == "C":
            self.current_expression = clear()
        elif button == "⌫":
            self.current_expression = delete_last(self.current_expression)
        elif button in INPUT_TOKENS and len(button) == 1:
            self.current_expression = append(self.current_expression, button)
        return self.current_expression

    def calculate(self):
        """Evaluate the buffer.

        Returns (expression, result) and leaves the result in the buffer.
        On InvalidExpression the buffer is cleared and the error re-raised.
        """
        expression = self.current_expression
        try:
            result = format_number(evaluate(expression))
        except InvalidExpression:
            self.current_expression = clear()
            raise
        self.current_expression = result
        return expression, result

    def clear(self):
        self.current_expression = clear()
        return self.current_expression

    def get_expression(self):
        """Text for the display; an empty buffer shows "0"."""
        return self.current_expression if self.current_expression else "0"

    def set_expression(self, expression):
        self.current_expression = expression
