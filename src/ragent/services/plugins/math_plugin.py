"""
Arithmetic plugin.

Pulls an arithmetic expression out of a chat message and evaluates it with a
restricted AST walk (numbers, + - * / ^ and unary signs only).
"""

import ast
import logging
import math
import operator
import re
from typing import Callable, Optional, Union

from .base import Plugin
from .models import MathOutcome, PluginContext, PluginFailure, PluginOutcome

logger = logging.getLogger(__name__)

Number = Union[int, float]

MATH_KEYWORDS = (
    "calculate",
    "compute",
    "solve",
    "math",
    "equation",
    "add",
    "subtract",
    "multiply",
    "divide",
    "plus",
    "minus",
    "times",
    "equals",
    "sum",
    "total",
)

_OPERATOR_CHARS = re.compile(r"[+\-*/^%=()]")
_DIGIT = re.compile(r"\d")

_NUMBER = r"\d+(?:\.\d+)?"

# digit, operator, digit; parentheses and spaces allowed in between
_DIRECT_EXPRESSION = re.compile(
    r"[(\d.][\d\s.()]*(?:(?:\*\*|[+\-*/^])[\s()]*[\d.][\d\s.()]*)+"
)
_WHAT_IS = re.compile(r"what\s+is\s+([0-9+\-*/^().\s]+)", re.IGNORECASE)
_CALCULATE = re.compile(r"calculate\s+([0-9+\-*/^().\s]+)", re.IGNORECASE)
_PLUS = re.compile(rf"({_NUMBER})\s+plus\s+({_NUMBER})", re.IGNORECASE)
_TIMES = re.compile(rf"({_NUMBER})\s+times\s+({_NUMBER})", re.IGNORECASE)
_MINUS = re.compile(rf"({_NUMBER})\s+minus\s+({_NUMBER})", re.IGNORECASE)

_ALLOWED_CHARS = re.compile(r"[^0-9+\-*/^().]")
# Python rejects integer literals such as "05"
_LEADING_ZEROS = re.compile(r"(?<![\d.])0+(?=\d)")

# Exponents beyond this make integer powers impractically large
MAX_EXPONENT = 1000
# Integer results are capped well below the interpreter's str() digit limit
MAX_RESULT_BITS = 4000

_BINARY_OPS: dict[type, Callable[[Number, Number], Number]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.Pow: operator.pow,
}

_UNARY_OPS: dict[type, Callable[[Number], Number]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}


class ExpressionError(ValueError):
    """Raised when an expression cannot be evaluated."""

    pass


def _match_direct(message: str) -> Optional[str]:
    match = _DIRECT_EXPRESSION.search(message)
    return match.group(0) if match else None


def _match_what_is(message: str) -> Optional[str]:
    match = _WHAT_IS.search(message)
    if match and match.group(1).strip():
        return match.group(1)
    return None


def _match_calculate(message: str) -> Optional[str]:
    match = _CALCULATE.search(message)
    if match and match.group(1).strip():
        return match.group(1)
    return None


def _match_plus(message: str) -> Optional[str]:
    match = _PLUS.search(message)
    return f"{match.group(1)} + {match.group(2)}" if match else None


def _match_times(message: str) -> Optional[str]:
    match = _TIMES.search(message)
    return f"{match.group(1)} * {match.group(2)}" if match else None


def _match_minus(message: str) -> Optional[str]:
    match = _MINUS.search(message)
    return f"{match.group(1)} - {match.group(2)}" if match else None


# Tried in order; the first matcher that returns an expression wins
EXPRESSION_MATCHERS: tuple[Callable[[str], Optional[str]], ...] = (
    _match_direct,
    _match_what_is,
    _match_calculate,
    _match_plus,
    _match_times,
    _match_minus,
)


def extract_expression(message: str) -> Optional[str]:
    """Return the raw expression found in ``message``, or None."""
    for matcher in EXPRESSION_MATCHERS:
        expression = matcher(message)
        if expression is not None:
            return expression
    return None


def sanitize_expression(expression: str) -> str:
    """Drop whitespace, write powers as ``^`` and keep only arithmetic characters."""
    cleaned = re.sub(r"\s+", "", expression)
    cleaned = cleaned.replace("**", "^")
    return _ALLOWED_CHARS.sub("", cleaned)


def _check_power(base: Number, exponent: Number) -> None:
    if abs(exponent) > MAX_EXPONENT:
        raise ExpressionError(f"exponent {exponent} is too large")
    if isinstance(base, int) and isinstance(exponent, int) and exponent > 0:
        if (base.bit_length() - 1) * exponent > MAX_RESULT_BITS:
            raise ExpressionError("result is too large")


def _check_size(value: Number) -> Number:
    if isinstance(value, int) and value.bit_length() > MAX_RESULT_BITS:
        raise ExpressionError("result is too large")
    return value


def _eval_node(node: ast.AST) -> Number:
    if isinstance(node, ast.Expression):
        return _eval_node(node.body)
    if isinstance(node, ast.Constant) and type(node.value) in (int, float):
        return _check_size(node.value)
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        return _UNARY_OPS[type(node.op)](_eval_node(node.operand))
    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPS:
        left = _eval_node(node.left)
        right = _eval_node(node.right)
        if isinstance(node.op, ast.Pow):
            _check_power(left, right)
        return _check_size(_BINARY_OPS[type(node.op)](left, right))
    raise ExpressionError(f"unsupported syntax: {type(node).__name__}")


def evaluate_expression(expression: str) -> Number:
    """
    Evaluate a sanitized expression where ``^`` means power.

    Integral float results are returned as int.

    Raises:
        ExpressionError: If the expression is empty, malformed or not finite
    """
    if not expression:
        raise ExpressionError("empty expression")
    try:
        source = _LEADING_ZEROS.sub("", expression).replace("^", "**")
        tree = ast.parse(source, mode="eval")
        value = _eval_node(tree)
    except SyntaxError as e:
        raise ExpressionError(f"invalid expression {expression!r}") from e
    except (ZeroDivisionError, OverflowError) as e:
        raise ExpressionError(str(e)) from e
    except RecursionError as e:
        raise ExpressionError("expression is nested too deeply") from e

    if isinstance(value, complex):
        raise ExpressionError("result is not a real number")
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ExpressionError("result is not finite")
        if value.is_integer():
            return int(value)
    return value


class MathPlugin(Plugin):
    """Evaluates arithmetic found in the user's message."""

    name = "math"
    description = "Performs mathematical calculations and evaluations"
    triggers = ("calculate", "math", "solve", "equation", "+", "-", "*", "/")

    def should_trigger(self, message: str) -> bool:
        if not _DIGIT.search(message):
            return False
        if _OPERATOR_CHARS.search(message):
            return True
        words = message.lower().split()
        return any(keyword in word for keyword in MATH_KEYWORDS for word in words)

    async def execute(self, context: PluginContext) -> PluginOutcome:
        raw = extract_expression(context.user_message)
        if raw is None:
            return PluginFailure(
                plugin_name=self.name, error="No valid mathematical expression found"
            )

        expression = sanitize_expression(raw)
        try:
            result = evaluate_expression(expression)
        except ExpressionError as e:
            logger.info(f"Math evaluation failed for {expression!r}: {e}")
            return PluginFailure(
                plugin_name=self.name, error=f"Mathematical evaluation failed: {e}"
            )

        return MathOutcome(expression=expression, result=result)

    def format_success(self, outcome: PluginOutcome) -> str:
        assert isinstance(outcome, MathOutcome)
        return f"Mathematical calculation:\nExpression: {outcome.expression}\nResult: {outcome.result}"

    def examples(self) -> list[str]:
        return [
            "What is 2 + 2?",
            "Calculate 15 * 8",
            "Solve 100 / 4",
            "2 + 2 * 5",
            "What is 2**5?",
            "Calculate 3^4",
            "5 plus 3 equals?",
            "10 minus 4",
            "6 times 7",
        ]
