"""
Tests for the math plugin: triggering, extraction and evaluation.
"""

import asyncio

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from ragent.services.plugins import (
    MathOutcome,
    MathPlugin,
    PluginContext,
    PluginFailure,
    evaluate_expression,
    extract_expression,
    sanitize_expression,
)
from ragent.services.plugins.math_plugin import ExpressionError


def run_plugin(message: str):
    plugin = MathPlugin()
    return asyncio.run(plugin.execute(PluginContext(user_message=message, session_id="s")))


class TestShouldTrigger:
    @pytest.mark.parametrize(
        "message",
        ["What is 12 * 4?", "2+2", "calculate 15 and 3", "5 plus 3", "solve 10 / 2"],
    )
    def test_triggers(self, message):
        assert MathPlugin().should_trigger(message)

    @pytest.mark.parametrize(
        "message",
        ["What is the weather in Paris?", "I have 3 apples", "calculate this for me", ""],
    )
    def test_does_not_trigger(self, message):
        assert not MathPlugin().should_trigger(message)


class TestExtraction:
    @pytest.mark.parametrize(
        "message,expected",
        [
            ("What is 12 * 4?", "12 * 4"),
            ("What is 2**5?", "2**5"),
            ("Calculate 3^4", "3^4"),
            ("(2 + 3) * 4 please", "(2 + 3) * 4"),
            ("5 plus 3 equals?", "5 + 3"),
            ("6 times 7", "6 * 7"),
            ("10 minus 4", "10 - 4"),
        ],
    )
    def test_extract_expression(self, message, expected):
        assert extract_expression(message).strip() == expected

    def test_no_expression(self):
        assert extract_expression("tell me about the agent") is None

    def test_sanitize(self):
        assert sanitize_expression(" 2 ** 5 ") == "2^5"
        assert sanitize_expression("12 * 4 = ?") == "12*4"
        assert sanitize_expression("(1 + 2) x 3") == "(1+2)3"


class TestEvaluate:
    @pytest.mark.parametrize(
        "expression,expected",
        [
            ("12*4", 48),
            ("2^5", 32),
            ("2+2*5", 12),
            ("(2+3)*4", 20),
            ("100/4", 25),
            ("7/2", 3.5),
            ("-3+5", 2),
            ("05+3", 8),
            ("0.5+0.25", 0.75),
        ],
    )
    def test_values(self, expression, expected):
        assert evaluate_expression(expression) == expected

    def test_integral_division_returns_int(self):
        assert isinstance(evaluate_expression("10/2"), int)

    @pytest.mark.parametrize(
        "expression",
        [
            "",
            "5+",
            "1/0",
            "2^5000",
            "(-8)^0.5",
            "()",
            "10^999*10^999*10^999*10^999*10^999",
            "(10^999)^1000",
            "9" * 1300,
        ],
    )
    def test_errors(self, expression):
        with pytest.raises(ExpressionError):
            evaluate_expression(expression)

    def test_large_power_within_bounds(self):
        assert evaluate_expression("10^999") == 10**999

    @given(
        a=st.integers(min_value=0, max_value=10_000),
        b=st.integers(min_value=0, max_value=10_000),
    )
    @settings(max_examples=100, deadline=None)
    def test_integer_arithmetic_matches_python(self, a, b):
        assert evaluate_expression(f"{a}+{b}") == a + b
        assert evaluate_expression(f"{a}*{b}") == a * b
        assert evaluate_expression(f"{a}-{b}") == a - b


class TestExecute:
    def test_success(self):
        outcome = run_plugin("What is 12 * 4?")

        assert isinstance(outcome, MathOutcome)
        assert outcome.success
        assert outcome.expression == "12*4"
        assert outcome.result == 48

    def test_power(self):
        outcome = run_plugin("What is 2**5?")

        assert outcome.expression == "2^5"
        assert outcome.result == 32

    def test_word_operators(self):
        assert run_plugin("5 plus 3 equals?").result == 8
        assert run_plugin("6 times 7").result == 42
        assert run_plugin("10 minus 4").result == 6

    def test_division_by_zero_is_failure(self):
        outcome = run_plugin("What is 10 / 0?")

        assert isinstance(outcome, PluginFailure)
        assert not outcome.success
        assert outcome.error.startswith("Mathematical evaluation failed")

    def test_oversized_result_is_failure(self):
        outcome = run_plugin("What is 10^999*10^999*10^999*10^999*10^999?")

        assert isinstance(outcome, PluginFailure)
        assert "too large" in outcome.error
        assert MathPlugin().format_outcome(outcome).startswith("math plugin failed")

    def test_missing_expression_is_failure(self):
        outcome = run_plugin("solve the equation for 3 unknowns")

        assert isinstance(outcome, PluginFailure)
        assert outcome.error == "No valid mathematical expression found"

    def test_format(self):
        plugin = MathPlugin()
        outcome = run_plugin("What is 12 * 4?")

        assert plugin.format_outcome(outcome) == (
            "Mathematical calculation:\nExpression: 12*4\nResult: 48"
        )

    def test_format_failure(self):
        plugin = MathPlugin()
        failure = PluginFailure(plugin_name="math", error="boom")

        assert plugin.format_outcome(failure) == "math plugin failed: boom"

    def test_examples_all_evaluate(self):
        plugin = MathPlugin()
        for example in plugin.examples():
            assert plugin.should_trigger(example), example
            assert run_plugin(example).success, example
