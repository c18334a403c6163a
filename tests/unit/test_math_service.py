"""고정밀 수식 계산기 테스트"""

import pytest

from webcalc.core.exceptions import MathEvaluationException
from webcalc.services.math_service import MathMode, evaluate_expression


class TestBigNumberMode:
    def test_no_float_artifacts(self):
        result = evaluate_expression("0.1 + 0.2", "BigNumber", 64)
        assert result.result == "0.3"
        assert result.mode == "BigNumber"
        assert result.value_type == "BigNumber"

    def test_caret_is_power(self):
        assert evaluate_expression("2^10").result == "1024"
        assert evaluate_expression("2**0.5", precision=20).result == "1.4142135623730950488"

    def test_precision_controls_significant_digits(self):
        assert evaluate_expression("1/3", precision=16).result == "0.3333333333333333"
        assert len(evaluate_expression("1/3", precision=40).result) == len("0.") + 40

    def test_constants_and_functions(self):
        assert evaluate_expression("pi", precision=30).result == "3.14159265358979323846264338328"
        assert evaluate_expression("sqrt(16) + abs(-2)").result == "6"
        assert evaluate_expression("floor(2.7) + ceil(2.1)").result == "5"
        assert evaluate_expression("round(2.5)").result == "3"
        assert evaluate_expression("round(3.14159, 2)").result == "3.14"
        assert evaluate_expression("ln(1)").result == "0"
        assert evaluate_expression("log10(1000)").result == "3"

    def test_large_numbers_keep_exact_digits(self):
        assert evaluate_expression("12345678901234567890 * 10").result == "123456789012345678900"

    def test_long_literal_is_not_rounded_through_float(self):
        result = evaluate_expression("0.12345678901234567890123", precision=32)
        assert result.result == "0.12345678901234567890123"


class TestNumberMode:
    def test_float_semantics(self):
        assert evaluate_expression("0.1 + 0.2", MathMode.NUMBER).result == "0.30000000000000004"

    def test_integral_result_is_compact(self):
        assert evaluate_expression("6 * 7", "number").result == "42"

    def test_round_half_away_from_zero(self):
        assert evaluate_expression("round(-2.5)", "number").result == "-3"


class TestFractionMode:
    def test_exact_rationals(self):
        assert evaluate_expression("1/3 + 1/6", "Fraction").result == "1/2"
        assert evaluate_expression("0.1 + 0.2", "Fraction").result == "3/10"
        assert evaluate_expression("(2/3)^2", "Fraction").result == "4/9"
        assert evaluate_expression("4/2", "Fraction").result == "2"

    @pytest.mark.parametrize("expression", ["sqrt(2)", "pi * 2", "2^(1/2)", "exp(1)"])
    def test_non_rational_operations_raise(self, expression):
        with pytest.raises(MathEvaluationException):
            evaluate_expression(expression, "Fraction")

    def test_large_exact_power_is_allowed(self):
        result = evaluate_expression("2^10000", "Fraction").result
        assert len(result) == 3011
        assert result.startswith("1995063116")

    @pytest.mark.parametrize(
        "expression",
        [
            "(10^10000)^10000",
            "(2^3000)^5",
            "2^10000 * 2^10000",
            "(1/3)^10000",
            "1e99999999",
        ],
    )
    def test_oversized_results_are_rejected_early(self, expression):
        with pytest.raises(MathEvaluationException) as exc_info:
            evaluate_expression(expression, "Fraction")
        assert "too large" in exc_info.value.message
        assert "4300" not in exc_info.value.message


class TestRoundDigits:
    @pytest.mark.parametrize("mode", ["number", "BigNumber", "Fraction"])
    def test_huge_ndigits_is_rejected(self, mode):
        with pytest.raises(MathEvaluationException) as exc_info:
            evaluate_expression("round(1, 100000000)", mode)
        assert "digits out of range" in exc_info.value.message

    def test_fraction_round(self):
        assert evaluate_expression("round(2/3, 2)", "Fraction").result == "67/100"
        assert evaluate_expression("round(-5/2)", "Fraction").result == "-3"


class TestRejections:
    @pytest.mark.parametrize(
        "expression",
        [
            "__import__('os').system('ls')",
            "open('x')",
            "x + 1",
            "(lambda: 1)()",
            "[1, 2]",
            "1 if 1 else 2",
            "sqrt(x=4)",
            "abs(1, 2)",
            "1 +",
            "'text'",
            "True + 1",
            "2 ** 100000",
        ],
    )
    def test_rejected(self, expression):
        with pytest.raises(MathEvaluationException) as exc_info:
            evaluate_expression(expression)
        assert exc_info.value.error_code == "VALIDATION_ERROR"

    @pytest.mark.parametrize("mode", ["number", "BigNumber", "Fraction"])
    def test_division_by_zero(self, mode):
        with pytest.raises(MathEvaluationException):
            evaluate_expression("1/0", mode)

    def test_domain_errors(self):
        with pytest.raises(MathEvaluationException):
            evaluate_expression("ln(-1)")
        with pytest.raises(MathEvaluationException):
            evaluate_expression("sqrt(-1)", "number")
        with pytest.raises(MathEvaluationException):
            evaluate_expression("10.0 ** 400", "number")

    @pytest.mark.parametrize("precision", [15, 257, 0])
    def test_precision_range(self, precision):
        with pytest.raises(MathEvaluationException):
            evaluate_expression("1+1", "BigNumber", precision)

    def test_unknown_mode(self):
        with pytest.raises(MathEvaluationException):
            evaluate_expression("1+1", "complex")

    def test_empty(self):
        with pytest.raises(MathEvaluationException):
            evaluate_expression("   ")
