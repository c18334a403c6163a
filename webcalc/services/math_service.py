"""고정밀 수식 계산기

AST 화이트리스트 방식으로만 평가합니다 (eval 미사용).

Modes:
    number:    float
    BigNumber: decimal.Decimal (precision 유효 자릿수)
    Fraction:  fractions.Fraction (유리수 연산만 허용)
"""

from __future__ import annotations

import ast
import math
import operator
from dataclasses import asdict, dataclass
from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP, Decimal, localcontext
from enum import Enum
from fractions import Fraction
from typing import Any, Callable, Dict, Union

from webcalc.core.exceptions import MathEvaluationException
from webcalc.core.logging import logger, sanitize_for_log


MIN_PRECISION = 16
MAX_PRECISION = 256
DEFAULT_PRECISION = 64

MAX_EXPRESSION_LENGTH = 1000
MAX_EXPONENT = 10000
# Fraction 모드 중간값의 분자/분모 자릿수 상한 (int → str 변환 한도 4300보다 작게)
MAX_RESULT_DIGITS = 4000
MAX_ROUND_DIGITS = MAX_PRECISION

Value = Union[float, Decimal, Fraction]


class MathMode(str, Enum):
    NUMBER = "number"
    BIGNUMBER = "BigNumber"
    FRACTION = "Fraction"


@dataclass
class MathResult:
    mode: str
    result: str
    value_type: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _decimal_pi() -> Decimal:
    """현재 context 정밀도의 pi"""
    with localcontext() as ctx:
        ctx.prec += 2
        three = Decimal(3)
        lasts, t, s, n, na, d, da = 0, three, 3, 1, 0, 0, 24
        while s != lasts:
            lasts = s
            n, na = n + na, na + 8
            d, da = d + da, da + 32
            t = (t * n) / d
            s += t
    return +s


def _round_digits(ndigits: Value) -> int:
    if abs(ndigits) > MAX_ROUND_DIGITS:
        raise ValueError(f"round() digits out of range (max {MAX_ROUND_DIGITS})")
    return int(ndigits)


def _fraction_digits(x: Fraction) -> float:
    """분자/분모 중 큰 쪽의 log10 (대략적인 10진 자릿수)"""
    return math.log10(max(abs(x.numerator), x.denominator))


def _decimal_round(x: Decimal, ndigits: Decimal = Decimal(0)) -> Decimal:
    return x.quantize(Decimal(1).scaleb(-_round_digits(ndigits)), rounding=ROUND_HALF_UP)


def _float_round(x: float, ndigits: float = 0) -> float:
    # 0.5는 0에서 멀어지는 방향으로 반올림
    factor = 10.0 ** _round_digits(ndigits)
    return math.copysign(math.floor(abs(x) * factor + 0.5), x) / factor


def _not_rational(name: str) -> Callable[..., Fraction]:
    def _raise(*args):
        raise ArithmeticError(f"{name}() has no exact rational result")

    return _raise


def _fraction_round(x: Fraction, ndigits: Fraction = Fraction(0)) -> Fraction:
    factor = Fraction(10) ** _round_digits(ndigits)
    scaled = abs(x) * factor
    rounded = Fraction(math.floor(scaled + Fraction(1, 2)))
    return (rounded if x >= 0 else -rounded) / factor


_FLOAT_FUNCTIONS: Dict[str, Callable[..., float]] = {
    "sqrt": math.sqrt,
    "abs": abs,
    "exp": math.exp,
    "ln": math.log,
    "log": math.log,
    "log10": math.log10,
    "floor": lambda x: float(math.floor(x)),
    "ceil": lambda x: float(math.ceil(x)),
    "round": _float_round,
}

_DECIMAL_FUNCTIONS: Dict[str, Callable[..., Decimal]] = {
    "sqrt": lambda x: x.sqrt(),
    "abs": abs,
    "exp": lambda x: x.exp(),
    "ln": lambda x: x.ln(),
    "log": lambda x: x.ln(),
    "log10": lambda x: x.log10(),
    "floor": lambda x: x.to_integral_value(rounding=ROUND_FLOOR),
    "ceil": lambda x: x.to_integral_value(rounding=ROUND_CEILING),
    "round": _decimal_round,
}

_FRACTION_FUNCTIONS: Dict[str, Callable[..., Fraction]] = {
    "sqrt": _not_rational("sqrt"),
    "abs": abs,
    "exp": _not_rational("exp"),
    "ln": _not_rational("ln"),
    "log": _not_rational("log"),
    "log10": _not_rational("log10"),
    "floor": lambda x: Fraction(math.floor(x)),
    "ceil": lambda x: Fraction(math.ceil(x)),
    "round": _fraction_round,
}

_BIN_OPS: Dict[type, Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
}


class _Evaluator:
    """모드별 리터럴 변환/함수 테이블을 가진 AST 평가기"""

    def __init__(self, source: str, mode: MathMode):
        self.source = source
        self.mode = mode
        if mode is MathMode.NUMBER:
            self.functions = _FLOAT_FUNCTIONS
        elif mode is MathMode.BIGNUMBER:
            self.functions = _DECIMAL_FUNCTIONS
        else:
            self.functions = _FRACTION_FUNCTIONS

    def literal(self, node: ast.Constant) -> Value:
        value = node.value
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"unsupported literal: {value!r}")

        if self.mode is MathMode.NUMBER:
            return float(value)

        # float 리터럴의 자릿수 손실을 피하려고 원문 텍스트를 사용
        text = ast.get_source_segment(self.source, node) or repr(value)
        text = text.replace("_", "")
        if self.mode is MathMode.BIGNUMBER:
            return +Decimal(text)
        exact = Decimal(text)
        if abs(exact.adjusted()) > MAX_RESULT_DIGITS or len(exact.as_tuple().digits) > MAX_RESULT_DIGITS:
            raise ValueError(f"literal too large (max {MAX_RESULT_DIGITS} digits)")
        return Fraction(exact)

    def constant(self, name: str) -> Value:
        if self.mode is MathMode.NUMBER:
            return {"pi": math.pi, "e": math.e}[name]
        if self.mode is MathMode.BIGNUMBER:
            return _decimal_pi() if name == "pi" else Decimal(1).exp()
        raise ArithmeticError(f"'{name}' is not a rational number")

    def power(self, base: Value, exponent: Value) -> Value:
        if abs(exponent) > MAX_EXPONENT:
            raise ValueError(f"exponent too large (max {MAX_EXPONENT})")
        if self.mode is MathMode.FRACTION:
            if exponent.denominator != 1:
                raise ArithmeticError("fractional exponent has no exact rational result")
            # 정확한 거듭제곱은 계산 전에 결과 크기를 추정해서 막습니다.
            if _fraction_digits(base) * abs(int(exponent)) > MAX_RESULT_DIGITS:
                raise ValueError(f"result too large (max {MAX_RESULT_DIGITS} digits)")
            return base ** int(exponent)
        return base ** exponent

    def visit(self, node: ast.AST) -> Value:
        value = self._visit(node)
        if self.mode is MathMode.FRACTION and _fraction_digits(value) > MAX_RESULT_DIGITS:
            raise ValueError(f"result too large (max {MAX_RESULT_DIGITS} digits)")
        return value

    def _visit(self, node: ast.AST) -> Value:
        if isinstance(node, ast.Expression):
            return self.visit(node.body)

        if isinstance(node, ast.Constant):
            return self.literal(node)

        if isinstance(node, ast.Name):
            if node.id not in ("pi", "e"):
                raise ValueError(f"unknown name: {node.id}")
            return self.constant(node.id)

        if isinstance(node, ast.UnaryOp):
            operand = self.visit(node.operand)
            if isinstance(node.op, ast.USub):
                return -operand
            if isinstance(node.op, ast.UAdd):
                return +operand
            raise ValueError(f"unsupported operator: {type(node.op).__name__}")

        if isinstance(node, ast.BinOp):
            left = self.visit(node.left)
            right = self.visit(node.right)
            if isinstance(node.op, ast.Pow):
                return self.power(left, right)
            op = _BIN_OPS.get(type(node.op))
            if op is None:
                raise ValueError(f"unsupported operator: {type(node.op).__name__}")
            return op(left, right)

        if isinstance(node, ast.Call):
            if not isinstance(node.func, ast.Name) or node.func.id not in self.functions:
                raise ValueError("unsupported function call")
            if node.keywords:
                raise ValueError("keyword arguments are not supported")
            args = [self.visit(arg) for arg in node.args]
            if not 1 <= len(args) <= (2 if node.func.id == "round" else 1):
                raise ValueError(f"wrong number of arguments for {node.func.id}()")
            return self.functions[node.func.id](*args)

        raise ValueError(f"unsupported syntax: {type(node).__name__}")


def _format_decimal(value: Decimal, precision: int) -> str:
    if not value.is_finite():
        raise ArithmeticError("result is not finite")
    value = value.normalize()
    if value.is_zero():
        return "0"
    if -7 <= value.adjusted() < precision:
        return format(value, "f")
    return str(value)


def _format_float(value: float) -> str:
    if not math.isfinite(value):
        raise ArithmeticError("result is not finite")
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def evaluate_expression(
    expression: str,
    mode: Union[MathMode, str] = MathMode.BIGNUMBER,
    precision: int = DEFAULT_PRECISION,
) -> MathResult:
    """수식 평가

    Args:
        expression: 수식 (`^`는 거듭제곱으로 해석)
        mode: number | BigNumber | Fraction
        precision: BigNumber 유효 자릿수 [16, 256]

    Raises:
        MathEvaluationException: 문법 오류, 허용되지 않은 이름/연산, 수학적 오류
    """
    try:
        mode = MathMode(mode)
    except ValueError:
        raise MathEvaluationException(expression, f"unknown mode: {mode}") from None

    if not MIN_PRECISION <= precision <= MAX_PRECISION:
        raise MathEvaluationException(
            expression, f"precision must be between {MIN_PRECISION} and {MAX_PRECISION}"
        )

    if not expression or not expression.strip():
        raise MathEvaluationException(expression or "", "expression is empty")
    if len(expression) > MAX_EXPRESSION_LENGTH:
        raise MathEvaluationException(expression[:50], f"expression too long (max {MAX_EXPRESSION_LENGTH})")

    source = expression.strip().replace("^", "**")
    try:
        tree = ast.parse(source, mode="eval")
    except SyntaxError as e:
        raise MathEvaluationException(expression, f"syntax error: {e.msg}") from e

    evaluator = _Evaluator(source, mode)
    try:
        with localcontext() as ctx:
            ctx.prec = precision
            value = evaluator.visit(tree)
            if mode is MathMode.NUMBER:
                result = _format_float(float(value))
            elif mode is MathMode.BIGNUMBER:
                result = _format_decimal(+value, precision)
            else:
                result = str(value)
    except (ValueError, TypeError) as e:
        raise MathEvaluationException(expression, str(e)) from e
    except ArithmeticError as e:
        # ZeroDivisionError, OverflowError, decimal.InvalidOperation 등
        reason = str(e) or type(e).__name__
        logger.debug(f"[MATH] Arithmetic error for '{sanitize_for_log(expression)}': {reason}")
        raise MathEvaluationException(expression, reason) from e

    return MathResult(mode=mode.value, result=result, value_type=mode.value)
