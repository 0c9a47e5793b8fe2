"""Arithmetic and tolerant comparison on the extended real line.

The operations here never raise for infinite or degenerate operands: the
indeterminate forms get fixed values (``inf - inf == 0``, ``inf * 0 == 0``,
``0 / 0 == 0`` and so on), as the interval solver relies on.
"""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass

__all__ = [
    "MAX_REAL",
    "MAX_REAL_DIV_2",
    "Tolerance",
    "DEFAULT_TOLERANCE",
    "compare",
    "is_pos_inf",
    "is_neg_inf",
    "add",
    "sub",
    "mul",
    "div",
    "power",
    "root",
    "exp_base",
    "log_base",
    "sine",
    "cosine",
    "tangent",
]

# Below this magnitude consecutive doubles differ by less than 1.0.
MAX_REAL = 999999999999999.0
# A value roughly halfway (in representation density) between 0 and MAX_REAL.
MAX_REAL_DIV_2 = 999999999.0

_OPERATORS = frozenset({"<", "<=", "==", ">=", ">", "!="})


@dataclass(frozen=True)
class Tolerance:
    """Settings for comparing floating point numbers.

    Two finite numbers are equal when their absolute difference is at most
    ``epsilon`` or, if ``relative_for_large`` is set, at most
    ``epsilon_rel`` times the larger magnitude.
    """

    epsilon: float = sys.float_info.epsilon
    epsilon_rel: float = sys.float_info.epsilon
    relative_for_large: bool = True


DEFAULT_TOLERANCE = Tolerance()


def is_pos_inf(x: float) -> bool:
    """Return True when ``x`` is positive infinity."""
    return math.isinf(x) and x > 0


def is_neg_inf(x: float) -> bool:
    """Return True when ``x`` is negative infinity."""
    return math.isinf(x) and x < 0


def _ieee_div(x: float, y: float) -> float:
    """Divide with IEEE semantics for a zero divisor."""
    if y != 0:
        return x / y
    if math.isnan(x) or math.isnan(y) or x == 0:
        return math.nan
    return math.copysign(math.inf, x) * math.copysign(1.0, y)


def _is_odd_integer(y: float) -> bool:
    return math.isfinite(y) and y == math.floor(y) and int(y) % 2 == 1


def _ieee_pow(x: float, y: float) -> float:
    """Raise ``x`` to ``y`` returning infinities and NaN instead of raising."""
    try:
        return math.pow(x, y)
    except OverflowError:
        if x < 0 and _is_odd_integer(y):
            return -math.inf
        return math.inf
    except ValueError:
        if x == 0 and y < 0:
            if _is_odd_integer(y):
                return math.copysign(math.inf, x)
            return math.inf
        return math.nan


def _ieee_log(x: float) -> float:
    if math.isnan(x) or x < 0:
        return math.nan
    if x == 0:
        return -math.inf
    return math.log(x)


def _nearly_equal(x: float, y: float, tolerance: Tolerance) -> bool:
    diff = abs(x - y)
    if diff <= tolerance.epsilon:
        return True
    if tolerance.relative_for_large:
        larger = max(abs(x), abs(y))
        return diff <= larger * tolerance.epsilon_rel
    return False


def _compare_infinite(x: float, op: str, y: float) -> bool:
    x_neg, x_pos = is_neg_inf(x), is_pos_inf(x)
    y_neg = is_neg_inf(y)
    y_pos = is_pos_inf(y)
    if op == "<":
        if x_neg:
            return not y_neg
        if x_pos or y_neg:
            return False
        return True
    if op == ">":
        if x_neg:
            return False
        if x_pos:
            return not y_pos
        return y_neg
    if op == "==":
        if x_neg:
            return y_neg
        if x_pos:
            return y_pos
        return False
    if x_neg:
        return not y_neg
    if x_pos:
        return not y_pos
    return True


def compare(x: float, op: str, y: float, tolerance: Tolerance = DEFAULT_TOLERANCE) -> bool:
    """Compare ``x`` and ``y`` with ``op`` allowing for rounding error.

    ``op`` is one of ``<``, ``<=``, ``==``, ``>=``, ``>`` and ``!=``.
    Infinities compare exactly; finite values use ``tolerance``.
    """
    if op not in _OPERATORS:
        raise ValueError(f"unknown comparison operator {op!r}")
    if op == "<=":
        return compare(x, "<", y, tolerance) or compare(x, "==", y, tolerance)
    if op == ">=":
        return compare(x, ">", y, tolerance) or compare(x, "==", y, tolerance)

    if math.isinf(x) or math.isinf(y):
        return _compare_infinite(x, op, y)

    equal = _nearly_equal(x, y, tolerance)
    if op == "<":
        return not equal and x < y
    if op == ">":
        return not equal and x > y
    if op == "==":
        return equal
    return not equal


def add(x: float, y: float) -> float:
    """Sum of ``x`` and ``y``; opposite infinities give 0."""
    if (is_neg_inf(x) and is_pos_inf(y)) or (is_pos_inf(x) and is_neg_inf(y)):
        return 0.0
    return x + y


def sub(x: float, y: float) -> float:
    """Difference ``x - y``; equal infinities give 0."""
    if (is_neg_inf(x) and is_neg_inf(y)) or (is_pos_inf(x) and is_pos_inf(y)):
        return 0.0
    return x - y


def mul(x: float, y: float, tolerance: Tolerance = DEFAULT_TOLERANCE) -> float:
    """Product of ``x`` and ``y``; an infinity times (nearly) zero gives 0."""
    if math.isinf(x) and compare(y, "==", 0.0, tolerance):
        return 0.0
    if math.isinf(y) and compare(x, "==", 0.0, tolerance):
        return 0.0
    return x * y


def div(x: float, y: float, tolerance: Tolerance = DEFAULT_TOLERANCE) -> float:
    """Quotient ``x / y``; a (nearly) zero numerator or infinite divisor gives 0.

    Note that ``inf / inf`` is therefore 0 as well.
    """
    if compare(x, "==", 0.0, tolerance) or math.isinf(y):
        return 0.0
    return _ieee_div(x, y)


def power(x: float, n: int) -> float:
    """``x`` raised to the integer ``n``."""
    return _ieee_pow(x, float(n))


def root(x: float, n: int, tolerance: Tolerance = DEFAULT_TOLERANCE) -> float:
    """The ``n``-th root of ``x``; odd roots of negative numbers are real."""
    exponent = 1.0 / n if n else math.inf
    if compare(x, "<", 0.0, tolerance) and n % 2:
        return -_ieee_pow(-x, exponent)
    return _ieee_pow(x, exponent)


def exp_base(base: float, x: float) -> float:
    """``base`` raised to ``x``, with exact limits at the infinities."""
    if base > 1 and is_pos_inf(x):
        return math.inf
    if base > 1 and is_neg_inf(x):
        return 0.0
    if base < 1 and is_pos_inf(x):
        return 0.0
    if base < 1 and is_neg_inf(x):
        return math.inf
    return _ieee_pow(base, x)


def log_base(base: float, x: float, tolerance: Tolerance = DEFAULT_TOLERANCE) -> float:
    """Logarithm of ``x`` in ``base``, with exact limits at 0 and infinity."""
    if base > 1 and is_pos_inf(x):
        return math.inf
    if base > 1 and compare(x, "==", 0.0, tolerance):
        return -math.inf
    if base < 1 and is_pos_inf(x):
        return -math.inf
    if base < 1 and compare(x, "==", 0.0, tolerance):
        return math.inf
    return _ieee_div(_ieee_log(x), _ieee_log(base))


def sine(x: float) -> float:
    """Sine of ``x``; 0 for infinite arguments."""
    if math.isinf(x):
        return 0.0
    return math.sin(x)


def cosine(x: float) -> float:
    """Cosine of ``x``; 0 for infinite arguments."""
    if math.isinf(x):
        return 0.0
    return math.cos(x)


def tangent(x: float) -> float:
    """Tangent of ``x``; 0 for infinite arguments."""
    if math.isinf(x):
        return 0.0
    return math.tan(x)