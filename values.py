"""
Runtime value model for the trace-table pseudocode dialect.

A Value is an int, float, str, bool or a list of Values. The dialect is
dynamically typed, so every operator coerces its operands here instead of
failing: arithmetic goes through ``to_number``, conditions through
``is_truthy`` and PRINT through ``format_value``.
"""
import math
from typing import Any, Optional

NAN = float('nan')
# Stands in for a sequence nested inside itself once frozen or printed
CYCLE = ...
# Integers past this magnitude are carried as floats so runaway loops
# saturate at Infinity instead of growing without bound.
MAX_EXACT_INTEGER = 2 ** 53


def is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_number(value: Any) -> bool:
    # bool is a subclass of int in Python
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_truthy(value: Any) -> bool:
    """false, 0, NaN, "" and unbound (None) are false; everything else is true."""
    if value is None or value is False:
        return False
    if is_number(value):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    if isinstance(value, str):
        return value != ""
    return True


def to_number(value: Any):
    if isinstance(value, bool):
        return int(value)
    if is_number(value):
        return value
    if value is None:
        return 0
    if isinstance(value, str):
        return _parse_number(value)
    if is_sequence(value):
        # [x] coerces like x; a sequence that contains itself does not unwrap
        seen = set()
        while is_sequence(value) and len(value) == 1 and id(value) not in seen:
            seen.add(id(value))
            value = value[0]
        if not is_sequence(value):
            return to_number(value)
        if not value:
            return 0
    return NAN


def _parse_number(text: str):
    text = text.strip()
    if not text:
        return 0
    # int() and float() accept digit separators such as "1_000"
    if '_' in text:
        return NAN
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return NAN
    # float() also accepts spellings such as "inf" and "nan"
    if any(c.isalpha() and c not in 'eE' for c in text):
        return NAN
    return number


def as_index(value: Any) -> Optional[int]:
    """Return *value* as a non-negative integral index, or None."""
    number = to_number(value)
    if isinstance(number, float):
        if math.isnan(number) or math.isinf(number) or not number.is_integer():
            return None
        number = int(number)
    if number < 0:
        return None
    return number


def format_value(value: Any, _path: frozenset = frozenset()) -> str:
    """Textual form used by PRINT, string concatenation and the trace table.

    A sequence reached again while it is still being rendered prints as
    ``[...]``.
    """
    if value is CYCLE:
        return '[...]'
    if value is True:
        return 'true'
    if value is False:
        return 'false'
    if value is None:
        return ''
    if isinstance(value, str):
        return value
    if is_sequence(value):
        if id(value) in _path:
            return '[...]'
        inner = _path | {id(value)}
        return '[' + ', '.join(format_value(v, inner) for v in value) + ']'
    if isinstance(value, float):
        return _format_float(value)
    return str(value)


def _format_float(value: float) -> str:
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'Infinity' if value > 0 else '-Infinity'
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return str(value)


# ── Operators ──

def add(left, right):
    if isinstance(left, str) or isinstance(right, str) or is_sequence(left) or is_sequence(right):
        return format_value(left) + format_value(right)
    return _normalize(to_number(left) + to_number(right))


def subtract(left, right):
    return _normalize(to_number(left) - to_number(right))


def multiply(left, right):
    return _normalize(to_number(left) * to_number(right))


def divide(left, right):
    a, b = to_number(left), to_number(right)
    if b == 0:
        if a == 0 or (isinstance(a, float) and math.isnan(a)):
            return NAN
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    try:
        return a / b
    except OverflowError:
        return math.inf if (a > 0) == (b > 0) else -math.inf


def remainder(left, right):
    """Remainder with the sign of the dividend; a zero divisor yields NaN."""
    a, b = to_number(left), to_number(right)
    if b == 0 or _non_finite(a):
        return NAN
    if _non_finite(b):
        return NAN if math.isnan(b) else a
    result = abs(a) % abs(b)
    return -result if a < 0 else result


def _normalize(number):
    if isinstance(number, int) and abs(number) > MAX_EXACT_INTEGER:
        try:
            return float(number)
        except OverflowError:
            return math.inf if number > 0 else -math.inf
    return number


def _non_finite(number) -> bool:
    return isinstance(number, float) and not math.isfinite(number)


def negate(value):
    return -to_number(value)


def strict_equals(left, right, _pairs: frozenset = frozenset()) -> bool:
    if is_sequence(left) or is_sequence(right):
        if not (is_sequence(left) and is_sequence(right)) or len(left) != len(right):
            return False
        pair = (id(left), id(right))
        # a pair already under comparison holds unless some other element differs
        if left is right or pair in _pairs:
            return True
        inner = _pairs | {pair}
        return all(strict_equals(a, b, inner) for a, b in zip(left, right))
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if is_number(left) and is_number(right):
        return left == right
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    return False


def _ordering_operands(left, right):
    if isinstance(left, str) and isinstance(right, str):
        return left, right
    return to_number(left), to_number(right)


def less_than(left, right) -> bool:
    a, b = _ordering_operands(left, right)
    return a < b


def greater_than(left, right) -> bool:
    a, b = _ordering_operands(left, right)
    return a > b


def less_equal(left, right) -> bool:
    a, b = _ordering_operands(left, right)
    return a <= b


def greater_equal(left, right) -> bool:
    a, b = _ordering_operands(left, right)
    return a >= b


ARITHMETIC_OPS = {
    '+': add,
    '-': subtract,
    '*': multiply,
    '/': divide,
    '%': remainder,
}

COMPARISON_OPS = {
    '==': strict_equals,
    '!=': lambda a, b: not strict_equals(a, b),
    '<': less_than,
    '>': greater_than,
    '<=': less_equal,
    '>=': greater_equal,
}
