import math

import pytest

from evaluator import Evaluator, evaluate_source
from lexer import tokenize
from values import format_value, is_truthy, to_number
from variable_store import VariableStore


@pytest.fixture
def store():
    return VariableStore({'items': [5, 3, 8], 'x': 5, 'name': "Ada", 'flag': True})


# ── Precedence ──

def test_multiplication_binds_tighter_than_addition():
    assert evaluate_source("2 + 3 * 4") == 14

def test_parentheses_override_precedence():
    assert evaluate_source("(2 + 3) * 4") == 20

def test_not_applies_to_whole_comparison():
    assert evaluate_source("NOT 1 == 1") is False
    assert evaluate_source("NOT 1 == 2") is True

def test_and_binds_tighter_than_or():
    assert evaluate_source("true OR false AND false") is True
    assert evaluate_source("(true OR false) AND false") is False

def test_left_associativity():
    assert evaluate_source("10 - 4 - 3") == 3
    assert evaluate_source("24 / 4 / 2") == 3

def test_unary_minus():
    assert evaluate_source("-2 * 3") == -6
    assert evaluate_source("- -4") == 4
    assert evaluate_source("3 - -1") == 4

def test_comparison_below_arithmetic():
    assert evaluate_source("1 + 1 == 2") is True
    assert evaluate_source("3 > 2 AND 2 > 1") is True


# ── + overload and arithmetic ──

def test_string_concatenation():
    assert evaluate_source('"Hello " + "World"') == "Hello World"

def test_numeric_addition():
    assert evaluate_source("1 + 2") == 3

def test_mixed_concatenation_uses_textual_form():
    assert evaluate_source('"Count: " + 5') == "Count: 5"
    assert evaluate_source('5 + "!"') == "5!"
    assert evaluate_source('"a" + true') == "atrue"
    assert evaluate_source('"half " + 0.5') == "half 0.5"
    assert evaluate_source('"list: " + [1, 2]') == "list: [1, 2]"

def test_other_operators_coerce_to_number():
    assert evaluate_source('"6" * 2') == 12
    assert evaluate_source('true + 1') == 2
    assert math.isnan(evaluate_source('"abc" - 1'))

def test_division_and_remainder():
    assert evaluate_source("7 / 2") == 3.5
    assert evaluate_source("7 % 3") == 1
    assert evaluate_source("-7 % 3") == -1
    assert evaluate_source("7.5 % 2") == 1.5

def test_division_by_zero_does_not_raise():
    assert evaluate_source("1 / 0") == math.inf
    assert evaluate_source("-1 / 0") == -math.inf
    assert math.isnan(evaluate_source("0 / 0"))
    assert math.isnan(evaluate_source("5 % 0"))


# ── Comparisons ──

def test_equality_is_strict():
    assert evaluate_source("1 == true") is False
    assert evaluate_source('"1" == 1') is False
    assert evaluate_source("2 == 2.0") is True
    assert evaluate_source('"a" != "b"') is True
    assert evaluate_source("[1, 2] == [1, 2]") is True
    assert evaluate_source("[1, 2] == [2, 1]") is False

def test_ordering():
    assert evaluate_source('"apple" < "banana"') is True
    assert evaluate_source('"10" > 9') is True
    assert evaluate_source("3 >= 3") is True
    assert evaluate_source("3 <= 2") is False


# ── Boolean operators and truthiness ──

def test_boolean_operators_return_booleans():
    assert evaluate_source("true AND false") is False
    assert evaluate_source("false OR 3") is True
    assert evaluate_source('NOT ""') is True
    assert evaluate_source("NOT 0") is True
    assert evaluate_source("NOT NOT 7") is True

def test_truthiness_rules():
    assert not is_truthy(False)
    assert not is_truthy(0)
    assert not is_truthy(0.0)
    assert not is_truthy("")
    assert not is_truthy(None)
    assert not is_truthy(float('nan'))
    assert is_truthy("0")
    assert is_truthy([])
    assert is_truthy(-1)


# ── Variables and sequences ──

def test_unbound_identifier_is_zero(store):
    assert evaluate_source("missing", store) == 0
    assert evaluate_source("missing + 1", store) == 1
    assert evaluate_source("NOT missing", store) is True

def test_variable_lookup(store):
    assert evaluate_source("x * 2", store) == 10
    assert evaluate_source('"Hi " + name', store) == "Hi Ada"
    assert evaluate_source("flag AND x > 1", store) is True

def test_indexed_access(store):
    assert evaluate_source("items[2]", store) == 8
    assert evaluate_source("items[1 + 1]", store) == 8
    assert evaluate_source("items[x - 5]", store) == 5

def test_indexed_access_is_lenient(store):
    assert evaluate_source("items[10]", store) == 0
    assert evaluate_source("items[-1]", store) == 0
    assert evaluate_source("items[0.5]", store) == 0
    assert evaluate_source("x[0]", store) == 0
    assert evaluate_source("missing[0]", store) == 0

def test_array_literal_is_evaluated_eagerly(store):
    assert evaluate_source('[1, 2 + 3, "a", x]', store) == [1, 5, "a", 5]
    assert evaluate_source("[]", store) == []

def test_whole_sequence_value(store):
    assert evaluate_source("items", store) == [5, 3, 8]


# ── Malformed input never raises ──

def test_missing_closing_brackets_are_tolerated(store):
    assert evaluate_source("(1 + 2") == 3
    assert evaluate_source("[1, 2") == [1, 2]
    assert evaluate_source("items[1", store) == 3

def test_dangling_operator_and_stray_tokens():
    assert evaluate_source("1 +") == 1
    assert evaluate_source(")") == 0
    assert evaluate_source("") == 0

def test_evaluator_reads_from_token_list(store):
    evaluator = Evaluator(tokenize("x + 1"), store)
    assert evaluator.evaluate() == 6
    assert evaluator.pos == 3


# ── Textual form ──

def test_format_value():
    assert format_value(True) == "true"
    assert format_value(False) == "false"
    assert format_value(3.0) == "3"
    assert format_value(2.5) == "2.5"
    assert format_value(float('nan')) == "NaN"
    assert format_value(-math.inf) == "-Infinity"
    assert format_value([1, [2, "a"], True]) == "[1, [2, a], true]"
    assert format_value("text") == "text"

def test_to_number():
    assert to_number(" 42 ") == 42
    assert to_number("") == 0
    assert to_number([7]) == 7
    assert math.isnan(to_number("inf"))
    assert math.isnan(to_number([1, 2]))

def test_digit_separators_are_not_numeric():
    assert math.isnan(to_number("1_000"))
    assert math.isnan(evaluate_source('"1_0" * 2'))
    assert evaluate_source('"1_0" + 2') == "1_02"


# ── Self-containing sequences ──

def test_sequence_containing_itself(store):
    loop = [1]
    loop[0] = loop
    store.assign('loop', loop)
    assert format_value(loop) == "[[...]]"
    assert evaluate_source('"v: " + loop', store) == "v: [[...]]"
    assert math.isnan(to_number(loop))
    assert evaluate_source("loop == loop", store) is True
    assert evaluate_source("loop == [1]", store) is False

def test_shared_sequence_is_not_a_cycle():
    inner = [1]
    assert format_value([inner, inner]) == "[[1], [1]]"
