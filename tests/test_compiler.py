import math
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from graphexpr import EvalError, compile_expression, evaluate, is_truthy


def _eval(text, a=1.0, b=2.0):
    return evaluate(compile_expression(text), {'a': a, 'b': b})


def test_divisibility_evaluates_to_zero_or_one():
    compiled = compile_expression("a % b == 0")
    assert evaluate(compiled, {'a': 15, 'b': 5}) == 1.0
    assert evaluate(compiled, {'a': 7, 'b': 4}) == 0.0


@pytest.mark.parametrize(
    "text, expected",
    [
        ("a + b * 3", 7.0),
        ("(a + b) / 4", 0.75),
        ("2 ^ 10", 1024.0),
        ("-b ^ 2", -4.0),
        ("7 % 3", 1.0),
        ("-7 % 3", -1.0),
        ("7 % -3", 1.0),
        ("a < b", 1.0),
        ("a >= b", 0.0),
        ("a != b", 1.0),
        ("!0", 1.0),
        ("!5", 0.0),
        ("2 && 0", 0.0),
        ("0 || 3", 1.0),
        ("abs(a - b)", 1.0),
        ("floor(2.7) + ceil(0.2)", 3.0),
        ("sqrt(16)", 4.0),
        ("min(a, b) + max(a, b)", 3.0),
        ("cos(0) + sin(0)", 1.0),
    ],
)
def test_arithmetic_semantics(text, expected):
    assert _eval(text) == pytest.approx(expected)


def test_division_by_zero_does_not_raise():
    assert _eval("a / 0") == math.inf
    assert _eval("-a / 0") == -math.inf
    assert math.isnan(_eval("0 / 0"))
    assert math.isnan(_eval("a % 0"))


def test_nan_is_falsy():
    assert not is_truthy(float('nan'))
    assert not is_truthy(_eval("0 / 0"))
    assert _eval("(0 / 0) || 0") == 0.0
    assert _eval("!(0 / 0)") == 1.0


def test_truthy_is_exact_nonzero():
    assert is_truthy(1e-300)
    assert is_truthy(-2.0)
    assert is_truthy(math.inf)
    assert not is_truthy(0.0)
    assert not is_truthy(-0.0)
    assert is_truthy(np.array([0.0, 3.0, np.nan])).tolist() == [False, True, False]


def test_undefined_variable_is_eval_error():
    compiled = compile_expression("a + c")
    assert compiled.unbound == frozenset({'c'})
    with pytest.raises(EvalError) as excinfo:
        evaluate(compiled, {'a': 1, 'b': 2})
    assert excinfo.value.name == 'c'
    assert "undefined variable 'c'" in str(excinfo.value)


def test_undefined_function_is_eval_error():
    compiled = compile_expression("gcd(a, b)")
    with pytest.raises(EvalError) as excinfo:
        evaluate(compiled, {'a': 4, 'b': 6})
    assert excinfo.value.name == 'gcd'


def test_variables_are_collected():
    compiled = compile_expression("a % b == 0 || sqrt(a) > b")
    assert compiled.variables == frozenset({'a', 'b'})
    assert compiled.unbound == frozenset()
    assert compile_expression("7").variables == frozenset()


def test_compiled_expression_is_callable_and_printable():
    compiled = compile_expression("a*b+1")
    assert compiled({'a': 2, 'b': 3}) == 7.0
    assert str(compiled) == "((a * b) + 1)"
    assert compiled.text == "a*b+1"


def test_evaluate_array_broadcasts_over_pairs():
    compiled = compile_expression("a % b == 0")
    a = np.arange(1, 5, dtype=float)[:, None]
    b = np.arange(1, 5, dtype=float)[None, :]
    result = compiled.evaluate_array({'a': a, 'b': b})
    assert result.shape == (4, 4)
    assert result[3, 1] == 1.0  # 4 % 2
    assert result[1, 3] == 0.0  # 2 % 4


def test_concurrent_evaluation_matches_sequential():
    compiled = compile_expression("(a * 7 + b * 3) % 5 < 2")
    pairs = [(a, b) for a in range(1, 40) for b in range(1, 40)]
    expected = [evaluate(compiled, {'a': a, 'b': b}) for a, b in pairs]

    def run(pair):
        a, b = pair
        return evaluate(compiled, {'a': a, 'b': b})

    with ThreadPoolExecutor(max_workers=8) as executor:
        results = list(executor.map(run, pairs))
    assert results == expected
