import pytest

from graphexpr.lexer import tokenize, tokenize_line


def _types(text):
    return [tok[0] for tok in tokenize(text)]


def test_tokenize_divisibility_expression():
    assert _types("a % b == 0") == ['ID', 'PERCENT', 'ID', 'EQ', 'NUMBER']


def test_tokenize_prefers_two_character_operators():
    assert _types("a**2 <= b && a != b || !a") == [
        'ID', 'POW', 'NUMBER', 'LE', 'ID', 'AND', 'ID', 'NE', 'ID', 'OR', 'NOT', 'ID',
    ]


def test_tokenize_numbers_and_columns():
    tokens = tokenize_line("  1.5e3 + .25", 1)
    assert tokens == [
        ('NUMBER', '1.5e3', 1, 3),
        ('PLUS', '+', 1, 9),
        ('NUMBER', '.25', 1, 11),
    ]


def test_tokenize_tracks_lines():
    tokens = tokenize("a +\n  b")
    assert tokens[-1] == ('ID', 'b', 2, 3)


def test_unexpected_character_reports_column():
    with pytest.raises(SyntaxError) as excinfo:
        tokenize("a $ b")
    assert "[line 1, col 3] unexpected character: '$'" in str(excinfo.value)


@pytest.mark.parametrize("text", ["1.2.3", "2a", "1e"])
def test_malformed_numbers_are_rejected(text):
    with pytest.raises(SyntaxError) as excinfo:
        tokenize(text)
    assert "malformed number" in str(excinfo.value)
