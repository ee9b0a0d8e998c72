import re
from typing import List, Tuple

Token = Tuple[str, str, int, int]  # (type, value, line, col)

# longest operators first
OPERATORS = [
    ('**', 'POW'),
    ('==', 'EQ'),
    ('!=', 'NE'),
    ('<=', 'LE'),
    ('>=', 'GE'),
    ('&&', 'AND'),
    ('||', 'OR'),
    ('+', 'PLUS'),
    ('-', 'MINUS'),
    ('*', 'STAR'),
    ('/', 'SLASH'),
    ('%', 'PERCENT'),
    ('^', 'POW'),
    ('<', 'LT'),
    ('>', 'GT'),
    ('!', 'NOT'),
    ('(', 'LPAREN'),
    (')', 'RPAREN'),
    (',', 'COMMA'),
]

WS = ' \t\r'

_id_re = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')
_num_re = re.compile(r'(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?')
_bad_num_tail_re = re.compile(r'[A-Za-z_.]')


def tokenize_line(s: str, line_no: int) -> List[Token]:
    tokens: List[Token] = []
    i = 0
    n = len(s)
    while i < n:
        ch = s[i]
        col = i + 1
        if ch in WS:
            i += 1
            continue
        m = _num_re.match(s, i)
        if m:
            end = m.end()
            if end < n and _bad_num_tail_re.match(s, end):
                raise SyntaxError(
                    f'[line {line_no}, col {col}] malformed number {s[i:end + 1]!r}'
                )
            tokens.append(('NUMBER', m.group(0), line_no, col))
            i = end
            continue
        m = _id_re.match(s, i)
        if m:
            tokens.append(('ID', m.group(0), line_no, col))
            i = m.end()
            continue
        for sym, kind in OPERATORS:
            if s.startswith(sym, i):
                tokens.append((kind, sym, line_no, col))
                i += len(sym)
                break
        else:
            raise SyntaxError(f'[line {line_no}, col {col}] unexpected character: {ch!r}')
    return tokens


def tokenize(text: str) -> List[Token]:
    tokens: List[Token] = []
    for i, raw in enumerate(text.split('\n'), start=1):
        tokens.extend(tokenize_line(raw, i))
    return tokens
