import re
from typing import List, Optional

from .ast import Binary, Call, Name, Node, Number, Span, Unary
from .lexer import Token, tokenize

_ERROR_LOC_RE = re.compile(r"\[line (\d+), col (\d+)\]")

COMPARISON_OPS = {
    'EQ': '==',
    'NE': '!=',
    'LT': '<',
    'LE': '<=',
    'GT': '>',
    'GE': '>=',
}
ADDITIVE_OPS = {'PLUS': '+', 'MINUS': '-'}
MULTIPLICATIVE_OPS = {'STAR': '*', 'SLASH': '/', 'PERCENT': '%'}
UNARY_OPS = {'MINUS': '-', 'PLUS': '+', 'NOT': '!'}

# each level of parentheses or call arguments costs one pass through the
# whole precedence chain on the Python stack
MAX_NESTING = 64


class Cursor:
    def __init__(self, tokens: List[Token]):
        self.toks = tokens
        self.i = 0
        self.depth = 0

    def end_location(self) -> str:
        if not self.toks:
            return "[line 1, col 1]"
        last = self.toks[-1]
        return f"[line {last[2]}, col {last[3] + len(last[1])}]"

    def enter(self, tok: Token) -> None:
        self.depth += 1
        if self.depth > MAX_NESTING:
            raise SyntaxError(
                f"[line {tok[2]}, col {tok[3]}] expression nested too deeply (more than {MAX_NESTING} levels)"
            )

    def leave(self) -> None:
        self.depth -= 1

    def peek(self) -> Optional[Token]:
        return self.toks[self.i] if self.i < len(self.toks) else None

    def peek_type(self) -> Optional[str]:
        t = self.peek()
        return t[0] if t else None

    def match(self, *types: str) -> Optional[Token]:
        if self.i < len(self.toks) and self.toks[self.i][0] in types:
            t = self.toks[self.i]
            self.i += 1
            return t
        return None

    def expect(self, *types: str, what: Optional[str] = None) -> Token:
        t = self.peek()
        if t and t[0] in types:
            self.i += 1
            return t
        want = what or '|'.join(types)
        if t:
            raise SyntaxError(f'[line {t[2]}, col {t[3]}] expected {want}, got {t[1]!r}')
        raise SyntaxError(f"{self.end_location()} unexpected end of expression: expected {want}")


def _span(tok: Token) -> Span:
    return Span(tok[2], tok[3])


def parse_or(cur: Cursor) -> Node:
    left = parse_and(cur)
    while True:
        tok = cur.match('OR')
        if not tok:
            return left
        left = Binary('||', left, parse_and(cur), _span(tok))


def parse_and(cur: Cursor) -> Node:
    left = parse_comparison(cur)
    while True:
        tok = cur.match('AND')
        if not tok:
            return left
        left = Binary('&&', left, parse_comparison(cur), _span(tok))


def parse_comparison(cur: Cursor) -> Node:
    left = parse_additive(cur)
    while True:
        tok = cur.match(*COMPARISON_OPS)
        if not tok:
            return left
        left = Binary(COMPARISON_OPS[tok[0]], left, parse_additive(cur), _span(tok))


def parse_additive(cur: Cursor) -> Node:
    left = parse_multiplicative(cur)
    while True:
        tok = cur.match(*ADDITIVE_OPS)
        if not tok:
            return left
        left = Binary(ADDITIVE_OPS[tok[0]], left, parse_multiplicative(cur), _span(tok))


def parse_multiplicative(cur: Cursor) -> Node:
    left = parse_unary(cur)
    while True:
        tok = cur.match(*MULTIPLICATIVE_OPS)
        if not tok:
            return left
        left = Binary(MULTIPLICATIVE_OPS[tok[0]], left, parse_unary(cur), _span(tok))


def _parse_prefix(cur: Cursor) -> List[Token]:
    prefix: List[Token] = []
    while True:
        tok = cur.match(*UNARY_OPS)
        if not tok:
            return prefix
        prefix.append(tok)


def _apply_prefix(prefix: List[Token], node: Node) -> Node:
    for tok in reversed(prefix):
        node = Unary(UNARY_OPS[tok[0]], node, _span(tok))
    return node


def parse_unary(cur: Cursor) -> Node:
    prefix = _parse_prefix(cur)
    return _apply_prefix(prefix, parse_power(cur))


def parse_power(cur: Cursor) -> Node:
    # right associative; an exponent may carry its own prefix operators,
    # so a ^ -b ^ c reads as a ^ (-(b ^ c))
    bases = [parse_primary(cur)]
    carets: List[Token] = []
    prefixes: List[List[Token]] = []
    while True:
        tok = cur.match('POW')
        if not tok:
            break
        carets.append(tok)
        prefixes.append(_parse_prefix(cur))
        bases.append(parse_primary(cur))
    node = bases[-1]
    for i in range(len(carets) - 1, -1, -1):
        node = Binary('^', bases[i], _apply_prefix(prefixes[i], node), _span(carets[i]))
    return node


def parse_primary(cur: Cursor) -> Node:
    t = cur.peek()
    if not t:
        raise SyntaxError(
            f'{cur.end_location()} unexpected end of expression: expected a number, name or "("'
        )
    if t[0] == 'NUMBER':
        cur.i += 1
        return Number(float(t[1]), t[1], _span(t))
    if t[0] == 'ID':
        cur.i += 1
        lp = cur.match('LPAREN')
        if lp:
            args: List[Node] = []
            if not cur.match('RPAREN'):
                cur.enter(lp)
                while True:
                    args.append(parse_or(cur))
                    if cur.match('RPAREN'):
                        break
                    cur.expect('COMMA', what="',' or ')'")
                cur.leave()
            return Call(t[1], tuple(args), _span(t))
        return Name(t[1], _span(t))
    if t[0] == 'LPAREN':
        cur.i += 1
        cur.enter(t)
        inner = parse_or(cur)
        cur.expect('RPAREN', what="')'")
        cur.leave()
        return inner
    raise SyntaxError(f'[line {t[2]}, col {t[3]}] unexpected token {t[1]!r}')


def parse_tokens(tokens: List[Token]) -> Node:
    cur = Cursor(tokens)
    if not tokens:
        raise SyntaxError('empty expression')
    node = parse_or(cur)
    trailing = cur.peek()
    if trailing:
        raise SyntaxError(f'[line {trailing[2]}, col {trailing[3]}] unexpected token {trailing[1]!r}')
    return node


def error_location(err: SyntaxError):
    match = _ERROR_LOC_RE.search(str(err))
    if not match:
        return None, None
    return int(match.group(1)), int(match.group(2))


def augment_syntax_error(err: SyntaxError, text: str) -> str:
    """Return the error message with a caret snippet pointing at the column."""
    message = str(err)
    line, col = error_location(err)
    if line is None:
        return message
    lines = text.split('\n')
    if line > len(lines):
        return message
    line_text = lines[line - 1]
    caret_line = " " * (max(col, 1) - 1) + "^"
    return f"{message}\n    {line_text.rstrip()}\n    {caret_line}"


def parse_expression(text: str) -> Node:
    """Parse ``text`` into an expression tree; raises ``SyntaxError``."""
    return parse_tokens(tokenize(text))
