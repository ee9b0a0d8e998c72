"""Compile expression text into a reusable, thread-safe evaluable form.

The parse tree is flattened once into a postfix program that runs against a
read-only mapping of variable bindings and works element-wise on numpy
scalars or arrays, so the same compiled artifact serves both single
evaluations and the vectorised pair sweep in :mod:`graphexpr.generator`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Sequence, Tuple

import numpy as np

from .ast import Binary, Call, Name, Node, Number, Unary, children, iter_nodes
from .errors import CompileError, EvalError
from .logging_utils import apply_debug_logging
from .parser import augment_syntax_error, error_location, parse_expression
from .printer import format_expression

logger = logging.getLogger(__name__)

FREE_VARIABLES = ('a', 'b')


def is_truthy(value):
    """Exact non-zero test; NaN is falsy. Works on scalars and arrays."""
    value = np.asarray(value, dtype=float)
    return (value != 0.0) & ~np.isnan(value)


def _as_float(mask):
    return np.asarray(mask, dtype=float)


BINARY_OPS: Dict[str, Callable[[Any, Any], Any]] = {
    '+': np.add,
    '-': np.subtract,
    '*': np.multiply,
    '/': np.true_divide,
    '%': np.fmod,
    '^': np.power,
    '==': lambda x, y: _as_float(np.equal(x, y)),
    '!=': lambda x, y: _as_float(np.not_equal(x, y)),
    '<': lambda x, y: _as_float(np.less(x, y)),
    '<=': lambda x, y: _as_float(np.less_equal(x, y)),
    '>': lambda x, y: _as_float(np.greater(x, y)),
    '>=': lambda x, y: _as_float(np.greater_equal(x, y)),
    '&&': lambda x, y: _as_float(is_truthy(x) & is_truthy(y)),
    '||': lambda x, y: _as_float(is_truthy(x) | is_truthy(y)),
}

UNARY_OPS: Dict[str, Callable[[Any], Any]] = {
    '-': np.negative,
    '+': np.positive,
    '!': lambda x: _as_float(~is_truthy(x)),
}

# name -> (implementation, arity)
FUNCTIONS: Dict[str, Tuple[Callable[..., Any], int]] = {
    'abs': (np.abs, 1),
    'floor': (np.floor, 1),
    'ceil': (np.ceil, 1),
    'sqrt': (np.sqrt, 1),
    'sin': (np.sin, 1),
    'cos': (np.cos, 1),
    'min': (np.minimum, 2),
    'max': (np.maximum, 2),
}


# A compiled program is a flat postfix sequence of instructions run against a
# value stack local to each evaluation.
PUSH = 'push'
LOAD = 'load'
APPLY = 'apply'
FAIL = 'fail'

Instruction = Tuple[str, Any, int]


def _check_arity(node: Call, arity: int) -> None:
    if len(node.args) != arity:
        raise SyntaxError(
            f"[line {node.span.line}, col {node.span.col}] {node.func}() takes "
            f"{arity} argument{'s' if arity != 1 else ''}, got {len(node.args)}"
        )


def _emit(node: Node) -> Instruction:
    if isinstance(node, Number):
        return (PUSH, np.float64(node.value), 0)
    if isinstance(node, Name):
        return (LOAD, node, 0)
    if isinstance(node, Unary):
        return (APPLY, UNARY_OPS[node.op], 1)
    if isinstance(node, Binary):
        return (APPLY, BINARY_OPS[node.op], 2)
    if isinstance(node, Call):
        entry = FUNCTIONS.get(node.func)
        if entry is None:
            return (FAIL, node, len(node.args))
        return (APPLY, entry[0], entry[1])
    raise TypeError(f"unsupported node {node!r}")


def build_program(tree: Node) -> Tuple[Instruction, ...]:
    """Flatten ``tree`` into postfix instructions.

    Arity errors on known functions surface here as ``SyntaxError`` so that
    they are reported at compile time.
    """
    program: List[Instruction] = []
    stack = [(tree, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded:
            program.append(_emit(node))
            continue
        if isinstance(node, Call) and node.func in FUNCTIONS:
            _check_arity(node, FUNCTIONS[node.func][1])
        stack.append((node, True))
        stack.extend((child, False) for child in reversed(children(node)))
    return tuple(program)


def run_program(program: Sequence[Instruction], env: Mapping[str, Any]):
    values: List[Any] = []
    for opcode, arg, nargs in program:
        if opcode == PUSH:
            values.append(arg)
        elif opcode == LOAD:
            try:
                values.append(env[arg.name])
            except KeyError:
                raise EvalError(
                    f"undefined variable {arg.name!r} (line {arg.span.line}, col {arg.span.col})",
                    name=arg.name,
                ) from None
        elif opcode == APPLY:
            if nargs == 1:
                values[-1] = arg(values[-1])
            else:
                operands = values[len(values) - nargs:]
                del values[len(values) - nargs:]
                values.append(arg(*operands))
        else:
            raise EvalError(
                f"undefined function {arg.func!r} (line {arg.span.line}, col {arg.span.col})",
                name=arg.func,
            )
    return values[-1]


@dataclass(frozen=True)
class CompiledExpression:
    """Parsed expression ready for repeated, concurrent evaluation."""

    text: str
    tree: Node = field(repr=False, compare=False)
    variables: FrozenSet[str] = field(compare=False)
    program: Tuple[Instruction, ...] = field(repr=False, compare=False)

    def __str__(self) -> str:
        return format_expression(self.tree)

    @property
    def unbound(self) -> FrozenSet[str]:
        """Identifiers that neither ``a`` nor ``b`` will bind."""
        return self.variables.difference(FREE_VARIABLES)

    def evaluate_array(self, bindings: Mapping[str, Any]) -> np.ndarray:
        """Evaluate element-wise over numpy arrays (broadcasting applies)."""
        with np.errstate(all='ignore'):
            return np.asarray(run_program(self.program, bindings), dtype=float)

    def __call__(self, bindings: Mapping[str, float]) -> float:
        return evaluate(self, bindings)


def compile_expression(text: str) -> CompiledExpression:
    """Parse ``text`` into a :class:`CompiledExpression`.

    Raises :class:`CompileError` with a caret snippet when the text is not a
    valid expression.
    """
    if not isinstance(text, str):
        raise TypeError(f"expression text must be str, got {type(text).__name__}")
    try:
        tree = parse_expression(text)
        program = build_program(tree)
    except SyntaxError as err:
        line, col = error_location(err)
        raise CompileError(augment_syntax_error(err, text), text=text, line=line, col=col) from None
    except RecursionError:
        raise CompileError("expression nested too deeply", text=text) from None
    variables = frozenset(node.name for node in iter_nodes(tree) if isinstance(node, Name))
    compiled = CompiledExpression(text=text, tree=tree, variables=variables, program=program)
    logger.info("Compiled expression %r as %s", text, compiled)
    if compiled.unbound:
        logger.warning("Expression references unbound names: %s", ", ".join(sorted(compiled.unbound)))
    return compiled


def evaluate(compiled: CompiledExpression, bindings: Mapping[str, float]) -> float:
    """Evaluate ``compiled`` once with scalar ``bindings`` such as ``{'a': 3, 'b': 5}``."""
    env = {name: np.float64(value) for name, value in bindings.items()}
    with np.errstate(all='ignore'):
        result = run_program(compiled.program, env)
    return float(result)


apply_debug_logging(globals(), logger=logger, skip={'is_truthy', 'run_program', 'build_program'})
