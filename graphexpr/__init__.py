from .errors import GraphExprError, CompileError, EvalError, GenerationCancelled
from .parser import parse_expression
from .printer import format_expression
from .compiler import CompiledExpression, compile_expression, evaluate, is_truthy
from .geometry import circle_coordinates, circle_layout
from .path import PathData
from .config import (
    GenerateOptions,
    get_generate_options,
    set_generate_options,
    RADIUS,
    CENTER,
    CANVAS_SIZE,
)
from .cache import GraphCache
from .generator import generate, edge_pairs, build_graph, path_from_pairs

__all__ = [
    'GraphExprError',
    'CompileError',
    'EvalError',
    'GenerationCancelled',
    'parse_expression',
    'format_expression',
    'CompiledExpression',
    'compile_expression',
    'evaluate',
    'is_truthy',
    'circle_coordinates',
    'circle_layout',
    'PathData',
    'GenerateOptions',
    'get_generate_options',
    'set_generate_options',
    'RADIUS',
    'CENTER',
    'CANVAS_SIZE',
    'GraphCache',
    'generate',
    'edge_pairs',
    'path_from_pairs',
    'build_graph',
]
