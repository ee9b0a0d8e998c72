"""Pairwise graph generation over the circle layout.

For every unordered pair ``a <= b`` of point indices in ``[1, N]`` the edge
exists iff ``f(a, b)`` or, failing that, ``f(b, a)`` is truthy. The pair space
is split into row chunks that are evaluated with numpy on worker threads and
concatenated in chunk order.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, List, Optional, TypeVar

import numpy as np

from .cache import GraphCache
from .compiler import CompiledExpression, compile_expression, is_truthy
from .config import GenerateOptions, get_generate_options
from .errors import GenerationCancelled
from .geometry import check_point_count, circle_layout
from .logging_utils import apply_debug_logging
from .path import PathData

logger = logging.getLogger(__name__)

T = TypeVar("T")


def chunk_rows(point_count: int, rows_per_chunk: int) -> List[np.ndarray]:
    """Split point indices ``1..N`` into consecutive row blocks."""
    return [
        np.arange(start, min(start + rows_per_chunk, point_count + 1), dtype=np.int64)
        for start in range(1, point_count + 1, rows_per_chunk)
    ]


def evaluate_chunk(compiled: CompiledExpression, rows: np.ndarray, point_count: int) -> np.ndarray:
    """Return the ``(k, 2)`` index pairs ``(a, b)``, ``a <= b``, with ``a`` in ``rows``."""
    cols = np.arange(1, point_count + 1, dtype=np.int64)
    a = rows.astype(float)[:, None]
    b = cols.astype(float)[None, :]
    shape = (rows.shape[0], cols.shape[0])

    forward = np.broadcast_to(is_truthy(compiled.evaluate_array({"a": a, "b": b})), shape)
    mask = forward.copy()
    pending = ~mask
    if pending.any():
        swapped = np.broadcast_to(is_truthy(compiled.evaluate_array({"a": b, "b": a})), shape)
        mask |= pending & swapped
    mask &= cols[None, :] >= rows[:, None]

    row_idx, col_idx = np.nonzero(mask)
    return np.stack([rows[row_idx], cols[col_idx]], axis=1)


def path_from_pairs(pairs: np.ndarray, layout: np.ndarray) -> PathData:
    """Segments from ``layout[a]`` to ``layout[b]`` for each index pair ``(a, b)``."""
    return PathData.from_points(layout[pairs[:, 0]], layout[pairs[:, 1]])


def _map_chunks(
    work: Callable[[np.ndarray], T],
    point_count: int,
    options: GenerateOptions,
    cancel: Optional[threading.Event],
) -> List[T]:
    chunks = chunk_rows(point_count, options.chunk_rows)

    def run(rows: np.ndarray) -> T:
        if cancel is not None and cancel.is_set():
            raise GenerationCancelled("generation cancelled")
        return work(rows)

    if point_count < options.parallel_threshold or len(chunks) == 1:
        return [run(rows) for rows in chunks]

    with ThreadPoolExecutor(max_workers=options.max_workers) as executor:
        futures: List[Future] = [executor.submit(run, rows) for rows in chunks]
        results: List[T] = []
        try:
            for future in futures:
                results.append(future.result())
        except BaseException:
            for future in futures:
                future.cancel()
            raise
    return results


def _resolve_options(options: Optional[GenerateOptions]) -> GenerateOptions:
    if options is None:
        return get_generate_options()
    options.validate()
    return options


def edge_pairs(
    compiled: CompiledExpression,
    point_count: int,
    *,
    options: Optional[GenerateOptions] = None,
    cancel: Optional[threading.Event] = None,
) -> np.ndarray:
    """Index pairs ``(a, b)`` with ``a <= b`` of every edge, as a ``(k, 2)`` array."""
    check_point_count(point_count)
    opts = _resolve_options(options)
    parts = _map_chunks(lambda rows: evaluate_chunk(compiled, rows, point_count), point_count, opts, cancel)
    return np.concatenate(parts, axis=0)


def generate(
    compiled: CompiledExpression,
    point_count: int,
    *,
    options: Optional[GenerateOptions] = None,
    cancel: Optional[threading.Event] = None,
) -> PathData:
    """Build the path data of the graph defined by ``compiled`` over ``point_count`` points.

    Any :class:`~graphexpr.errors.EvalError` aborts the whole generation. When
    ``cancel`` is set, remaining chunks are skipped and
    :class:`~graphexpr.errors.GenerationCancelled` is raised.
    """
    check_point_count(point_count)
    opts = _resolve_options(options)
    layout = circle_layout(point_count)
    chunks = -(-point_count // opts.chunk_rows)
    logger.info(
        "Generating graph for %s over %d points (%d pairs, %d chunk(s))",
        compiled,
        point_count,
        point_count * (point_count + 1) // 2,
        chunks,
    )
    started = time.perf_counter()

    def work(rows: np.ndarray) -> PathData:
        return path_from_pairs(evaluate_chunk(compiled, rows, point_count), layout)

    parts = _map_chunks(work, point_count, opts, cancel)
    path = PathData.concat(parts)
    logger.info("Generated %d segment(s) in %.3fs", len(path), time.perf_counter() - started)
    return path


def build_graph(
    text: str,
    point_count: int,
    *,
    options: Optional[GenerateOptions] = None,
    cancel: Optional[threading.Event] = None,
    cache: Optional[GraphCache] = None,
) -> PathData:
    """Compile ``text`` and generate its graph, consulting ``cache`` when given."""
    check_point_count(point_count)
    if cache is not None:
        cached = cache.get(text, point_count)
        if cached is not None:
            return cached
    compiled = compile_expression(text)
    path = generate(compiled, point_count, options=options, cancel=cancel)
    if cache is not None:
        cache.put(text, point_count, path)
    return path


apply_debug_logging(globals(), logger=logger, skip={"evaluate_chunk", "chunk_rows"})
