"""Generation options and module-level defaults."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Optional, Tuple

RADIUS = 500.0
CENTER: Tuple[float, float] = (500.0, 500.0)
CANVAS_SIZE = 1000.0


@dataclass
class GenerateOptions:
    """Tuning knobs for :func:`graphexpr.generator.generate`.

    ``max_workers`` of ``None`` leaves the pool size to
    ``concurrent.futures.ThreadPoolExecutor``. Point counts below
    ``parallel_threshold`` are evaluated on the calling thread.
    """

    max_workers: Optional[int] = None
    chunk_rows: int = 64
    parallel_threshold: int = 256

    def validate(self) -> None:
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.chunk_rows < 1:
            raise ValueError(f"chunk_rows must be >= 1, got {self.chunk_rows}")
        if self.parallel_threshold < 0:
            raise ValueError(f"parallel_threshold must be >= 0, got {self.parallel_threshold}")


_GENERATE_OPTIONS = GenerateOptions()


def get_generate_options() -> GenerateOptions:
    return copy.deepcopy(_GENERATE_OPTIONS)


def set_generate_options(options: GenerateOptions) -> None:
    global _GENERATE_OPTIONS
    options.validate()
    _GENERATE_OPTIONS = copy.deepcopy(options)
