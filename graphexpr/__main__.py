import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from graphexpr import (
    CompileError,
    EvalError,
    GenerateOptions,
    circle_layout,
    compile_expression,
    edge_pairs,
    generate,
    path_from_pairs,
)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Draw the graph of an expression over points on a circle"
    )
    parser.add_argument("expression", help="Expression over the point indices a and b, e.g. 'a % b == 0'")
    parser.add_argument(
        "--points",
        type=int,
        default=15,
        help="Number of points on the circle (default: 15)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker threads for the pair sweep (default: executor default)",
    )
    parser.add_argument(
        "--chunk-rows",
        type=int,
        default=GenerateOptions.chunk_rows,
        help=f"Rows of the pair space per work item (default: {GenerateOptions.chunk_rows})",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    parser.add_argument(
        "--edges",
        action="store_true",
        help="Print the index pairs of every edge",
    )
    parser.add_argument(
        "--path-output",
        help="Write the SVG path data of the graph to the given file",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    if args.points <= 0:
        parser.error("--points must be positive")
    options = GenerateOptions(max_workers=args.workers, chunk_rows=args.chunk_rows)
    try:
        options.validate()
    except ValueError as exc:
        parser.error(str(exc))

    try:
        compiled = compile_expression(args.expression)
        if args.edges:
            pairs = edge_pairs(compiled, args.points, options=options)
            path = path_from_pairs(pairs, circle_layout(args.points))
        else:
            pairs = None
            path = generate(compiled, args.points, options=options)
    except CompileError as exc:
        logger.error("Invalid expression: %s", exc)
        return 1
    except EvalError as exc:
        logger.error("Evaluation failed: %s", exc)
        return 1

    print(f"Expression: {compiled}")
    print(f"Points: {args.points}")
    print(f"Segments: {len(path)}")
    if pairs is not None:
        print("Edges:")
        for a, b in pairs.tolist():
            print(f"  {a}-{b}")

    if args.path_output:
        output_path = Path(args.path_output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Writing path data to %s", output_path)
        output_path.write_text(path.to_svg_data(), encoding="utf-8")
        print(f"Path data written to {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
