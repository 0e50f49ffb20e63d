from __future__ import annotations

import argparse
import logging
import sys

from .config import GenerationConfig
from .dxf_writer import write_dxf
from .mandala import Mandala
from .svg_writer import write_svg

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate a mandala drawing as SVG or DXF.")
    parser.add_argument("output", help="Path to the output file")
    parser.add_argument(
        "--size",
        type=float,
        nargs=2,
        metavar=("WIDTH", "HEIGHT"),
        default=(500.0, 500.0),
        help="Drawing size (default: 500 500)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible drawing")
    parser.add_argument(
        "--epochs",
        type=int,
        default=12,
        help="Number of generated epochs (default: 12)",
    )
    parser.add_argument(
        "--symmetry",
        type=float,
        default=0.5,
        help="Probability of a bilaterally symmetric segment (default: 0.5)",
    )
    parser.add_argument(
        "--detail",
        type=int,
        default=8,
        help="Vertices per random walk (default: 8)",
    )
    parser.add_argument(
        "--format",
        choices=("svg", "dxf"),
        default=None,
        help="Output format (default: from the output file extension, else svg)",
    )
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    return parser


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level), format="%(levelname)s:%(name)s:%(message)s")


def _output_format(output: str, requested: str | None) -> str:
    if requested:
        return requested
    return "dxf" if output.lower().endswith(".dxf") else "svg"


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)

    try:
        if args.epochs < 0:
            raise ValueError(f"--epochs must not be negative, got {args.epochs}")
        config = GenerationConfig(symmetry_probability=args.symmetry, detail=args.detail)
        mandala = Mandala((args.size[0], args.size[1]), seed=args.seed, config=config)
        for _ in range(args.epochs):
            mandala.generate_epoch()
        paths = mandala.render()
        if _output_format(args.output, args.format) == "dxf":
            write_dxf(args.output, paths)
        else:
            write_svg(args.output, paths, mandala.bounds)
    except Exception as exc:
        print(f"Generation failed: {exc}", file=sys.stderr)
        return 1
    logger.info("Generated %d epochs into %s", len(mandala.epochs), args.output)
    return 0
