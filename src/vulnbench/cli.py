"""Command-line entry point for the round-trip benchmark.

Usage:
    # Run every format with the pydantic engine, 50 iterations
    vulnbench

    # Marshmallow engine, YAML and XML only, with debug logging
    vulnbench --engine marshmallow --format yaml --format xml --verbose

    # Use fixtures from another directory
    python -m vulnbench --data-dir ./fixtures --iterations 10
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence

from .bindings import ENGINES, PYDANTIC
from .codecs import CODECS
from .config import BenchmarkConfig
from .errors import BenchmarkError
from .fixtures import load_fixtures
from .harness import DEFAULT_ITERATIONS, BenchmarkRunner, build_adapters
from .reporting import format_report

logger = logging.getLogger("vulnbench")

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vulnbench",
        description="Benchmark JSON/YAML/XML round trips of a vulnerability report",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  vulnbench
  vulnbench --iterations 10 --format json
  vulnbench --engine marshmallow --verbose
        """,
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        help="Directory containing debian_vulns.{json,yaml,xml} (default: bundled fixtures)",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=DEFAULT_ITERATIONS,
        help=f"Measured iterations per adapter (default: {DEFAULT_ITERATIONS})",
    )
    parser.add_argument(
        "--engine",
        choices=ENGINES,
        default=PYDANTIC,
        help=f"Binding engine (default: {PYDANTIC})",
    )
    parser.add_argument(
        "--format",
        action="append",
        choices=list(CODECS),
        help="Format to benchmark; repeat for several (default: all)",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose",
        action="store_true",
        help="Debug logging (fixture loads, engine selection)",
    )
    verbosity.add_argument(
        "--quiet",
        action="store_true",
        help="Only log warnings and errors (hides per-call timings)",
    )
    return parser


def run(config: BenchmarkConfig) -> str:
    """Run the benchmark described by ``config`` and return the report text."""
    fixtures = load_fixtures(config.data_dir, config.formats)
    adapters = build_adapters(fixtures, engine=config.engine, formats=config.formats)
    logger.info(
        "Benchmarking %d adapters with the %s engine, %d iterations",
        len(adapters),
        config.engine,
        config.iterations,
    )
    runner = BenchmarkRunner(adapters, iterations=config.iterations)
    return format_report(runner.run())


def main(argv: Sequence[str] | None = None) -> int:
    """Run benchmarks from command line."""
    args = build_parser().parse_args(argv)
    config = BenchmarkConfig.from_args(args)
    logging.basicConfig(level=config.log_level, format=LOG_FORMAT)

    try:
        config.validate()
        report = run(config)
    except BenchmarkError as exc:
        logger.error("%s", exc)
        return 1

    print(report)
    return 0
