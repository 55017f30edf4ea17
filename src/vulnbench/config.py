"""Run configuration."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .bindings import ENGINES, PYDANTIC
from .codecs import CODECS
from .errors import ConfigurationError
from .fixtures import DEFAULT_DATA_DIR
from .harness import DEFAULT_ITERATIONS


@dataclass
class BenchmarkConfig:
    """Settings for one benchmark run.

    Attributes:
        data_dir: Directory holding debian_vulns.{json,yaml,xml}.
        iterations: Number of measured iterations.
        engine: Binding engine, "pydantic" or "marshmallow".
        formats: Formats to benchmark.
        log_level: Logging level name.
    """

    data_dir: Path = DEFAULT_DATA_DIR
    iterations: int = DEFAULT_ITERATIONS
    engine: str = PYDANTIC
    formats: tuple[str, ...] = field(default_factory=lambda: tuple(CODECS))
    log_level: str = "INFO"

    def validate(self) -> None:
        """Raise ConfigurationError if any setting is unusable."""
        if self.iterations < 1:
            raise ConfigurationError(f"iterations must be at least 1, got {self.iterations}")
        if self.engine not in ENGINES:
            raise ConfigurationError(
                f"unknown engine {self.engine!r}; expected one of {', '.join(ENGINES)}"
            )
        if not self.formats:
            raise ConfigurationError("at least one format is required")
        unknown = [fmt for fmt in self.formats if fmt not in CODECS]
        if unknown:
            raise ConfigurationError(f"unknown formats: {', '.join(unknown)}")
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ConfigurationError(f"unknown log level {self.log_level!r}")

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> BenchmarkConfig:
        """Build a config from parsed CLI arguments; call validate() before use."""
        if args.verbose:
            log_level = "DEBUG"
        elif args.quiet:
            log_level = "WARNING"
        else:
            log_level = "INFO"

        formats = tuple(args.format) if args.format else tuple(CODECS)
        return cls(
            data_dir=Path(args.data_dir) if args.data_dir else DEFAULT_DATA_DIR,
            iterations=args.iterations,
            engine=args.engine,
            formats=formats,
            log_level=log_level,
        )
