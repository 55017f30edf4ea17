"""Timing harness: adapters, per-iteration timings and the benchmark runner.

Usage:
    fixtures = load_fixtures(DEFAULT_DATA_DIR, ["json", "yaml", "xml"])
    runner = BenchmarkRunner(build_adapters(fixtures), iterations=50)
    series = runner.run()
    print(format_report(series))

Every adapter call is timed in two non-overlapping windows: decode and
encode. Fixture loading happens before any window opens.
"""

from __future__ import annotations

import gc
import logging
import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from .bindings import PYDANTIC, Binding, get_binding
from .codecs import CODECS, Codec, get_codec
from .errors import ConfigurationError
from .models import VARIANTS

logger = logging.getLogger(__name__)

DEFAULT_ITERATIONS = 50

# Encoded output shorter than this is almost certainly an empty tree
MIN_ENCODED_SIZE = 10

_NS_PER_MS = 1_000_000


@dataclass(frozen=True)
class Timing:
    """Timings of one adapter call.

    Attributes:
        decode_ns: Decode duration in nanoseconds.
        encode_ns: Encode duration in nanoseconds.
        size: Length of the encoded output in bytes.
    """

    decode_ns: int
    encode_ns: int
    size: int

    @property
    def decode_ms(self) -> int:
        return self.decode_ns // _NS_PER_MS

    @property
    def encode_ms(self) -> int:
        return self.encode_ns // _NS_PER_MS

    @property
    def total_ms(self) -> int:
        """Sum of the whole-millisecond values, so reported lists add up."""
        return self.decode_ms + self.encode_ms


@dataclass
class Series:
    """Timings collected for one adapter, one entry per measured iteration."""

    name: str
    timings: list[Timing] = field(default_factory=list)

    @property
    def decode_ms(self) -> list[int]:
        return [t.decode_ms for t in self.timings]

    @property
    def encode_ms(self) -> list[int]:
        return [t.encode_ms for t in self.timings]

    @property
    def total_ms(self) -> list[int]:
        return [t.total_ms for t in self.timings]

    def __len__(self) -> int:
        return len(self.timings)


class Adapter:
    """One (format, variant) round trip over a fixed input buffer.

    The buffer is shared by every call and never modified; each call decodes
    it into a new tree, which is dropped once it has been re-encoded.
    """

    def __init__(self, codec: Codec, variant: str, binding: Binding, raw: bytes) -> None:
        self.codec = codec
        self.variant = variant
        self.binding = binding
        self.raw = raw

    @property
    def name(self) -> str:
        return f"{self.codec.name.upper()} {self.variant}"

    def run(self) -> Timing:
        """Decode then re-encode the input; errors propagate unchanged."""
        start = time.perf_counter_ns()
        report = self.codec.decode(self.raw, self.binding)
        decode_ns = time.perf_counter_ns() - start

        start = time.perf_counter_ns()
        payload = self.codec.encode(report, self.binding)
        encode_ns = time.perf_counter_ns() - start

        timing = Timing(decode_ns=decode_ns, encode_ns=encode_ns, size=len(payload))
        logger.info("%s unmarshal: %dms", self.name, timing.decode_ms)
        logger.info("%s marshal: %dms", self.name, timing.encode_ms)

        if timing.size < MIN_ENCODED_SIZE:
            logger.warning("%s encoded only %d bytes", self.name, timing.size)

        return timing

    def __repr__(self) -> str:
        return f"Adapter({self.name!r}, {self.binding!r})"


def build_adapters(
    fixtures: Mapping[str, bytes],
    engine: str = PYDANTIC,
    formats: Iterable[str] | None = None,
) -> list[Adapter]:
    """
    Create one adapter per (format, variant) pair.

    Order is every format for the annotated variant, then every format for
    the unannotated variant; formats always follow the JSON, YAML, XML order
    regardless of the order requested.

    Args:
        fixtures: Raw fixture bytes keyed by format name.
        engine: Binding engine name.
        formats: Formats to include (default: every format in ``fixtures``).

    Returns:
        Adapters in measurement and report order.
    """
    wanted = set(fixtures if formats is None else formats)
    for fmt in wanted:
        get_codec(fmt)
        if fmt not in fixtures:
            raise ConfigurationError(f"no fixture loaded for format {fmt!r}")

    adapters = []
    for variant, model in VARIANTS.items():
        binding = get_binding(engine, model)
        for fmt, codec in CODECS.items():
            if fmt in wanted:
                adapters.append(Adapter(codec, variant, binding, fixtures[fmt]))
    return adapters


class BenchmarkRunner:
    """Warm-up pass followed by a fixed number of measured iterations.

    Usage:
        runner = BenchmarkRunner(adapters, iterations=50)
        series = runner.run()
    """

    def __init__(self, adapters: list[Adapter], iterations: int = DEFAULT_ITERATIONS) -> None:
        if iterations < 1:
            raise ConfigurationError(f"iterations must be at least 1, got {iterations}")
        if not adapters:
            raise ConfigurationError("no adapters to run")
        self.adapters = adapters
        self.iterations = iterations

    def warm_up(self) -> None:
        """Call every adapter once and discard the timings."""
        logger.info("Warm up")
        for adapter in self.adapters:
            adapter.run()

    def measure(self) -> list[Series]:
        """Run the measured iterations and return one series per adapter."""
        logger.info("Start")
        series = [Series(adapter.name) for adapter in self.adapters]

        # Force garbage collection before measurement
        gc.collect()
        gc.disable()

        try:
            for i in range(1, self.iterations + 1):
                for adapter, adapter_series in zip(self.adapters, series):
                    adapter_series.timings.append(adapter.run())
                logger.info("Iteration %d/%d", i, self.iterations)
        finally:
            gc.enable()

        logger.info("FIN")
        return series

    def run(self) -> list[Series]:
        self.warm_up()
        return self.measure()
