"""Tests for adapters, timings and the warm-up/measure runner."""

import gc
import logging

import pytest

from vulnbench.bindings import get_binding
from vulnbench.codecs import Codec, get_codec
from vulnbench.errors import ConfigurationError, DecodeError
from vulnbench.harness import (
    MIN_ENCODED_SIZE,
    Adapter,
    BenchmarkRunner,
    Series,
    Timing,
    build_adapters,
)
from vulnbench.models import VulnerabilityReport


class CountingCodec(Codec):
    """Codec stub that records calls and returns a fixed payload."""

    name = "stub"
    extension = "stub"

    def __init__(self, payload: bytes = b"0123456789abcdef", fail_on: int | None = None):
        self.payload = payload
        self.fail_on = fail_on
        self.decodes = 0
        self.encodes = 0

    def decode(self, raw, binding):
        self.decodes += 1
        if self.fail_on is not None and self.decodes == self.fail_on:
            raise DecodeError(self.name, "broken input")
        return object()

    def encode(self, obj, binding):
        self.encodes += 1
        return self.payload


@pytest.fixture
def binding():
    return get_binding("pydantic", VulnerabilityReport)


class TestTiming:
    def test_whole_milliseconds_are_floored(self):
        timing = Timing(decode_ns=2_500_000, encode_ns=1_999_999, size=20)
        assert timing.decode_ms == 2
        assert timing.encode_ms == 1

    def test_total_is_sum_of_reported_values(self):
        timing = Timing(decode_ns=1_900_000, encode_ns=1_900_000, size=20)
        # 3.8ms in total, but the lists must add up: 1 + 1
        assert timing.total_ms == 2

    def test_sub_millisecond_reports_zero(self):
        timing = Timing(decode_ns=999_999, encode_ns=0, size=20)
        assert (timing.decode_ms, timing.encode_ms, timing.total_ms) == (0, 0, 0)


class TestSeries:
    def test_lists(self):
        series = Series("JSON annotated", [
            Timing(decode_ns=3_000_000, encode_ns=1_000_000, size=50),
            Timing(decode_ns=2_000_000, encode_ns=4_000_000, size=50),
        ])
        assert series.decode_ms == [3, 2]
        assert series.encode_ms == [1, 4]
        assert series.total_ms == [4, 6]
        assert len(series) == 2


class TestAdapter:
    def test_run_on_real_codec(self, bundled, fmt, engine):
        binding = get_binding(engine, VulnerabilityReport)
        adapter = Adapter(get_codec(fmt), "annotated", binding, bundled[fmt])

        timing = adapter.run()

        assert isinstance(timing.decode_ms, int)
        assert isinstance(timing.encode_ms, int)
        assert timing.decode_ns >= 0
        assert timing.encode_ns >= 0
        assert timing.total_ms == timing.decode_ms + timing.encode_ms
        assert timing.size >= MIN_ENCODED_SIZE

    def test_name(self, binding):
        adapter = Adapter(get_codec("yaml"), "unannotated", binding, b"")
        assert adapter.name == "YAML unannotated"

    def test_short_output_is_logged_not_raised(self, binding, caplog):
        adapter = Adapter(CountingCodec(payload=b"{}"), "annotated", binding, b"{}")

        with caplog.at_level(logging.WARNING, logger="vulnbench.harness"):
            timing = adapter.run()

        assert timing.size == 2
        assert "STUB annotated encoded only 2 bytes" in caplog.text

    def test_normal_output_does_not_warn(self, binding, caplog):
        adapter = Adapter(CountingCodec(), "annotated", binding, b"{}")
        with caplog.at_level(logging.WARNING, logger="vulnbench.harness"):
            adapter.run()
        assert caplog.records == []

    def test_per_call_diagnostics_at_info(self, binding, caplog):
        adapter = Adapter(CountingCodec(), "annotated", binding, b"{}")
        with caplog.at_level(logging.INFO, logger="vulnbench.harness"):
            adapter.run()
        assert "STUB annotated unmarshal:" in caplog.text
        assert "STUB annotated marshal:" in caplog.text

    def test_decode_error_propagates(self, binding):
        codec = CountingCodec(fail_on=1)
        adapter = Adapter(codec, "annotated", binding, b"{}")
        with pytest.raises(DecodeError):
            adapter.run()
        assert codec.encodes == 0


class TestBuildAdapters:
    def test_annotated_first_then_fixed_format_order(self, bundled):
        adapters = build_adapters(bundled)
        assert [a.name for a in adapters] == [
            "JSON annotated",
            "YAML annotated",
            "XML annotated",
            "JSON unannotated",
            "YAML unannotated",
            "XML unannotated",
        ]

    def test_requested_order_is_ignored(self, bundled):
        adapters = build_adapters(bundled, formats=["xml", "json"])
        assert [a.name for a in adapters] == [
            "JSON annotated",
            "XML annotated",
            "JSON unannotated",
            "XML unannotated",
        ]

    def test_engine_is_applied(self, bundled):
        adapters = build_adapters(bundled, engine="marshmallow")
        assert {a.binding.engine for a in adapters} == {"marshmallow"}

    def test_fixture_bytes_are_shared(self, bundled):
        adapters = build_adapters(bundled, formats=["json"])
        assert adapters[0].raw is adapters[1].raw is bundled["json"]

    def test_missing_fixture(self, bundled):
        with pytest.raises(ConfigurationError, match="no fixture"):
            build_adapters({"json": bundled["json"]}, formats=["json", "yaml"])

    def test_unknown_format(self, bundled):
        with pytest.raises(ConfigurationError):
            build_adapters(bundled, formats=["toml"])


class TestBenchmarkRunner:
    def test_series_length_equals_iterations(self, bundled):
        runner = BenchmarkRunner(build_adapters(bundled), iterations=3)
        series = runner.run()

        assert len(series) == 6
        for s in series:
            assert len(s) == 3
            assert all(isinstance(v, int) and v >= 0 for v in s.decode_ms + s.encode_ms)
            assert s.total_ms == [d + e for d, e in zip(s.decode_ms, s.encode_ms)]

    def test_series_follow_adapter_order(self, bundled):
        adapters = build_adapters(bundled)
        series = BenchmarkRunner(adapters, iterations=1).run()
        assert [s.name for s in series] == [a.name for a in adapters]

    def test_warm_up_is_not_recorded(self, binding):
        codecs = [CountingCodec(), CountingCodec()]
        adapters = [Adapter(c, "annotated", binding, b"{}") for c in codecs]

        series = BenchmarkRunner(adapters, iterations=4).run()

        # One warm-up call plus one call per iteration
        assert [c.decodes for c in codecs] == [5, 5]
        assert [c.encodes for c in codecs] == [5, 5]
        assert [len(s) for s in series] == [4, 4]

    def test_failure_aborts_run(self, binding):
        good = CountingCodec()
        bad = CountingCodec(fail_on=3)
        adapters = [Adapter(good, "annotated", binding, b"{}"), Adapter(bad, "annotated", binding, b"{}")]
        runner = BenchmarkRunner(adapters, iterations=10)

        with pytest.raises(DecodeError):
            runner.run()

        # Warm-up plus two iterations for the good adapter, then the abort
        assert good.decodes == 3
        assert gc.isenabled()

    def test_failure_during_warm_up(self, binding):
        bad = CountingCodec(fail_on=1)
        runner = BenchmarkRunner([Adapter(bad, "annotated", binding, b"{}")], iterations=5)
        with pytest.raises(DecodeError):
            runner.run()
        assert bad.decodes == 1

    def test_progress_markers(self, binding, caplog):
        runner = BenchmarkRunner([Adapter(CountingCodec(), "annotated", binding, b"{}")], iterations=2)
        with caplog.at_level(logging.INFO, logger="vulnbench.harness"):
            runner.run()
        messages = [r.getMessage() for r in caplog.records]
        assert messages == ["Warm up", "Start", "Iteration 1/2", "Iteration 2/2", "FIN"]

    @pytest.mark.parametrize("iterations", [0, -1])
    def test_invalid_iterations(self, binding, iterations):
        with pytest.raises(ConfigurationError):
            BenchmarkRunner([Adapter(CountingCodec(), "annotated", binding, b"")], iterations=iterations)

    def test_no_adapters(self):
        with pytest.raises(ConfigurationError):
            BenchmarkRunner([], iterations=1)
