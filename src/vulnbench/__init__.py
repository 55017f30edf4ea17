"""
vulnbench: round-trip latency of JSON, YAML and XML on a vulnerability report.

The benchmark decodes a fixed Debian vulnerability report into model trees and
re-encodes it, timing each half separately. It compares models whose fields
declare their external names explicitly (annotated) with models whose
attribute names are used as-is (unannotated).

Core Components:
    VulnerabilityReport / PlainVulnerabilityReport: the two model variants
    JsonCodec, YamlCodec, XmlCodec: format codecs
    PydanticBinding, MarshmallowBinding: engines mapping primitives to models
    Adapter, BenchmarkRunner: one round trip, and the warm-up/measure loop
    format_report: plain-text rendering of collected timings

Basic Usage:
    >>> from vulnbench import BenchmarkRunner, build_adapters, format_report, load_fixtures
    >>> from vulnbench.fixtures import DEFAULT_DATA_DIR
    >>>
    >>> fixtures = load_fixtures(DEFAULT_DATA_DIR, ["json", "yaml", "xml"])
    >>> runner = BenchmarkRunner(build_adapters(fixtures), iterations=5)
    >>> print(format_report(runner.run()))  # doctest: +SKIP

Or from the shell:
    $ vulnbench --iterations 50 --engine marshmallow
"""

from .bindings import MarshmallowBinding, PydanticBinding, get_binding, schema_for
from .codecs import CODECS, JsonCodec, XmlCodec, YamlCodec, get_codec
from .config import BenchmarkConfig
from .errors import BenchmarkError, ConfigurationError, DecodeError, EncodeError, FixtureError
from .fixtures import load_fixture, load_fixtures
from .harness import Adapter, BenchmarkRunner, Series, Timing, build_adapters
from .models import (
    CVE,
    Package,
    PlainCVE,
    PlainPackage,
    PlainRelease,
    PlainVulnerabilityReport,
    Release,
    VulnerabilityReport,
)
from .reporting import format_report, format_series

from importlib.metadata import version as _version

__version__ = _version("vulnbench")
__all__ = [
    "CODECS",
    "CVE",
    "Adapter",
    "BenchmarkConfig",
    "BenchmarkError",
    "BenchmarkRunner",
    "ConfigurationError",
    "DecodeError",
    "EncodeError",
    "FixtureError",
    "JsonCodec",
    "MarshmallowBinding",
    "Package",
    "PlainCVE",
    "PlainPackage",
    "PlainRelease",
    "PlainVulnerabilityReport",
    "PydanticBinding",
    "Release",
    "Series",
    "Timing",
    "VulnerabilityReport",
    "XmlCodec",
    "YamlCodec",
    "build_adapters",
    "format_report",
    "format_series",
    "get_binding",
    "get_codec",
    "load_fixture",
    "load_fixtures",
    "schema_for",
]
