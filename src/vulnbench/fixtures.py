"""Fixture loading: one raw byte buffer per format, read once per run."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from .codecs import get_codec
from .errors import FixtureError

logger = logging.getLogger(__name__)

FIXTURE_STEM = "debian_vulns"

# Fixtures shipped with the package
DEFAULT_DATA_DIR = Path(__file__).parent / "data"


def fixture_path(data_dir: str | Path, fmt: str) -> Path:
    """Return the fixture path for a format, e.g. data/debian_vulns.yaml."""
    return Path(data_dir) / f"{FIXTURE_STEM}.{get_codec(fmt).extension}"


def load_fixture(path: str | Path) -> bytes:
    """
    Read a fixture file into memory.

    Raises:
        FixtureError: The file is missing or unreadable
    """
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise FixtureError(path, exc.strerror or str(exc)) from exc
    logger.debug("Loaded %s (%d bytes)", path, len(data))
    return data


def load_fixtures(data_dir: str | Path, formats: Iterable[str]) -> dict[str, bytes]:
    """Load the fixture for each format, keyed by format name."""
    return {fmt: load_fixture(fixture_path(data_dir, fmt)) for fmt in formats}
