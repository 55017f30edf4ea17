"""Plain-text rendering of collected series."""

from __future__ import annotations

from collections.abc import Iterable

from .harness import Series


def _join(values: Iterable[int]) -> str:
    return ", ".join(str(v) for v in values)


def format_series(series: Series) -> list[str]:
    """
    Render one series as three lines of comma-joined milliseconds.

    Example:
        JSON annotated unmarshal: 2, 1, 1
        JSON annotated marshal: 0, 1, 0
        JSON annotated total: 2, 2, 1
    """
    return [
        f"{series.name} unmarshal: {_join(series.decode_ms)}",
        f"{series.name} marshal: {_join(series.encode_ms)}",
        f"{series.name} total: {_join(series.total_ms)}",
    ]


def format_report(series_list: Iterable[Series]) -> str:
    """Render every series in the order given (the adapter order)."""
    lines: list[str] = []
    for series in series_list:
        lines.extend(format_series(series))
    return "\n".join(lines)
