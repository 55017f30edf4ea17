"""
Error types for the vulnbench harness.

Every error here is fatal to a benchmark run: a measurement is meaningless
once any adapter has failed, so nothing retries. The CLI catches
BenchmarkError once at the top and exits non-zero.

This module provides:
- BenchmarkError and its subclasses for each failure category
- Conversion of Pydantic and Marshmallow validation errors into DecodeError
"""

from __future__ import annotations

from typing import Any

from marshmallow.exceptions import ValidationError as MarshmallowValidationError
from pydantic import ValidationError as PydanticValidationError


class BenchmarkError(Exception):
    """Base class for every error that aborts a benchmark run."""


class ConfigurationError(BenchmarkError):
    """Invalid configuration: unknown format or engine, bad iteration count."""


class FixtureError(BenchmarkError):
    """A fixture file is missing or unreadable."""

    def __init__(self, path: Any, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"cannot read fixture {path}: {reason}")


class DecodeError(BenchmarkError):
    """
    Input could not be decoded into the target model tree.

    Covers both malformed input (syntax errors in the raw bytes) and schema
    mismatches (missing, unknown or mistyped fields).

    Attributes:
        fmt: Format name the input was decoded as
        messages: Dict of dotted field path -> error messages
    """

    def __init__(
        self,
        fmt: str,
        message: str,
        messages: dict[str, list[str]] | None = None,
    ) -> None:
        self.fmt = fmt
        self.messages = messages or {}
        detail = f"{message}: {self.messages}" if self.messages else message
        super().__init__(f"{fmt} decode failed: {detail}")


class EncodeError(BenchmarkError):
    """A decoded tree could not be serialized back to bytes."""

    def __init__(self, fmt: str, message: str) -> None:
        self.fmt = fmt
        super().__init__(f"{fmt} encode failed: {message}")


def build_error_path(loc: tuple[Any, ...]) -> str:
    """
    Build a dotted error path from Pydantic's location tuple.

    Handles collection indices like ("packages", 0, "cves") -> "packages.0.cves".

    Args:
        loc: Pydantic error location tuple

    Returns:
        Dotted path string
    """
    if len(loc) == 1:
        return str(loc[0])
    return ".".join(str(part) for part in loc)


def convert_pydantic_errors(
    fmt: str,
    pydantic_error: PydanticValidationError,
) -> DecodeError:
    """
    Convert a Pydantic ValidationError to DecodeError.

    Errors without a location (e.g. invalid JSON, wrong root type) are
    collected under "_schema".
    """
    errors: dict[str, list[str]] = {}

    for error in pydantic_error.errors():
        loc = error.get("loc", ())
        msg: str = error.get("msg", "Validation error")
        field_path = build_error_path(loc) if loc else "_schema"
        errors.setdefault(field_path, []).append(msg)

    return DecodeError(fmt, "invalid input", errors)


def _flatten_messages(
    messages: Any,
    prefix: str,
    out: dict[str, list[str]],
) -> None:
    if isinstance(messages, dict):
        for key, value in messages.items():
            path = f"{prefix}.{key}" if prefix else str(key)
            _flatten_messages(value, path, out)
    elif isinstance(messages, list):
        out.setdefault(prefix or "_schema", []).extend(str(m) for m in messages)
    else:
        out.setdefault(prefix or "_schema", []).append(str(messages))


def convert_marshmallow_errors(
    fmt: str,
    marshmallow_error: MarshmallowValidationError,
) -> DecodeError:
    """
    Convert a Marshmallow ValidationError to DecodeError.

    Marshmallow nests messages as {"packages": {0: {"cves": ...}}}; they are
    flattened to the same dotted paths Pydantic errors use.
    """
    errors: dict[str, list[str]] = {}
    _flatten_messages(marshmallow_error.messages, "", errors)
    return DecodeError(fmt, "invalid input", errors)
