"""
Type mapping utilities for converting model annotations to Marshmallow fields.

Uses Marshmallow's native TYPE_MAPPING for scalar types and adds support for
the container shapes the report models use.
"""
from typing import Any, get_args, get_origin

from marshmallow import Schema, fields as ma_fields
from pydantic import BaseModel


def type_to_marshmallow_field(type_hint: Any) -> ma_fields.Field:
    """
    Map a Python type to a Marshmallow field instance.

    Handles:
    - Nested Pydantic models
    - list[T]
    - Scalars via Schema.TYPE_MAPPING (anything else becomes Raw)

    Args:
        type_hint: A Python type annotation

    Returns:
        An appropriate Marshmallow field instance
    """
    if isinstance(type_hint, type) and issubclass(type_hint, BaseModel):
        # Import here to avoid circular imports
        from vulnbench.bindings import schema_for

        return ma_fields.Nested(schema_for(type_hint))

    origin = get_origin(type_hint)
    if origin is list:
        args = get_args(type_hint)
        inner: ma_fields.Field = ma_fields.Raw()
        if args:
            inner = type_to_marshmallow_field(args[0])
        return ma_fields.List(inner)

    field_cls = Schema.TYPE_MAPPING.get(type_hint, ma_fields.Raw)
    return field_cls()
