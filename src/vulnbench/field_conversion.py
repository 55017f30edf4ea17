"""
Field conversion from Pydantic model fields to Marshmallow fields.

The Marshmallow engine never declares its own schemas: it derives them from
the report models, so both engines share one name mapping.
"""

from __future__ import annotations

from typing import Any

from marshmallow import fields as ma_fields
from pydantic import BaseModel

from .models import external_name
from .type_mapping import type_to_marshmallow_field


def convert_pydantic_field(
    field_name: str,
    field_info: Any,
) -> ma_fields.Field[Any]:
    """
    Convert a single Pydantic FieldInfo to a Marshmallow Field.

    Handles:
    - Type conversion via type_mapping
    - External names (alias -> data_key)

    Report fields carry no defaults, so every field is required.

    Args:
        field_name: Name of the field
        field_info: Pydantic FieldInfo object

    Returns:
        Configured Marshmallow field instance
    """
    ma_field = type_to_marshmallow_field(field_info.annotation)
    ma_field.required = True

    data_key = external_name(field_name, field_info)
    if data_key != field_name:
        ma_field.data_key = data_key

    return ma_field


def convert_model_fields(model: type[BaseModel]) -> dict[str, ma_fields.Field[Any]]:
    """
    Convert all fields from a Pydantic model to Marshmallow fields.

    Field order follows the model's declaration order.
    """
    return {
        field_name: convert_pydantic_field(field_name, field_info)
        for field_name, field_info in model.model_fields.items()
    }
