"""
Bindings between decoded primitives and report model trees.

A binding is the part of a round trip that maps dicts, lists and strings onto
model instances and back. Two engines are available:

    pydantic:     model_validate / model_dump(by_alias=True), and
                  pydantic-core's native JSON for the JSON format.
    marshmallow:  a Schema generated from the same model, whose post_load
                  builds the model instance. Aliases become data_key.

Flow: primitives -> ENGINE LOADS -> model tree -> ENGINE DUMPS -> primitives
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from marshmallow import RAISE, Schema, post_load
from marshmallow.exceptions import ValidationError as MarshmallowValidationError
from pydantic import BaseModel, ValidationError as PydanticValidationError
from pydantic_core import PydanticSerializationError

from .errors import (
    ConfigurationError,
    DecodeError,
    EncodeError,
    convert_marshmallow_errors,
    convert_pydantic_errors,
)
from .field_conversion import convert_model_fields

logger = logging.getLogger(__name__)

PYDANTIC = "pydantic"
MARSHMALLOW = "marshmallow"
ENGINES = (PYDANTIC, MARSHMALLOW)

# Cache for schema_for - one schema class per model
_schema_class_cache: dict[type[BaseModel], type[ModelSchema]] = {}


class ModelSchema(Schema):
    """
    Marshmallow schema that loads into a Pydantic model.

    Subclasses are generated by schema_for(); __model__ names the model the
    schema was derived from.
    """

    __model__: ClassVar[type[BaseModel]]

    class Meta:
        unknown = RAISE

    @post_load
    def make_model(self, data: dict[str, Any], **kwargs: Any) -> BaseModel:
        # Field values are already loaded (nested schemas return models)
        return self.__model__.model_construct(**data)


def schema_for(model: type[BaseModel]) -> type[ModelSchema]:
    """
    Create (or fetch from cache) a ModelSchema subclass for a Pydantic model.

    Example:
        ReportSchema = schema_for(VulnerabilityReport)
        report = ReportSchema().load({"packages": []})

    Args:
        model: The Pydantic model class

    Returns:
        A ModelSchema subclass with one field per model field
    """
    cached = _schema_class_cache.get(model)
    if cached is not None:
        return cached

    fields = convert_model_fields(model)
    class_dict: dict[str, Any] = {"__model__": model, **fields}
    schema_cls = type(f"{model.__name__}Schema", (ModelSchema,), class_dict)

    _schema_class_cache[model] = schema_cls
    return schema_cls


class Binding:
    """
    Maps primitives to instances of one root model and back.

    Attributes:
        engine: Engine name
        model: Root Pydantic model class
    """

    engine: ClassVar[str]

    def __init__(self, model: type[BaseModel]) -> None:
        self.model = model

    def load(self, data: Any, fmt: str) -> BaseModel:
        raise NotImplementedError

    def dump(self, obj: BaseModel, fmt: str) -> dict[str, Any]:
        raise NotImplementedError

    def load_json(self, raw: bytes) -> BaseModel:
        raise NotImplementedError

    def dump_json(self, obj: BaseModel) -> bytes:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.model.__name__})"


class PydanticBinding(Binding):
    """Binding backed by Pydantic's own validation and serialization."""

    engine = PYDANTIC

    def load(self, data: Any, fmt: str) -> BaseModel:
        try:
            return self.model.model_validate(data)
        except PydanticValidationError as exc:
            raise convert_pydantic_errors(fmt, exc) from exc

    def dump(self, obj: BaseModel, fmt: str) -> dict[str, Any]:
        try:
            return obj.model_dump(by_alias=True)
        except PydanticSerializationError as exc:
            raise EncodeError(fmt, str(exc)) from exc

    def load_json(self, raw: bytes) -> BaseModel:
        try:
            return self.model.model_validate_json(raw)
        except PydanticValidationError as exc:
            raise convert_pydantic_errors("json", exc) from exc

    def dump_json(self, obj: BaseModel) -> bytes:
        try:
            return obj.model_dump_json(by_alias=True).encode("utf-8")
        except PydanticSerializationError as exc:
            raise EncodeError("json", str(exc)) from exc


class MarshmallowBinding(Binding):
    """Binding backed by a Marshmallow schema generated from the model."""

    engine = MARSHMALLOW

    def __init__(self, model: type[BaseModel]) -> None:
        super().__init__(model)
        self.schema = schema_for(model)()

    def load(self, data: Any, fmt: str) -> BaseModel:
        try:
            return self.schema.load(data)
        except MarshmallowValidationError as exc:
            raise convert_marshmallow_errors(fmt, exc) from exc

    def dump(self, obj: BaseModel, fmt: str) -> dict[str, Any]:
        try:
            return self.schema.dump(obj)
        except (AttributeError, TypeError, ValueError) as exc:
            raise EncodeError(fmt, str(exc)) from exc

    def load_json(self, raw: bytes) -> BaseModel:
        try:
            return self.schema.loads(raw)
        except MarshmallowValidationError as exc:
            raise convert_marshmallow_errors("json", exc) from exc
        except ValueError as exc:
            # json.JSONDecodeError and UnicodeDecodeError
            raise DecodeError("json", str(exc)) from exc

    def dump_json(self, obj: BaseModel) -> bytes:
        try:
            return self.schema.dumps(obj).encode("utf-8")
        except (AttributeError, TypeError, ValueError) as exc:
            raise EncodeError("json", str(exc)) from exc


_BINDINGS: dict[str, type[Binding]] = {
    PYDANTIC: PydanticBinding,
    MARSHMALLOW: MarshmallowBinding,
}


def get_binding(engine: str, model: type[BaseModel]) -> Binding:
    """Create the binding for an engine name, or raise ConfigurationError."""
    binding_cls = _BINDINGS.get(engine)
    if binding_cls is None:
        raise ConfigurationError(
            f"unknown engine {engine!r}; expected one of {', '.join(ENGINES)}"
        )
    logger.debug("Using %s engine for %s", engine, model.__name__)
    return binding_cls(model)
