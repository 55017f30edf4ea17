"""
Format codecs: bytes <-> model tree, through a binding.

Each codec owns only the text format. Mapping primitives onto models is the
binding's job, so the same codec serves both variants and both engines.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Any, ClassVar, get_args, get_origin

import yaml
from pydantic import BaseModel

from .bindings import Binding
from .errors import ConfigurationError, DecodeError, EncodeError
from .models import external_name

logger = logging.getLogger(__name__)

# LibYAML bindings when PyYAML was built with them. The base loader keeps
# every scalar a string, so unquoted versions such as `0` or `1.10` load as text.
_YAML_LOADER = getattr(yaml, "CBaseLoader", yaml.BaseLoader)
_YAML_DUMPER = getattr(yaml, "CSafeDumper", yaml.SafeDumper)


class Codec:
    """Base class for a serialization format."""

    name: ClassVar[str]
    extension: ClassVar[str]

    def decode(self, raw: bytes, binding: Binding) -> BaseModel:
        raise NotImplementedError

    def encode(self, obj: BaseModel, binding: Binding) -> bytes:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class JsonCodec(Codec):
    """JSON through the engine's native JSON support."""

    name = "json"
    extension = "json"

    def decode(self, raw: bytes, binding: Binding) -> BaseModel:
        return binding.load_json(raw)

    def encode(self, obj: BaseModel, binding: Binding) -> bytes:
        return binding.dump_json(obj)


class YamlCodec(Codec):
    """YAML through PyYAML: untyped scalars on load, the safe dumper on dump."""

    name = "yaml"
    extension = "yaml"

    def decode(self, raw: bytes, binding: Binding) -> BaseModel:
        try:
            data = yaml.load(raw, Loader=_YAML_LOADER)
        except yaml.YAMLError as exc:
            raise DecodeError(self.name, str(exc)) from exc
        return binding.load(data, self.name)

    def encode(self, obj: BaseModel, binding: Binding) -> bytes:
        data = binding.dump(obj, self.name)
        try:
            text = yaml.dump(
                data,
                Dumper=_YAML_DUMPER,
                sort_keys=False,
                allow_unicode=True,
                default_flow_style=False,
            )
        except yaml.YAMLError as exc:
            raise EncodeError(self.name, str(exc)) from exc
        return text.encode("utf-8")


def _list_item_model(annotation: Any) -> type[BaseModel] | None:
    """Return T for a list[T] annotation where T is a model, else None."""
    if get_origin(annotation) is list:
        args = get_args(annotation)
        if args and isinstance(args[0], type) and issubclass(args[0], BaseModel):
            return args[0]
    return None


def element_to_data(element: ET.Element, model: type[BaseModel]) -> dict[str, Any]:
    """
    Convert an element into primitives shaped for ``model``.

    A list[Model] field maps to every child element named by the field's
    external name; any other field maps to the text of the first such child.
    Unknown children are kept as text so the binding can reject them.
    """
    data: dict[str, Any] = {}
    known: set[str] = set()

    for field_name, field_info in model.model_fields.items():
        key = external_name(field_name, field_info)
        known.add(key)
        item_model = _list_item_model(field_info.annotation)
        if item_model is not None:
            data[key] = [element_to_data(child, item_model) for child in element.iterfind(key)]
        else:
            child = element.find(key)
            if child is not None:
                data[key] = child.text or ""

    for child in element:
        if child.tag not in known:
            data[child.tag] = child.text or ""

    return data


def data_to_element(tag: str, data: dict[str, Any], model: type[BaseModel]) -> ET.Element:
    """Inverse of element_to_data: build an element from dumped primitives."""
    element = ET.Element(tag)

    for field_name, field_info in model.model_fields.items():
        key = external_name(field_name, field_info)
        if key not in data:
            continue
        value = data[key]
        item_model = _list_item_model(field_info.annotation)
        if item_model is not None:
            for item in value:
                element.append(data_to_element(key, item, item_model))
        else:
            ET.SubElement(element, key).text = "" if value is None else str(value)

    return element


class XmlCodec(Codec):
    """
    XML through ElementTree.

    List fields are repeated elements, scalar fields are text elements. The
    root element's name is not checked on decode; encode always writes
    ROOT_TAG so both variants produce the same document shape.
    """

    name = "xml"
    extension = "xml"
    root_tag = "VulnerabilityReport"

    def decode(self, raw: bytes, binding: Binding) -> BaseModel:
        try:
            root = ET.fromstring(raw)
        except ET.ParseError as exc:
            raise DecodeError(self.name, str(exc)) from exc
        return binding.load(element_to_data(root, binding.model), self.name)

    def encode(self, obj: BaseModel, binding: Binding) -> bytes:
        data = binding.dump(obj, self.name)
        try:
            root = data_to_element(self.root_tag, data, binding.model)
            return ET.tostring(root, encoding="utf-8")
        except (TypeError, ValueError) as exc:
            raise EncodeError(self.name, str(exc)) from exc


# Fixed format order used for adapters and the report
CODECS: dict[str, Codec] = {
    codec.name: codec for codec in (JsonCodec(), YamlCodec(), XmlCodec())
}


def get_codec(name: str) -> Codec:
    """Look up a codec by format name, or raise ConfigurationError."""
    try:
        return CODECS[name]
    except KeyError:
        raise ConfigurationError(
            f"unknown format {name!r}; expected one of {', '.join(CODECS)}"
        ) from None
