"""Shape descriptors: declarative description of a flow's input / output.

A shape is an immutable tagged value (``kind`` discriminator) interpreted by
``flows.validator`` and ``flows.coercion``.  Nothing here reflects over
Python types: a flow declares its contract as data, e.g.::

    INPUT_SHAPE = ObjectShape.of(
        destinationCountry=prop(StringShape(min_length=1), "Destination country"),
    )

Variants:
  - ``StringShape``  : optional length bounds and ``format="data_uri"``
  - ``NumberShape``  : optional ``[minimum, maximum]`` and ``integer`` flag
  - ``BooleanShape``
  - ``EnumShape``    : closed set of string values
  - ``ArrayShape``   : homogeneous items, optional ``min_items``
  - ``ObjectShape``  : ordered tuple of named ``Property`` entries

Every shape can render itself as a JSON-schema fragment; the output shape's
schema is the contract handed to the generation backend.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _Shape(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str = ""

    def to_json_schema(self) -> dict[str, Any]:
        raise NotImplementedError(f"{type(self).__name__}.to_json_schema()")

    def _with_description(self, schema: dict[str, Any]) -> dict[str, Any]:
        if self.description:
            schema["description"] = self.description
        return schema


class StringShape(_Shape):
    kind: Literal["string"] = "string"
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    format: Optional[Literal["data_uri"]] = None

    def to_json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": "string"}
        if self.min_length is not None:
            schema["minLength"] = self.min_length
        if self.max_length is not None:
            schema["maxLength"] = self.max_length
        if self.format == "data_uri":
            schema["contentEncoding"] = "base64"
        return self._with_description(schema)


class NumberShape(_Shape):
    kind: Literal["number"] = "number"
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    integer: bool = False

    def to_json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": "integer" if self.integer else "number"}
        if self.minimum is not None:
            schema["minimum"] = self.minimum
        if self.maximum is not None:
            schema["maximum"] = self.maximum
        return self._with_description(schema)


class BooleanShape(_Shape):
    kind: Literal["boolean"] = "boolean"

    def to_json_schema(self) -> dict[str, Any]:
        return self._with_description({"type": "boolean"})


class EnumShape(_Shape):
    kind: Literal["enum"] = "enum"
    values: tuple[str, ...]

    def to_json_schema(self) -> dict[str, Any]:
        return self._with_description({"type": "string", "enum": list(self.values)})


class ArrayShape(_Shape):
    kind: Literal["array"] = "array"
    items: "Shape"
    min_items: Optional[int] = None

    def to_json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {
            "type": "array",
            "items": self.items.to_json_schema(),
        }
        if self.min_items is not None:
            schema["minItems"] = self.min_items
        return self._with_description(schema)


class Property(BaseModel):
    """A named member of an ``ObjectShape``."""

    model_config = ConfigDict(frozen=True)

    name: str
    shape: "Shape"
    optional: bool = False


class ObjectShape(_Shape):
    kind: Literal["object"] = "object"
    properties: tuple[Property, ...] = ()

    @classmethod
    def of(cls, **props: Property | "Shape") -> "ObjectShape":
        """Build an object shape from keyword arguments (order preserved).

        Values may be a ``Property`` (usually from ``prop()``) or a bare
        shape, which is taken as a required property.
        """
        properties = []
        for name, value in props.items():
            if isinstance(value, Property):
                properties.append(value.model_copy(update={"name": name}))
            else:
                properties.append(Property(name=name, shape=value))
        return cls(properties=tuple(properties))

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.properties)

    def get(self, name: str) -> Property | None:
        for p in self.properties:
            if p.name == name:
                return p
        return None

    def to_json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {
            "type": "object",
            "properties": {p.name: p.shape.to_json_schema() for p in self.properties},
            "required": [p.name for p in self.properties if not p.optional],
        }
        return self._with_description(schema)


Shape = Annotated[
    Union[StringShape, NumberShape, BooleanShape, EnumShape, ArrayShape, ObjectShape],
    Field(discriminator="kind"),
]

ArrayShape.model_rebuild()
Property.model_rebuild()
ObjectShape.model_rebuild()


def prop(shape: Any, description: str = "", *, optional: bool = False) -> Property:
    """Declare an object property; ``description`` lands on the shape."""
    if description:
        shape = shape.model_copy(update={"description": description})
    # name is filled in by ObjectShape.of()
    return Property(name="", shape=shape, optional=optional)
