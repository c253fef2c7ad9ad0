"""Discriminates schema nodes into explicit kinds.

Field building and example synthesis branch on ``SchemaKind`` instead of
probing raw keys all over the place.
"""

from enum import Enum


class SchemaKind(str, Enum):
    """The shape a schema node takes once its keys are inspected."""

    REFERENCE = "reference"
    UNION = "union"  # oneOf / anyOf
    COMPOSITE = "composite"  # allOf
    OBJECT = "object"
    ARRAY = "array"
    ENUM = "enum"
    PRIMITIVE = "primitive"
    ANY = "any"


PRIMITIVE_TYPES = ("string", "number", "integer", "boolean", "null")


def schema_type(schema: dict) -> str | None:
    """Return the declared type; OpenAPI 3.1 allows a list, the first entry wins."""
    value = schema.get("type")
    if isinstance(value, list):
        return value[0] if value else None
    return value


def schema_kind(schema: dict) -> SchemaKind:
    """Classify a schema node. Inline ``properties`` take precedence over everything."""
    if "properties" in schema:
        return SchemaKind.OBJECT
    if "$ref" in schema:
        return SchemaKind.REFERENCE
    if "oneOf" in schema or "anyOf" in schema:
        return SchemaKind.UNION
    if "allOf" in schema:
        return SchemaKind.COMPOSITE
    if "enum" in schema:
        return SchemaKind.ENUM
    type_ = schema_type(schema)
    if type_ == "array" or "items" in schema:
        return SchemaKind.ARRAY
    if type_ == "object":
        return SchemaKind.OBJECT
    if type_ in PRIMITIVE_TYPES:
        return SchemaKind.PRIMITIVE
    return SchemaKind.ANY
