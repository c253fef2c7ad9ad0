"""Builds a representative value for any schema node.

Values come from the schema itself (``example``, ``default``, ``enum``) where
possible; otherwise a placeholder of the right type is guessed.
"""

import math

from openapi_to_node.openapi.ref_resolver import RefResolver
from openapi_to_node.openapi.schema_kind import schema_type

UUID_EXAMPLE = "3fa85f64-5717-4562-b3fc-2c963f66afa6"

FORMAT_SEEDS = {
    "int32": 2**30,
    "int64": 2**53 - 1,
    "float": 0.1,
    "double": 0.1,
}


def _step_inward(bound: float, direction: int, integer: bool) -> float:
    if integer:
        return bound + direction
    return math.nextafter(bound, direction * math.inf)


def _bound(schema: dict, key: str, exclusive_key: str, direction: int, integer: bool) -> float | None:
    bound = schema.get(key)
    exclusive = schema.get(exclusive_key)
    if isinstance(exclusive, bool):
        # OpenAPI 3.0: boolean flag modifying minimum/maximum
        if exclusive and bound is not None:
            bound = _step_inward(bound, direction, integer)
    elif exclusive is not None:
        # OpenAPI 3.1: the exclusive bound is a number of its own
        candidate = _step_inward(exclusive, direction, integer)
        if bound is None:
            bound = candidate
        else:
            bound = max(bound, candidate) if direction > 0 else min(bound, candidate)
    if bound is not None and integer:
        bound = math.ceil(bound) if direction > 0 else math.floor(bound)
    return bound


def numeric_example(schema: dict) -> int | float:
    """Return a number that satisfies the schema's constraints where possible."""
    integer = schema_type(schema) == "integer"
    seed = FORMAT_SEEDS.get(schema.get("format"), 0)

    lower = _bound(schema, "minimum", "exclusiveMinimum", 1, integer)
    upper = _bound(schema, "maximum", "exclusiveMaximum", -1, integer)
    if lower is not None and upper is not None and lower > upper:
        return seed

    value = seed
    if lower is not None and value < lower:
        value = lower
    if upper is not None and value > upper:
        value = upper

    multiple = schema.get("multipleOf")
    if multiple:
        quotient = value / multiple
        if not math.isclose(quotient, round(quotient)):
            value = math.ceil(quotient) * multiple

    if integer:
        return int(math.ceil(value))
    return value


def guess_value(schema: dict, type_: str):
    if type_ == "boolean":
        return True
    if type_ == "string":
        return UUID_EXAMPLE if schema.get("format") == "uuid" else "string"
    if type_ == "object":
        return {}
    if type_ == "array":
        return []
    if type_ in ("number", "integer"):
        return numeric_example(schema)
    # OpenAPI 3.1 "null"
    return None


class _SchemaExampleBuilder:
    """One synthesis run.

    ``visited`` holds the references on the path from the root to the current
    node. Each recursive call gets its own copy, so siblings may reuse a
    reference while a node that re-enters one of its ancestors yields ``{}``.
    """

    def __init__(self, resolver: RefResolver):
        self.resolver = resolver

    def build(self, schema: dict, guess_default: bool, visited: frozenset = frozenset()):
        schema, refs = self.resolver.resolve_ref(schema)
        if refs:
            if any(ref in visited for ref in refs):
                return {}
            visited = visited | set(refs)

        if "example" in schema:
            return schema["example"]
        if "default" in schema:
            return schema["default"]
        if "oneOf" in schema:
            return self.build(schema["oneOf"][0], guess_default, visited)

        example = None
        if "allOf" in schema:
            example = {}
            for member in schema["allOf"]:
                value = self.build(member, True, visited)
                if isinstance(value, dict):
                    example.update(value)

        if schema.get("properties"):
            obj = example if example is not None else {}
            for key, prop in schema["properties"].items():
                obj[key] = self.build(prop, True, visited)
            return obj
        if example is not None:
            return example

        if schema.get("enum"):
            return schema["enum"][0]

        if "items" in schema:
            items = schema["items"] or {}
            item_schema = self.resolver.resolve(items)
            if item_schema.get("enum"):
                return list(item_schema["enum"])
            value = self.build(items, True, visited)
            return [value if value is not None else ""]

        type_ = schema_type(schema)
        if guess_default and type_:
            return guess_value(schema, type_)
        return None


class SchemaExample:
    """Entry point for example synthesis over one document."""

    def __init__(self, doc: dict):
        self.resolver = RefResolver(doc)

    def extract_example(self, schema: dict, guess_default: bool = True):
        """Return an example value for ``schema`` or ``None`` when there is none."""
        return _SchemaExampleBuilder(self.resolver).build(schema, guess_default)
