"""Turns operation parameters and request bodies into node properties.

Required parameters and body properties become standalone properties.
Optional ones of the same source are grouped into a single collection
property, but only when that source also has something required; a source
made up of optional items only keeps them standalone.
"""

from openapi_to_node.errors import BodySchemaUnsupportedError, ReferenceNotFoundError
from openapi_to_node.node.models import (
    NodeProperty,
    OptionChoice,
    PropertyType,
    Routing,
    RoutingRequest,
    RoutingSend,
)
from openapi_to_node.node.utils import (
    JOINED_VALUE_EXPRESSION,
    JSON_VALUE_EXPRESSION,
    VALUE_EXPRESSION,
    display_name,
    field_name,
    pretty_json,
)
from openapi_to_node.openapi.ref_resolver import RefResolver
from openapi_to_node.openapi.schema_example import SchemaExample
from openapi_to_node.openapi.schema_kind import SchemaKind, schema_kind, schema_type
from openapi_to_node.text import start_case

SUPPORTED_LOCATIONS = ("query", "path", "header")

QUERY_COLLECTION = "additionalQueryParameters"
BODY_COLLECTION = "additionalBodyFields"

EMPTY_DEFAULTS = {
    PropertyType.STRING: "",
    PropertyType.BOOLEAN: False,
    PropertyType.NUMBER: 0,
    PropertyType.JSON: "",
    PropertyType.OPTIONS: "",
    PropertyType.MULTI_OPTIONS: [],
}


def choice_label(value) -> str:
    return start_case(value) or str(value)


def collection(name: str, placeholder: str, options: list[NodeProperty]) -> NodeProperty:
    return NodeProperty(
        display_name=start_case(name),
        name=name,
        type=PropertyType.COLLECTION,
        placeholder=placeholder,
        default={},
        options=options,
    )


def group_optional(fields: list[tuple[NodeProperty, bool]], name: str, placeholder: str) -> list[NodeProperty]:
    """Split ``(field, required)`` pairs into standalone fields plus one collection."""
    if not any(required for _, required in fields):
        return [field for field, _ in fields]
    result = [field for field, required in fields if required]
    optional = [field for field, required in fields if not required]
    if optional:
        result.append(collection(name, placeholder, optional))
    return result


class SchemaToNodeProperties:
    def __init__(self, doc: dict):
        self.resolver = RefResolver(doc)
        self.schema_example = SchemaExample(doc)

    # ── Parameters ──────────────────────────────────────────────────────────

    def from_parameters(self, parameters: list[dict] | None) -> list[NodeProperty]:
        """Properties for query, path and header parameters, in declaration order."""
        resolved = [self.resolver.resolve(p) for p in parameters or []]
        resolved = [p for p in resolved if p.get("in") in SUPPORTED_LOCATIONS]
        group = any(p["in"] == "query" and p.get("required") for p in resolved)

        fields = []
        optional = []
        for parameter in resolved:
            field = self.from_parameter(parameter)
            if group and parameter["in"] == "query" and not parameter.get("required"):
                optional.append(field)
            else:
                fields.append(field)
        if optional:
            fields.append(collection(QUERY_COLLECTION, "Add Parameter", optional))
        return fields

    def from_parameter(self, parameter: dict) -> NodeProperty:
        name = parameter["name"]
        location = parameter["in"]
        schema = self.resolver.resolve(self._parameter_schema(parameter))

        field = self._property(name, schema, location)
        if parameter.get("description"):
            field.description = parameter["description"]
        if "example" in parameter:
            example = parameter["example"]
            if field.type == PropertyType.JSON and not isinstance(example, str):
                example = pretty_json(example)
            field.default = example
        if location == "path" or parameter.get("required"):
            field.required = True
        return field

    def merge_parameters(self, shared: list[dict] | None, own: list[dict] | None) -> list[dict]:
        """Path item parameters overridden by operation parameters with the same name and location."""
        merged: dict[tuple, dict] = {}
        for parameter in [*(shared or []), *(own or [])]:
            resolved = self.resolver.resolve(parameter)
            merged[(resolved.get("name"), resolved.get("in"))] = resolved
        return list(merged.values())

    @staticmethod
    def _parameter_schema(parameter: dict) -> dict:
        if "schema" in parameter:
            return parameter["schema"]
        for media in (parameter.get("content") or {}).values():
            if isinstance(media, dict) and "schema" in media:
                return media["schema"]
        return {}

    # ── Request body ────────────────────────────────────────────────────────

    def from_request_body(self, request_body: dict | None) -> list[NodeProperty]:
        """Properties for a JSON request body.

        Raises BodySchemaUnsupportedError when the body has no usable JSON
        schema or the schema cannot be resolved.
        """
        if not request_body:
            return []
        try:
            request_body = self.resolver.resolve(request_body)
            schema = self._flatten(self.resolver.resolve(self._body_schema(request_body)))
            return self._body_fields(schema, bool(request_body.get("required")))
        except ReferenceNotFoundError as e:
            raise BodySchemaUnsupportedError(str(e)) from e

    @staticmethod
    def _body_schema(request_body: dict) -> dict:
        content = request_body.get("content") or {}
        media = content.get("application/json")
        if media is None:
            media = next((m for t, m in content.items() if "json" in t), None)
        if not isinstance(media, dict) or "schema" not in media:
            types = ", ".join(content) or "none"
            raise BodySchemaUnsupportedError(f"no JSON schema in request body (content types: {types})")
        return media["schema"]

    def _flatten(self, schema: dict) -> dict:
        """Merge ``allOf`` members into one object schema."""
        if "allOf" not in schema:
            return schema
        merged = {key: value for key, value in schema.items() if key != "allOf"}
        properties = dict(merged.get("properties") or {})
        required = list(merged.get("required") or [])
        for member in schema["allOf"]:
            member = self._flatten(self.resolver.resolve(member))
            properties.update(member.get("properties") or {})
            required.extend(r for r in member.get("required") or [] if r not in required)
        if properties:
            merged["properties"] = properties
            merged["type"] = "object"
        if required:
            merged["required"] = required
        return merged

    def _body_fields(self, schema: dict, body_required: bool) -> list[NodeProperty]:
        kind = schema_kind(schema)
        if kind == SchemaKind.OBJECT and schema.get("properties"):
            required = set(schema.get("required") or [])
            fields = []
            for name, prop in schema["properties"].items():
                prop = self.resolver.resolve(prop)
                if prop.get("readOnly"):
                    continue
                field = self._property(name, prop, "body")
                is_required = name in required
                if is_required:
                    field.required = True
                fields.append((field, is_required))
            return group_optional(fields, BODY_COLLECTION, "Add Field")
        if kind in (SchemaKind.ARRAY, SchemaKind.OBJECT):
            return [self._whole_body(schema, body_required)]
        raise BodySchemaUnsupportedError(f"unsupported request body schema kind '{kind.value}'")

    def _whole_body(self, schema: dict, body_required: bool) -> NodeProperty:
        """One JSON property covering the entire payload (bare arrays, free-form objects)."""
        return NodeProperty(
            display_name="Body",
            name="body",
            type=PropertyType.JSON,
            default=pretty_json(self.schema_example.extract_example(schema, True)),
            required=True if body_required else None,
            routing=Routing(request=RoutingRequest(body=JSON_VALUE_EXPRESSION)),
        )

    # ── Shared ──────────────────────────────────────────────────────────────

    def property_type(self, schema: dict) -> PropertyType:
        kind = schema_kind(schema)
        if kind == SchemaKind.ENUM:
            return PropertyType.OPTIONS
        if kind == SchemaKind.ARRAY:
            items = self.resolver.resolve(schema.get("items") or {})
            return PropertyType.MULTI_OPTIONS if items.get("enum") else PropertyType.JSON
        if kind in (SchemaKind.OBJECT, SchemaKind.COMPOSITE, SchemaKind.UNION, SchemaKind.REFERENCE):
            return PropertyType.JSON
        type_ = schema_type(schema)
        if type_ == "boolean":
            return PropertyType.BOOLEAN
        if type_ in ("number", "integer"):
            return PropertyType.NUMBER
        return PropertyType.STRING

    def default_value(self, schema: dict, type_: PropertyType):
        if type_ == PropertyType.JSON:
            example = self.schema_example.extract_example(schema, True)
            return example if isinstance(example, str) else pretty_json(example)
        example = self.schema_example.extract_example(schema, False)
        if example is None:
            return EMPTY_DEFAULTS[type_]
        return example

    def options(self, schema: dict, type_: PropertyType) -> list[OptionChoice] | None:
        if type_ == PropertyType.OPTIONS:
            values = schema["enum"]
        elif type_ == PropertyType.MULTI_OPTIONS:
            values = self.resolver.resolve(schema.get("items") or {})["enum"]
        else:
            return None
        return [OptionChoice(name=choice_label(value), value=value) for value in values]

    def _property(self, name: str, schema: dict, location: str) -> NodeProperty:
        type_ = self.property_type(schema)
        return NodeProperty(
            display_name=display_name(name),
            name=field_name(name),
            type=type_,
            default=self.default_value(schema, type_),
            description=schema.get("description"),
            options=self.options(schema, type_),
            routing=self._routing(name, location, type_),
        )

    @staticmethod
    def _routing(name: str, location: str, type_: PropertyType) -> Routing | None:
        if location == "query":
            value = JOINED_VALUE_EXPRESSION if type_ == PropertyType.MULTI_OPTIONS else VALUE_EXPRESSION
            return Routing(send=RoutingSend(type="query", property=name, value=value))
        if location == "body":
            value = JSON_VALUE_EXPRESSION if type_ == PropertyType.JSON else VALUE_EXPRESSION
            return Routing(send=RoutingSend(type="body", property=name, value=value))
        if location == "header":
            return Routing(request=RoutingRequest(headers={name: VALUE_EXPRESSION}))
        # Path parameters are interpolated into the operation URL.
        return None
