"""Resolves ``$ref`` pointers inside a single OpenAPI document."""

from typing import Any

from openapi_to_node.errors import ReferenceNotFoundError


def unescape_pointer_token(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


class RefResolver:
    """Looks up local references and picks the first branch of unions.

    The document is never modified; resolved nodes are new dicts.
    """

    def __init__(self, doc: dict):
        self.doc = doc

    def resolve_ref(self, schema: dict) -> tuple[dict, list[str] | None]:
        """Resolve ``schema`` and return it with the pointers that were followed."""
        if "properties" in schema:
            return schema, None
        if "oneOf" in schema:
            schema = schema["oneOf"][0]
        if "anyOf" in schema:
            schema = schema["anyOf"][0]
        if "$ref" in schema:
            ref = schema["$ref"]
            target = self.find_ref(ref)
            # Sibling keys of the reference survive unless the target defines them.
            rest = {key: value for key, value in schema.items() if key != "$ref"}
            rest.update(target)
            return rest, [ref]
        return schema, None

    def resolve(self, schema: dict) -> dict:
        return self.resolve_ref(schema)[0]

    def find_ref(self, ref: str, _seen: tuple[str, ...] = ()) -> dict:
        """Follow ``ref`` (and any reference it points to) to a concrete node."""
        if ref in _seen:
            raise ReferenceNotFoundError(ref, "circular reference chain")

        node: Any = self.doc
        for raw in ref.split("/")[1:]:
            segment = unescape_pointer_token(raw)
            if isinstance(node, list) and segment.isdigit() and int(segment) < len(node):
                node = node[int(segment)]
            elif isinstance(node, dict) and node.get(segment) is not None:
                node = node[segment]
            else:
                raise ReferenceNotFoundError(ref, segment)

        if not isinstance(node, dict):
            raise ReferenceNotFoundError(ref)
        if "$ref" in node:
            return self.find_ref(node["$ref"], _seen + (ref,))
        return node
