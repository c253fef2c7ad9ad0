"""Traverses an OpenAPI document and reports what it finds to a visitor.

The walk has three phases, always in this order: the document itself, every
operation (paths in declaration order, methods in path item order), then the
declared tags. ``finish`` runs afterwards even if a phase found nothing.
"""

import copy
from typing import Any, Protocol

from pydantic import BaseModel

from openapi_to_node.text import camel_case

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

DEFAULT_TAG = "default"


class OperationContext(BaseModel):
    """Where an operation lives: URL pattern, owning path item and HTTP method."""

    pattern: str  # /api/entities/{id}
    path: dict[str, Any] = {}
    method: str  # lower-case, as keyed in the path item


class OpenAPIVisitor(Protocol):
    """Hooks invoked by ``OpenAPIWalker``.

    Every hook is optional; the walker only calls the ones a visitor defines.
    """

    def visit_document(self, doc: dict) -> None: ...

    def visit_operation(self, operation: dict, context: OperationContext) -> None: ...

    def visit_tag(self, tag: dict) -> None: ...

    def finish(self) -> None: ...


def default_operation_id(operation: dict, path_item: dict, method: str, pattern: str) -> str:
    summary = operation.get("summary") or path_item.get("summary")
    if summary:
        return f"{method} {camel_case(summary)}"
    return f"{method} {pattern}"


def normalize_operation(operation: dict, path_item: dict, method: str, pattern: str) -> dict:
    """Return a copy of ``operation`` with ``tags`` and ``operationId`` filled in."""
    normalized = copy.deepcopy(operation)
    if not normalized.get("tags"):
        normalized["tags"] = [DEFAULT_TAG]
    if not normalized.get("operationId"):
        normalized["operationId"] = default_operation_id(operation, path_item, method, pattern)
    return normalized


class OpenAPIWalker:
    def __init__(self, doc: dict):
        self.doc = doc

    def walk(self, visitor: OpenAPIVisitor) -> None:
        self._walk_document(visitor)
        self._walk_paths(visitor)
        self._walk_tags(visitor)
        finish = getattr(visitor, "finish", None)
        if finish:
            finish()

    def _walk_document(self, visitor: OpenAPIVisitor) -> None:
        hook = getattr(visitor, "visit_document", None)
        if hook:
            hook(self.doc)

    def _walk_paths(self, visitor: OpenAPIVisitor) -> None:
        hook = getattr(visitor, "visit_operation", None)
        paths = self.doc.get("paths") or {}
        if not hook:
            return
        for pattern, path_item in paths.items():
            if not isinstance(path_item, dict):
                continue
            for method, operation in path_item.items():
                if method not in HTTP_METHODS or not isinstance(operation, dict):
                    continue
                context = OperationContext(pattern=pattern, path=path_item, method=method)
                hook(normalize_operation(operation, path_item, method, pattern), context)

    def _walk_tags(self, visitor: OpenAPIVisitor) -> None:
        hook = getattr(visitor, "visit_tag", None)
        tags = self.doc.get("tags")
        if not tags or not hook:
            return
        for tag in tags:
            hook(tag)
