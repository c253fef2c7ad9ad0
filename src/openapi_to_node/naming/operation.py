"""Naming policy for operations.

The policy decides how each operation shows up in the operation selector:
its label, its value, the action text, and whether it appears at all.
"""

from typing import Protocol, runtime_checkable

from openapi_to_node.openapi.walker import OperationContext
from openapi_to_node.text import start_case


@runtime_checkable
class OperationParser(Protocol):
    def name(self, operation: dict, context: OperationContext) -> str: ...

    def value(self, operation: dict, context: OperationContext) -> str: ...

    def action(self, operation: dict, context: OperationContext) -> str: ...

    def description(self, operation: dict, context: OperationContext) -> str: ...

    def should_skip(self, operation: dict, context: OperationContext) -> bool: ...


class DefaultOperationParser:
    """operationId, else summary, else ``"<METHOD> <pattern>"``."""

    def name(self, operation: dict, context: OperationContext) -> str:
        if operation.get("operationId"):
            return start_case(operation["operationId"])
        if operation.get("summary"):
            return start_case(operation["summary"])
        return f"{context.method.upper()} {context.pattern}"

    def value(self, operation: dict, context: OperationContext) -> str:
        return self.name(operation, context)

    def action(self, operation: dict, context: OperationContext) -> str:
        return operation.get("summary") or self.name(operation, context)

    def description(self, operation: dict, context: OperationContext) -> str:
        return operation.get("description") or operation.get("summary") or ""

    def should_skip(self, operation: dict, context: OperationContext) -> bool:
        return bool(operation.get("deprecated"))
