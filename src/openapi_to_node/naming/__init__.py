"""Pluggable naming policies for operations and resources."""

from openapi_to_node.naming.operation import DefaultOperationParser, OperationParser
from openapi_to_node.naming.resource import DefaultResourceParser, ResourceParser

__all__ = [
    "DefaultOperationParser",
    "DefaultResourceParser",
    "OperationParser",
    "ResourceParser",
]
