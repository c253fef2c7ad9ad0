"""Generate declarative node properties from OpenAPI documents."""

from openapi_to_node.builder import BuilderConfig, NodePropertiesBuilder, apply_overrides
from openapi_to_node.collector import BaseOperationsCollector, OperationsCollector
from openapi_to_node.errors import (
    BodySchemaUnsupportedError,
    NoOperationsError,
    OpenAPINodeError,
    OperationBuildError,
    ReferenceNotFoundError,
)
from openapi_to_node.naming import DefaultOperationParser, DefaultResourceParser
from openapi_to_node.node.models import Override

__all__ = [
    "BaseOperationsCollector",
    "BodySchemaUnsupportedError",
    "BuilderConfig",
    "DefaultOperationParser",
    "DefaultResourceParser",
    "NoOperationsError",
    "NodePropertiesBuilder",
    "OpenAPINodeError",
    "OperationBuildError",
    "OperationsCollector",
    "Override",
    "ReferenceNotFoundError",
    "apply_overrides",
]
