"""Top-level entry point: OpenAPI document in, ordered node properties out."""

import copy
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from openapi_to_node.collector import BaseOperationsCollector, OperationsCollector
from openapi_to_node.errors import OperationBuildError
from openapi_to_node.naming.operation import DefaultOperationParser, OperationParser
from openapi_to_node.naming.resource import DefaultResourceParser, ResourceParser
from openapi_to_node.node.models import NodeProperty, Override, PropertyType
from openapi_to_node.openapi.walker import OpenAPIWalker


class BuilderConfig(BaseModel):
    """Naming strategies, collector class and diagnostics logger for one build."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    operation: OperationParser = Field(default_factory=DefaultOperationParser)
    resource: ResourceParser = Field(default_factory=DefaultResourceParser)
    collector: type[BaseOperationsCollector] = OperationsCollector
    logger: logging.Logger | None = None


def is_match(value: Any, pattern: Any) -> bool:
    """Partial deep match: every key of a dict pattern must match, other values must be equal."""
    if isinstance(pattern, dict):
        return isinstance(value, dict) and all(
            key in value and is_match(value[key], expected) for key, expected in pattern.items()
        )
    return value == pattern


def iter_properties(properties: list[dict], display_options: dict | None = None):
    """Yield ``(property, match view)`` for every property, collection options included.

    Collection options have no ``displayOptions`` of their own; their view
    borrows the collection's so rules scoped to an operation reach them.
    """
    for prop in properties:
        view = prop
        if display_options is not None and "displayOptions" not in prop:
            view = {**prop, "displayOptions": display_options}
        yield prop, view
        if prop.get("type") == PropertyType.COLLECTION.value:
            yield from iter_properties(prop.get("options") or [], view.get("displayOptions"))


def apply_overrides(properties: list[dict], overrides: list[Override | dict]) -> list[dict]:
    """Shallow-merge each rule's ``replace`` onto every property its ``find`` matches, rule by rule."""
    for override in overrides:
        if not isinstance(override, Override):
            override = Override(**override)
        for prop, view in list(iter_properties(properties)):
            if is_match(view, override.find):
                prop.update(copy.deepcopy(override.replace))
    return properties


class NodePropertiesBuilder:
    def __init__(self, doc: dict, config: BuilderConfig | dict | None = None):
        if config is None:
            config = BuilderConfig()
        elif isinstance(config, dict):
            config = BuilderConfig(**config)
        self.doc = doc
        self.config = config
        self.errors: list[OperationBuildError] = []

    def build(self, overrides: list[Override | dict] | None = None) -> list[dict]:
        """Resource selector, operation selectors, then every operation's properties.

        Raises NoOperationsError if the document has no usable operation.
        """
        collector = self.config.collector(self.doc, self.config.operation, self.config.resource, self.config.logger)
        OpenAPIWalker(self.doc).walk(collector)
        self.errors = collector.errors

        operations = collector.operations
        resource = NodeProperty(
            display_name="Resource",
            name="resource",
            type=PropertyType.OPTIONS,
            no_data_expression=True,
            options=collector.resources,
            default="",
        )
        properties = [prop.dump() for prop in [resource, *operations, *collector.fields]]
        return apply_overrides(properties, overrides or [])
