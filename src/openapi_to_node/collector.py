"""Collects operation selectors and properties while the document is walked."""

import logging

from openapi_to_node.errors import BodySchemaUnsupportedError, NoOperationsError, OperationBuildError
from openapi_to_node.logger import get_logger
from openapi_to_node.naming.operation import OperationParser
from openapi_to_node.naming.resource import ResourceParser
from openapi_to_node.node.fields import SchemaToNodeProperties
from openapi_to_node.node.models import (
    DisplayOptions,
    NodeProperty,
    OperationOption,
    OptionChoice,
    PropertyType,
)
from openapi_to_node.node.request import operation_option
from openapi_to_node.openapi.walker import DEFAULT_TAG, OperationContext

NO_BODY_MESSAGE = "There's no body available for request, kindly use HTTP Request node to send body"


class OptionsByResourceMap(dict):
    """Resource value -> operation options, in first-seen order."""

    def add(self, resource: str, option: OperationOption) -> None:
        self.setdefault(resource, []).append(option)


def tag_record(tag_name: str) -> dict:
    """Operations without tags are grouped under ``Default``."""
    if tag_name == DEFAULT_TAG:
        return {"name": "Default"}
    return {"name": tag_name}


class BaseOperationsCollector:
    """Walker visitor that turns every operation into properties.

    Each operation is built once and copied for every tag it carries. A
    failure while building an operation is logged and the operation dropped;
    the rest of the document is still processed.
    """

    def __init__(
        self,
        doc: dict,
        operation_parser: OperationParser,
        resource_parser: ResourceParser,
        logger: logging.Logger | None = None,
    ):
        self._fields: list[NodeProperty] = []
        self.options_by_resource = OptionsByResourceMap()
        self.node_properties = SchemaToNodeProperties(doc)
        self.operation_parser = operation_parser
        self.resource_parser = resource_parser
        self.logger = logger or get_logger()
        self.errors: list[OperationBuildError] = []

        # resource value -> tag name it was first seen with
        self._resource_tags: dict[str, str] = {}
        self._declared_tags: dict[str, dict] = {}
        self.bindings: dict = {}

    # ── Results ─────────────────────────────────────────────────────────────

    @property
    def operations(self) -> list[NodeProperty]:
        """One operation selector per resource."""
        if not self.options_by_resource:
            raise NoOperationsError()

        operations = []
        for resource, options in self.options_by_resource.items():
            operations.append(
                NodeProperty(
                    display_name="Operation",
                    name="operation",
                    type=PropertyType.OPTIONS,
                    no_data_expression=True,
                    display_options=DisplayOptions(show={"resource": [resource]}),
                    options=options,
                    default="",
                )
            )
        return operations

    @property
    def resources(self) -> list[OptionChoice]:
        """Resource selector choices, labelled from the declared tag records when available."""
        choices = []
        for resource, tag_name in self._resource_tags.items():
            tag = self._declared_tags.get(tag_name) or tag_record(tag_name)
            choices.append(
                OptionChoice(
                    name=self.resource_parser.name(tag),
                    value=resource,
                    description=self.resource_parser.description(tag),
                )
            )
        return choices

    @property
    def fields(self) -> list[NodeProperty]:
        return list(self._fields)

    # ── Visitor hooks ───────────────────────────────────────────────────────

    def visit_document(self, doc: dict) -> None:
        info = doc.get("info") or {}
        self.logger.debug("Building properties for %s %s", info.get("title", "document"), info.get("version", ""))

    def visit_operation(self, operation: dict, context: OperationContext) -> None:
        self.bindings = {
            "pattern": context.pattern,
            "method": context.method,
            "operationId": operation.get("operationId"),
        }
        try:
            self._visit_operation(operation, context)
        except Exception as e:
            self.errors.append(OperationBuildError(self.bindings, e))
            self.logger.warning("Failed to parse operation", extra={**self.bindings, "error": str(e)})

    def visit_tag(self, tag: dict) -> None:
        if isinstance(tag, dict) and tag.get("name"):
            self._declared_tags[tag["name"]] = tag

    def finish(self) -> None:
        self.logger.debug(
            "Collected %d properties for %d resources (%d operations failed)",
            len(self._fields),
            len(self.options_by_resource),
            len(self.errors),
        )

    # ── Building ────────────────────────────────────────────────────────────

    def _visit_operation(self, operation: dict, context: OperationContext) -> None:
        if self.operation_parser.should_skip(operation, context):
            self.logger.info("Skipping operation", extra=self.bindings)
            return

        option, operation_fields = self.parse_operation(operation, context)
        resources = [(self.resource_parser.value(tag_record(tag)), tag) for tag in operation["tags"]]
        for resource, tag in resources:
            fields = [field.model_copy(deep=True) for field in operation_fields]
            self.add_display_options(fields, resource, option.name)
            self._resource_tags.setdefault(resource, tag)
            self.options_by_resource.add(resource, option.model_copy(deep=True))
            self._fields.extend(fields)

    def parse_fields(self, operation: dict, context: OperationContext) -> list[NodeProperty]:
        """Parameter properties followed by request body properties."""
        parameters = self.node_properties.merge_parameters(
            context.path.get("parameters"), operation.get("parameters")
        )
        fields = self.node_properties.from_parameters(parameters)
        try:
            fields.extend(self.node_properties.from_request_body(operation.get("requestBody")))
        except BodySchemaUnsupportedError as e:
            self.logger.warning("Failed to parse request body", extra={**self.bindings, "error": str(e)})
            fields.append(
                NodeProperty(
                    display_name=f"{context.method.upper()} {context.pattern}<br/><br/>{NO_BODY_MESSAGE}",
                    name="operation",
                    type=PropertyType.NOTICE,
                    default="",
                )
            )
        return fields

    @staticmethod
    def add_display_options(fields: list[NodeProperty], resource: str, operation: str) -> None:
        for field in fields:
            field.display_options = DisplayOptions(show={"resource": [resource], "operation": [operation]})

    def parse_operation(
        self, operation: dict, context: OperationContext
    ) -> tuple[OperationOption, list[NodeProperty]]:
        option = operation_option(operation, context, self.operation_parser)
        return option, self.parse_fields(operation, context)


class OperationsCollector(BaseOperationsCollector):
    """Also shows ``METHOD /pattern`` as an info notice above each operation's properties."""

    def parse_operation(self, operation: dict, context: OperationContext):
        option, fields = super().parse_operation(operation, context)
        notice = NodeProperty(
            display_name=f"{context.method.upper()} {context.pattern}",
            name="operation",
            type=PropertyType.NOTICE,
            type_options={"theme": "info"},
            default="",
        )
        return option, [notice, *fields]
