"""Operation selector entries and their request routing."""

import base64

from openapi_to_node.naming.operation import OperationParser
from openapi_to_node.node.models import OperationOption, Routing, RoutingOutput, RoutingRequest
from openapi_to_node.node.utils import replace_path_vars_to_parameter
from openapi_to_node.openapi.walker import OperationContext


def returns_image(operation: dict) -> bool:
    """True when a 2xx response declares an ``image/*`` content type."""
    for code, response in (operation.get("responses") or {}).items():
        if not str(code).startswith("2") or not isinstance(response, dict):
            continue
        for content_type in response.get("content") or {}:
            if content_type.startswith("image/"):
                return True
    return False


def binary_to_attachment(items: list[dict], response) -> list[dict]:
    """Post-receive hook: turn a raw image body into a binary attachment item."""
    raw = items[0]["json"]
    data = bytes(raw)
    return [
        {
            "binary": {
                "data": {
                    "data": base64.b64encode(data).decode("ascii"),
                    "mimeType": response.headers["content-type"],
                    "fileSize": str(len(data)),
                    "fileType": "image",
                },
            },
            "json": {},
        }
    ]


def request_routing(operation: dict, context: OperationContext) -> Routing:
    url = f"={replace_path_vars_to_parameter(context.pattern)}"
    if returns_image(operation):
        return Routing(
            request=RoutingRequest(
                method=context.method.upper(),
                url=url,
                encoding="arraybuffer",
                json_=False,
                headers={"Accept": "image/*"},
            ),
            output=RoutingOutput(post_receive=[binary_to_attachment]),
        )
    return Routing(
        request=RoutingRequest(method=context.method.upper(), url=url, encoding="json", json_=True),
    )


def operation_option(operation: dict, context: OperationContext, parser: OperationParser) -> OperationOption:
    return OperationOption(
        name=parser.name(operation, context),
        value=parser.value(operation, context),
        action=parser.action(operation, context),
        description=parser.description(operation, context),
        routing=request_routing(operation, context),
    )
