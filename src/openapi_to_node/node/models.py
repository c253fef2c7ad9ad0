"""Output models: the node property shape consumed by the automation runtime.

Models use snake_case attributes and dump to the camelCase keys the runtime
expects. ``dump()`` drops unset (``None``) keys.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_serializer
from pydantic.alias_generators import to_camel


class PropertyType(str, Enum):
    """How the runtime renders and validates a property."""

    STRING = "string"
    BOOLEAN = "boolean"
    NUMBER = "number"
    JSON = "json"
    OPTIONS = "options"
    MULTI_OPTIONS = "multiOptions"
    COLLECTION = "collection"
    NOTICE = "notice"


class _NodeModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    def dump(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class DisplayOptions(_NodeModel):
    show: dict[str, list[str]]


class RoutingSend(_NodeModel):
    type: str  # query / body
    property: str
    value: str = "={{ $value }}"
    property_in_dot_notation: bool = False


class RoutingRequest(_NodeModel):
    method: str | None = None
    url: str | None = None
    encoding: str | None = None
    json_: bool | None = Field(default=None, alias="json")
    headers: dict[str, str] | None = None
    body: str | None = None


class RoutingOutput(_NodeModel):
    post_receive: list[Callable] | None = None


class Routing(_NodeModel):
    send: RoutingSend | None = None
    request: RoutingRequest | None = None
    output: RoutingOutput | None = None


class OptionChoice(_NodeModel):
    """One choice of an ``options``/``multiOptions`` property or the resource selector."""

    name: str
    value: Any
    description: str | None = None

    @model_serializer(mode="wrap")
    def _keep_null_value(self, handler):
        # A null enum literal is still a choice
        data = handler(self)
        data.setdefault("value", self.value)
        return data


class OperationOption(_NodeModel):
    """One entry of a resource's operation selector."""

    name: str
    value: str
    action: str
    description: str
    routing: Routing


class NodeProperty(_NodeModel):
    """A single UI field bound to a request parameter or body property."""

    display_name: str
    name: str
    type: PropertyType
    default: Any = ""
    required: bool | None = None
    description: str | None = None
    placeholder: str | None = None
    no_data_expression: bool | None = None
    type_options: dict[str, Any] | None = None
    display_options: DisplayOptions | None = None
    options: list[OptionChoice | OperationOption | NodeProperty] | None = None
    routing: Routing | None = None


class Override(BaseModel):
    """Patch ``replace`` onto every property matching the partial pattern ``find``."""

    find: dict[str, Any]
    replace: dict[str, Any]
