"""Naming and routing-expression helpers for node properties."""

import json
import re
from urllib.parse import quote

from openapi_to_node.text import start_case

VALUE_EXPRESSION = "={{ $value }}"
JSON_VALUE_EXPRESSION = "={{ JSON.parse($value) }}"
JOINED_VALUE_EXPRESSION = "={{ $value.join(',') }}"

_PATH_VAR_RE = re.compile(r"{([^{}]+)}")


def replace_path_vars_to_parameter(uri: str) -> str:
    """``/api/entities/{id}`` -> ``/api/entities/{{$parameter["id"]}}``.

    The parameter is referenced by its field name, so ``{user.id}`` reads ``user-id``.
    """
    return _PATH_VAR_RE.sub(lambda m: '{{$parameter["%s"]}}' % field_name(m.group(1)), uri)


def field_name(name: str) -> str:
    """Wire-safe property name: dots become dashes, the rest is URL-quoted."""
    return quote(name.replace(".", "-"), safe="")


def display_name(name: str) -> str:
    return start_case(name)


def pretty_json(value) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)
