"""Naming policy for resources (document tags)."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ResourceParser(Protocol):
    def name(self, tag: dict) -> str: ...

    def value(self, tag: dict) -> str: ...

    def description(self, tag: dict) -> str: ...


class DefaultResourceParser:
    """Uses the raw tag name for both label and value."""

    def name(self, tag: dict) -> str:
        return tag["name"]

    def value(self, tag: dict) -> str:
        return tag["name"]

    def description(self, tag: dict) -> str:
        return tag.get("description") or ""
