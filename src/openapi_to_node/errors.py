"""Exceptions raised while turning an OpenAPI document into node properties."""


class OpenAPINodeError(Exception):
    """Base class for all errors raised by openapi_to_node."""


class DocumentLoadError(OpenAPINodeError):
    """The input file is not a readable OpenAPI document."""


class ReferenceNotFoundError(OpenAPINodeError, KeyError):
    """A ``$ref`` pointer has no target inside the document."""

    def __init__(self, ref: str, segment: str | None = None):
        self.ref = ref
        self.segment = segment
        super().__init__(ref)

    def __str__(self) -> str:
        if self.segment is None:
            return f"Schema not found for ref '{self.ref}'"
        return f"Schema not found for ref '{self.ref}' (missing '{self.segment}')"


class NoOperationsError(OpenAPINodeError):
    """The document did not produce a single resource."""

    def __init__(self, message: str = "No operations found in OpenAPI document"):
        super().__init__(message)


class BodySchemaUnsupportedError(OpenAPINodeError):
    """The request body cannot be expressed as node properties."""


class OperationBuildError(OpenAPINodeError):
    """Building one operation failed; carries the log bindings of that operation."""

    def __init__(self, bindings: dict, cause: Exception):
        self.bindings = bindings
        self.cause = cause
        super().__init__(f"{bindings.get('method', '').upper()} {bindings.get('pattern', '')}: {cause}")
