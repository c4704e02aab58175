"""
Error types raised by the documentation generator.

Authoring errors and zero-result conditions are fatal and surface to the
CLI. Resolution problems (unresolved imports, unknown annotation shapes)
are never raised; they are logged and the affected edge is left empty.
"""

from pathlib import Path


class StructdocError(Exception):
    """Base class for all fatal generator errors."""


class MissingDocumentationError(StructdocError):
    """Raised when a documented record has a field without documentation."""

    def __init__(self, type_name: str, field_name: str) -> None:
        """Initialize the error.

        Args:
            type_name: Name of the record declaring the field
            field_name: Declared name of the undocumented field
        """
        super().__init__(f"field {field_name!r} of type {type_name!r} is missing documentation")
        self.type_name = type_name
        self.field_name = field_name


class NoDocumentableTypesError(StructdocError):
    """Raised when nothing reachable from the root type can be documented."""

    def __init__(self, root: str, location: str | Path | None = None) -> None:
        message = f"failed to find types that could be documented for {root!r}"
        if location is not None:
            message = f"{message} in {location}"
        super().__init__(message)
        self.root = root
        self.location = location


class SourceLoadError(StructdocError):
    """Raised when the source location cannot be loaded at all."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        super().__init__(message)
        self.path = path

    def __str__(self) -> str:
        msg = super().__str__()
        if self.path:
            msg = f"{msg} (path: {self.path})"
        return msg


class EmitError(StructdocError):
    """Raised when the documentation artifact cannot be produced."""
