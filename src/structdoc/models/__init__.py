"""
structdoc - Core Data Models

Declaration descriptors produced by the source loader, type expression
variants, parsed documentation text and the documentation graph.
"""

from structdoc.models.base import MemberOrigin, OpaqueKind, OutputFormat
from structdoc.models.declarations import MemberDecl, ModuleDecls, SourceSet, TypeDecl
from structdoc.models.graph import (
    Appearance,
    DocumentationGraph,
    Field,
    RecordType,
    wrap_name,
)
from structdoc.models.text import Example, Text
from structdoc.models.types import (
    IndirectionType,
    MapType,
    NamedType,
    OpaqueType,
    QualifiedName,
    SequenceType,
    TypeExpr,
)

__all__ = [
    # Enums
    "MemberOrigin",
    "OpaqueKind",
    "OutputFormat",
    # Declarations
    "MemberDecl",
    "ModuleDecls",
    "SourceSet",
    "TypeDecl",
    # Type expressions
    "IndirectionType",
    "MapType",
    "NamedType",
    "OpaqueType",
    "QualifiedName",
    "SequenceType",
    "TypeExpr",
    # Text
    "Example",
    "Text",
    # Graph
    "Appearance",
    "DocumentationGraph",
    "Field",
    "RecordType",
    "wrap_name",
]
