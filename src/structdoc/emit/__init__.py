"""
structdoc - Documentation Emission

Converts a finalized documentation graph into a DocumentationIndex and
writes it as JSON, YAML or a generated Python module.
"""

from structdoc.emit.index import (
    AppearanceDoc,
    DocumentationIndex,
    ExampleDoc,
    FieldDoc,
    TypeDoc,
    build_index,
)
from structdoc.emit.writers import render_index, render_python, snake_case, write_index

__all__ = [
    "AppearanceDoc",
    "DocumentationIndex",
    "ExampleDoc",
    "FieldDoc",
    "TypeDoc",
    "build_index",
    "render_index",
    "render_python",
    "snake_case",
    "write_index",
]
