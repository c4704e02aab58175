"""
structdoc - Source Loading

Loads Python packages into declaration descriptors (modules, classes and
their members) for the graph builder.
"""

from structdoc.source.annotations import AnnotationConverter
from structdoc.source.loader import (
    ModuleLoader,
    SourceComments,
    load_module,
    load_source,
    path_to_module,
)

__all__ = [
    "AnnotationConverter",
    "ModuleLoader",
    "SourceComments",
    "load_module",
    "load_source",
    "path_to_module",
]
