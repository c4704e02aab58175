"""
structdoc: Configuration Documentation Generator.

Reads the record types of a Python codebase, starting from one root
record, and produces a structured index describing every record reachable
from it: fields, wire-tag names, display types, descriptions, examples,
allowed values and where each record is used.

Example:
    from structdoc import StructGraphBuilder, build_index, load_source, write_index

    source = load_source("path/to/package")
    graph = StructGraphBuilder(source).build("Config")
    write_index(build_index(graph), "json", "config_doc.json")
"""

from structdoc.analysis.builder import StructGraphBuilder, build_graph
from structdoc.emit.index import DocumentationIndex, build_index
from structdoc.emit.writers import write_index
from structdoc.source.loader import load_source
from structdoc.version import __version__

__all__ = [
    "__version__",
    "DocumentationIndex",
    "StructGraphBuilder",
    "build_graph",
    "build_index",
    "load_source",
    "write_index",
]
