"""
structdoc - Documentation Analysis

Comment parsing, type reference resolution, field collection and the
two-pass graph builder that turns record declarations into a
documentation graph.
"""

from structdoc.analysis.builder import (
    DiscoverySession,
    StructGraphBuilder,
    build_graph,
    finalize,
)
from structdoc.analysis.collector import (
    NODOC_MARKER,
    Candidate,
    FieldCollector,
    MemberResult,
    ResolverContext,
)
from structdoc.analysis.comments import escape, parse_comment, unescape
from structdoc.analysis.resolver import display_type, reference_key

__all__ = [
    # Builder
    "DiscoverySession",
    "StructGraphBuilder",
    "build_graph",
    "finalize",
    # Collector
    "NODOC_MARKER",
    "Candidate",
    "FieldCollector",
    "MemberResult",
    "ResolverContext",
    # Comments
    "escape",
    "parse_comment",
    "unescape",
    # Resolver
    "display_type",
    "reference_key",
]
