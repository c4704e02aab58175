"""
Base enumerations used throughout the data models.

These enums provide type-safe values for categorical fields
and keep the loader, resolver and emitters in agreement.
"""

from enum import Enum


class OpaqueKind(str, Enum):
    """Annotation shapes that never resolve to a documented record."""

    STRUCT = "struct"  # Anonymous record
    INTERFACE = "interface"  # Any / object / open unions
    FUNC = "func"  # Callable
    CHAN = "chan"  # Queue-like channels
    UNKNOWN = "unknown"  # Anything the loader could not classify


class MemberOrigin(str, Enum):
    """Where a record member was declared."""

    FIELD = "field"  # Annotated class attribute
    BASE = "base"  # Base class, flattened like an embedded member


class OutputFormat(str, Enum):
    """Serialization formats supported by the emitter."""

    JSON = "json"
    YAML = "yaml"
    PYTHON = "python"
