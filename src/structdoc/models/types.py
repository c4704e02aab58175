"""
Type expression variants.

A declared member type is reduced by the source loader to one of the
variants below. Resolution (reference keys and display names) dispatches
on the variant, never on the loader's syntax nodes.
"""

from dataclasses import dataclass

from structdoc.models.base import OpaqueKind


@dataclass(frozen=True)
class MapType:
    """Mapping from key type to value type."""

    key: "TypeExpr"
    value: "TypeExpr"


@dataclass(frozen=True)
class SequenceType:
    """Homogeneous sequence of elements."""

    element: "TypeExpr"


@dataclass(frozen=True)
class IndirectionType:
    """Nullable reference to another type (the pointer analogue)."""

    target: "TypeExpr"


@dataclass(frozen=True)
class QualifiedName:
    """Type imported from another module.

    Attributes:
        module: Fully-qualified dotted module name the type comes from
        name: Bare type name inside that module
    """

    module: str
    name: str

    @property
    def module_base(self) -> str:
        """Last dotted component of the module, used as display prefix."""
        return self.module.rsplit(".", 1)[-1]


@dataclass(frozen=True)
class NamedType:
    """Unqualified type name, local to the declaring module or builtin."""

    name: str


@dataclass(frozen=True)
class OpaqueType:
    """Shape that cannot be referenced (callables, open unions, ...)."""

    kind: OpaqueKind = OpaqueKind.UNKNOWN
    source: str = ""


TypeExpr = MapType | SequenceType | IndirectionType | QualifiedName | NamedType | OpaqueType
