"""
Type Reference Resolver.

Computes, for a declared member type, the display string shown in the
documentation and the reference key used to link the field to the record
it points at.

Both computations follow the same rules:

- a map resolves through its value type (the display form renders both sides)
- a sequence resolves through its element type
- an indirection resolves through its target and allows the module prefix
  on its direct child
- an imported type is always shown as <module-base>.<Name>
- a local name only gets the module prefix directly below an indirection,
  and only when a prefix is set
- opaque shapes are not referenceable
"""

import logging

from structdoc.models.base import OpaqueKind
from structdoc.models.graph import wrap_name
from structdoc.models.types import (
    IndirectionType,
    MapType,
    NamedType,
    OpaqueType,
    QualifiedName,
    SequenceType,
    TypeExpr,
)

logger = logging.getLogger(__name__)

OPAQUE_DISPLAY = {
    OpaqueKind.STRUCT: "struct",
    OpaqueKind.INTERFACE: "interface{}",
}


def reference_key(type_expr: TypeExpr, prefix: str = "", apply: bool = False) -> str:
    """Bare reference name of the type a member points at.

    Args:
        type_expr: Declared member type
        prefix: Module prefix of the declaring record
        apply: Whether the prefix may be applied to an unqualified name

    Returns:
        Reference key, or "" when the type cannot be referenced
    """
    if isinstance(type_expr, MapType):
        return reference_key(type_expr.value, prefix, False)
    if isinstance(type_expr, SequenceType):
        return reference_key(type_expr.element, prefix, False)
    if isinstance(type_expr, IndirectionType):
        return reference_key(type_expr.target, prefix, True)
    if isinstance(type_expr, QualifiedName):
        return wrap_name(type_expr.module_base, type_expr.name)
    if isinstance(type_expr, NamedType):
        if apply and prefix:
            return wrap_name(prefix, type_expr.name)
        return type_expr.name
    return ""


def display_type(type_expr: TypeExpr, prefix: str = "", apply: bool = False) -> str:
    """Human readable type of a member.

    Args:
        type_expr: Declared member type
        prefix: Module prefix of the declaring record
        apply: Whether the prefix may be applied to an unqualified name

    Returns:
        Display string such as "[]server.Listener" or "map[str]int"
    """
    if isinstance(type_expr, MapType):
        key = display_type(type_expr.key, prefix, False)
        value = display_type(type_expr.value, prefix, False)
        return f"map[{key}]{value}"
    if isinstance(type_expr, SequenceType):
        return "[]" + display_type(type_expr.element, prefix, False)
    if isinstance(type_expr, IndirectionType):
        return display_type(type_expr.target, prefix, True)
    if isinstance(type_expr, QualifiedName):
        return wrap_name(type_expr.module_base, type_expr.name)
    if isinstance(type_expr, NamedType):
        if apply and prefix:
            return wrap_name(prefix, type_expr.name)
        return type_expr.name
    if isinstance(type_expr, OpaqueType) and type_expr.kind in OPAQUE_DISPLAY:
        return OPAQUE_DISPLAY[type_expr.kind]

    logger.warning(f"unknown type shape: {type_expr!r}")
    return ""


def target_name(type_expr: TypeExpr) -> QualifiedName | NamedType | None:
    """Innermost name a member type resolves through, if any.

    Used by the collector to locate the declaration behind a reference
    key. Follows the same path as reference_key().
    """
    if isinstance(type_expr, MapType):
        return target_name(type_expr.value)
    if isinstance(type_expr, SequenceType):
        return target_name(type_expr.element)
    if isinstance(type_expr, IndirectionType):
        return target_name(type_expr.target)
    if isinstance(type_expr, (QualifiedName, NamedType)):
        return type_expr
    return None
