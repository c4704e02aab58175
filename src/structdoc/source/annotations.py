"""
Annotation to TypeExpr conversion.

Reduces a class attribute annotation to one of the TypeExpr variants.
Names are resolved through the module's import table so that types
imported from other modules become QualifiedName and typing constructs
are recognised whichever way they were imported.
"""

import ast
import logging

from structdoc.models.base import OpaqueKind
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

# Modules whose names are typing constructs rather than documentable types
TYPING_MODULES = frozenset(
    {
        "typing",
        "typing_extensions",
        "collections",
        "collections.abc",
        "queue",
        "asyncio",
        "builtins",
    }
)

MAPPING_NAMES = frozenset(
    {"dict", "Dict", "Mapping", "MutableMapping", "OrderedDict", "DefaultDict", "defaultdict"}
)
SEQUENCE_NAMES = frozenset(
    {
        "list",
        "List",
        "Sequence",
        "MutableSequence",
        "set",
        "Set",
        "frozenset",
        "FrozenSet",
        "AbstractSet",
        "MutableSet",
        "Iterable",
        "Collection",
        "deque",
        "Deque",
    }
)
TUPLE_NAMES = frozenset({"tuple", "Tuple"})
WRAPPER_NAMES = frozenset({"Annotated", "Final", "Required", "NotRequired", "ReadOnly"})
INTERFACE_NAMES = frozenset({"Any", "object"})
CALLABLE_NAMES = frozenset({"Callable", "Awaitable", "Coroutine"})
QUEUE_NAMES = frozenset({"Queue", "SimpleQueue", "LifoQueue", "PriorityQueue"})


class AnnotationConverter:
    """Converts annotation nodes of one module into TypeExpr values.

    Attributes:
        imports: Local alias to fully-qualified import target
    """

    def __init__(self, imports: dict[str, str]) -> None:
        self.imports = imports

    def convert(self, node: ast.expr | None) -> TypeExpr:
        """Convert an annotation node.

        Args:
            node: Annotation expression, None when missing

        Returns:
            The TypeExpr variant for the annotation
        """
        if node is None:
            return OpaqueType(OpaqueKind.UNKNOWN)

        if isinstance(node, ast.Constant):
            if isinstance(node.value, str):
                return self._convert_forward_ref(node.value)
            if node.value is None:
                return NamedType("None")
            return OpaqueType(OpaqueKind.UNKNOWN, repr(node.value))

        if isinstance(node, ast.Name):
            return self._convert_name(node)

        if isinstance(node, ast.Attribute):
            return self._convert_attribute(node)

        if isinstance(node, ast.Subscript):
            return self._convert_subscript(node)

        if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
            return self._convert_union(self._flatten_union(node))

        return OpaqueType(OpaqueKind.UNKNOWN, ast.unparse(node))

    def special_name(self, node: ast.expr) -> str | None:
        """Typing construct a name refers to, if any.

        Args:
            node: Name or attribute node

        Returns:
            Bare construct name ("Optional", "dict", ...) or None for
            names that refer to user types
        """
        if isinstance(node, ast.Name):
            target = self.imports.get(node.id)
            if target is None:
                return node.id
            module, _, name = target.rpartition(".")
            if module in TYPING_MODULES:
                return name
            return None

        if isinstance(node, ast.Attribute):
            dotted = self._resolve_dotted(node)
            if dotted is None:
                return None
            module, _, name = dotted.rpartition(".")
            if module in TYPING_MODULES:
                return name
        return None

    def _convert_forward_ref(self, value: str) -> TypeExpr:
        try:
            parsed = ast.parse(value, mode="eval")
        except SyntaxError:
            logger.warning(f"cannot parse forward reference {value!r}")
            return OpaqueType(OpaqueKind.UNKNOWN, value)
        return self.convert(parsed.body)

    def _convert_name(self, node: ast.Name) -> TypeExpr:
        special = self.special_name(node)
        opaque = self._opaque_for(special)
        if opaque is not None:
            return opaque

        target = self.imports.get(node.id)
        if target is not None and special is None and "." in target:
            module, _, name = target.rpartition(".")
            return QualifiedName(module=module, name=name)
        return NamedType(node.id)

    def _convert_attribute(self, node: ast.Attribute) -> TypeExpr:
        special = self.special_name(node)
        if special is not None:
            opaque = self._opaque_for(special)
            if opaque is not None:
                return opaque
            return NamedType(special)

        dotted = self._resolve_dotted(node)
        if dotted is None or "." not in dotted:
            return OpaqueType(OpaqueKind.UNKNOWN, ast.unparse(node))
        module, _, name = dotted.rpartition(".")
        return QualifiedName(module=module, name=name)

    def _convert_subscript(self, node: ast.Subscript) -> TypeExpr:
        special = self.special_name(node.value)
        args = list(node.slice.elts) if isinstance(node.slice, ast.Tuple) else [node.slice]

        if special in MAPPING_NAMES and len(args) == 2:
            return MapType(key=self.convert(args[0]), value=self.convert(args[1]))
        if special in SEQUENCE_NAMES and len(args) == 1:
            return SequenceType(element=self.convert(args[0]))
        if special in TUPLE_NAMES:
            if len(args) == 2 and isinstance(args[1], ast.Constant) and args[1].value is Ellipsis:
                return SequenceType(element=self.convert(args[0]))
            return OpaqueType(OpaqueKind.UNKNOWN, ast.unparse(node))
        if special == "Optional":
            return IndirectionType(target=self.convert(args[0]))
        if special == "Union":
            return self._convert_union(args)
        if special in WRAPPER_NAMES or special == "ClassVar":
            return self.convert(args[0])
        if special == "Literal":
            kinds = {type(arg.value).__name__ for arg in args if isinstance(arg, ast.Constant)}
            return NamedType(kinds.pop() if len(kinds) == 1 else "str")

        opaque = self._opaque_for(special)
        if opaque is not None:
            return opaque

        # User generics document as their origin type
        return self.convert(node.value)

    def _convert_union(self, members: list[ast.expr]) -> TypeExpr:
        remaining = [m for m in members if not (isinstance(m, ast.Constant) and m.value is None)]
        nullable = len(remaining) != len(members)
        if len(remaining) == 1:
            inner = self.convert(remaining[0])
            return IndirectionType(target=inner) if nullable else inner
        return OpaqueType(OpaqueKind.INTERFACE, " | ".join(ast.unparse(m) for m in members))

    def _flatten_union(self, node: ast.expr) -> list[ast.expr]:
        if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
            return self._flatten_union(node.left) + self._flatten_union(node.right)
        return [node]

    def _opaque_for(self, special: str | None) -> OpaqueType | None:
        if special in INTERFACE_NAMES:
            return OpaqueType(OpaqueKind.INTERFACE, special)
        if special in CALLABLE_NAMES:
            return OpaqueType(OpaqueKind.FUNC, special)
        if special in QUEUE_NAMES:
            return OpaqueType(OpaqueKind.CHAN, special)
        return None

    def _resolve_dotted(self, node: ast.expr) -> str | None:
        """Resolve an attribute chain through the import table."""
        parts: list[str] = []
        while isinstance(node, ast.Attribute):
            parts.append(node.attr)
            node = node.value
        if not isinstance(node, ast.Name):
            return None
        parts.append(node.id)
        parts.reverse()

        head = self.imports.get(parts[0], parts[0])
        return ".".join([head] + parts[1:])
