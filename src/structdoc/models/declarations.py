"""
Declaration descriptors produced by the source loader.

These are the traversable view of a codebase that the graph builder
consumes: modules, their type declarations and, for record declarations,
the ordered list of members.
"""

from dataclasses import dataclass, field
from pathlib import Path

from structdoc.models.base import MemberOrigin
from structdoc.models.types import TypeExpr


@dataclass
class MemberDecl:
    """A single member of a record declaration.

    Attributes:
        name: Declared attribute name, None for embedded members
        type_expr: Declared type, reduced to a TypeExpr variant
        tag: Raw wire tag ("name,omitempty", "-", ",inline") or None
        doc: Attached documentation comment, possibly empty
        note: Trailing inline comment on the declaration line
        embedded: Whether the member is flattened into its owner
        origin: Whether the member is a class attribute or a base class
        line: Source line of the declaration
    """

    name: str | None
    type_expr: TypeExpr
    tag: str | None = None
    doc: str = ""
    note: str = ""
    embedded: bool = False
    origin: MemberOrigin = MemberOrigin.FIELD
    line: int = 0

    @property
    def display_name(self) -> str:
        """Name used in log and error messages."""
        if self.name:
            return self.name
        return f"<embedded line {self.line}>"


@dataclass
class TypeDecl:
    """A top-level class declaration.

    Attributes:
        name: Class name
        module: Dotted name of the declaring module
        doc: Class documentation comment, possibly empty
        members: Ordered member declarations
        is_record: False for enums, exceptions and protocols
        line: Source line of the class statement
    """

    name: str
    module: str
    doc: str = ""
    members: list[MemberDecl] = field(default_factory=list)
    is_record: bool = True
    line: int = 0

    @property
    def exported(self) -> bool:
        """Public classes carry no leading underscore."""
        return not self.name.startswith("_")


@dataclass
class ModuleDecls:
    """All declarations of one module.

    Attributes:
        name: Dotted module name
        path: File the module was loaded from
        types: Class declarations keyed by name, in source order
        imports: Local alias to fully-qualified import target
    """

    name: str
    path: Path | None = None
    types: dict[str, TypeDecl] = field(default_factory=dict)
    imports: dict[str, str] = field(default_factory=dict)

    @property
    def base(self) -> str:
        """Last dotted component, used as the module prefix."""
        return self.name.rsplit(".", 1)[-1]

    def find_type(self, name: str, fold_case: bool = False) -> TypeDecl | None:
        """Look up a class declaration by name.

        Args:
            name: Class name to look for
            fold_case: Compare names case-insensitively

        Returns:
            The matching declaration, or None
        """
        if not fold_case:
            return self.types.get(name)
        wanted = name.casefold()
        for decl in self.types.values():
            if decl.name.casefold() == wanted:
                return decl
        return None


@dataclass
class SourceSet:
    """Every module loaded from one source location."""

    root: Path | None = None
    modules: dict[str, ModuleDecls] = field(default_factory=dict)

    def get_module(self, name: str) -> ModuleDecls | None:
        return self.modules.get(name)

    def add_module(self, module: ModuleDecls) -> None:
        self.modules[module.name] = module

    def is_internal(self, module_name: str) -> bool:
        """Whether a module belongs to a loaded top-level package."""
        top = module_name.split(".", 1)[0]
        return any(name.split(".", 1)[0] == top for name in self.modules)

    def find_root(self, type_name: str, module: str | None = None) -> tuple[ModuleDecls, TypeDecl] | None:
        """Find the exported class a generation run is rooted at.

        Args:
            type_name: Class name, matched case-insensitively
            module: Restrict the search to this module

        Returns:
            (module, declaration) pair or None when nothing matches
        """
        if module is not None:
            candidates = [self.modules[module]] if module in self.modules else []
        else:
            candidates = [self.modules[name] for name in sorted(self.modules)]

        for mod in candidates:
            decl = mod.find_type(type_name, fold_case=True)
            if decl is not None and decl.exported:
                return mod, decl
        return None
