"""
Python Source Loader.

Loads a package directory (or a single module) into a SourceSet using the
standard library ast and tokenize modules. Each top-level class becomes a
TypeDecl; its annotated attributes and base classes become MemberDecls.

Documentation attached to a class or attribute is its docstring (attribute
docstrings follow the annotated assignment) or, failing that, the block of
`#` comments directly above it. The trailing comment on an attribute's line
is kept as its inline note.

Wire tags are read from the attribute's default value:

    port: int = field(metadata={"yaml": "port,omitempty"})
    name: str = Field(alias="name")
"""

import ast
import inspect
import io
import logging
import tokenize
from dataclasses import dataclass, field
from pathlib import Path

from structdoc.errors import SourceLoadError
from structdoc.models.base import MemberOrigin
from structdoc.models.declarations import MemberDecl, ModuleDecls, SourceSet, TypeDecl
from structdoc.source.annotations import AnnotationConverter

logger = logging.getLogger(__name__)

TAG_METADATA_KEY = "yaml"
TAG_KEYWORDS = ("alias", "serialization_alias")
INLINE_OPTION = "inline"

NON_RECORD_BASES = frozenset(
    {
        "Enum",
        "IntEnum",
        "StrEnum",
        "Flag",
        "IntFlag",
        "Exception",
        "BaseException",
        "Protocol",
    }
)

# Bases that carry no documented members of their own
IGNORED_BASES = frozenset({"object", "BaseModel", "TypedDict", "NamedTuple", "str", "int"})

EXCLUDED_DIRS = frozenset({"__pycache__", "node_modules", "venv"})


@dataclass
class SourceComments:
    """Comments of one source file, keyed by line number.

    Attributes:
        standalone: Comments on lines holding nothing else
        trailing: Comments following code on the same line
    """

    standalone: dict[int, str] = field(default_factory=dict)
    trailing: dict[int, str] = field(default_factory=dict)

    @classmethod
    def from_source(cls, source: str) -> "SourceComments":
        comments = cls()
        lines = source.splitlines()
        tokens = tokenize.generate_tokens(io.StringIO(source).readline)
        for tok in tokens:
            if tok.type != tokenize.COMMENT:
                continue
            line, col = tok.start
            text = _strip_comment(tok.string)
            if lines[line - 1][:col].strip():
                comments.trailing[line] = text
            else:
                comments.standalone[line] = text
        return comments

    def block_above(self, line: int) -> str:
        """Contiguous standalone comments ending right above `line`."""
        block: list[str] = []
        current = line - 1
        while current in self.standalone:
            block.append(self.standalone[current])
            current -= 1
        block.reverse()
        return "\n".join(block)


def _strip_comment(text: str) -> str:
    """Remove the comment marker and the single space following it."""
    text = text[1:]
    if text.startswith(" "):
        text = text[1:]
    return text.rstrip()


def path_to_module(file_path: Path, root: Path) -> str:
    """Convert a file path to a dotted module name.

    Args:
        file_path: Path to the Python file
        root: Directory module names are relative to

    Returns:
        Module name in dotted notation
    """
    try:
        relative = file_path.relative_to(root)
    except ValueError:
        relative = Path(file_path.name)

    parts = list(relative.parts)
    if parts and parts[-1].endswith(".py"):
        parts[-1] = parts[-1][:-3]
    if parts and parts[-1] == "__init__" and len(parts) > 1:
        parts = parts[:-1]
    return ".".join(parts)


class ModuleLoader:
    """Builds the declarations of one module from its source text."""

    def __init__(self, module_name: str, is_package: bool = False) -> None:
        """Initialize the loader.

        Args:
            module_name: Dotted name of the module
            is_package: Whether the module is a package's __init__
        """
        self.module_name = module_name
        self.is_package = is_package

    def load(self, source: str, path: Path | None = None) -> ModuleDecls:
        """Parse source text into module declarations.

        Raises:
            SyntaxError: If the source does not parse
        """
        tree = ast.parse(source, filename=str(path) if path else "<string>")
        comments = SourceComments.from_source(source)

        module = ModuleDecls(name=self.module_name, path=path)
        for node in tree.body:
            if isinstance(node, ast.Import):
                for alias in node.names:
                    name = alias.asname if alias.asname else alias.name.split(".")[0]
                    module.imports[name] = alias.name if alias.asname else name
            elif isinstance(node, ast.ImportFrom):
                base = self._resolve_import_base(node)
                for alias in node.names:
                    name = alias.asname if alias.asname else alias.name
                    module.imports[name] = f"{base}.{alias.name}" if base else alias.name

        converter = AnnotationConverter(module.imports)
        for node in tree.body:
            if isinstance(node, ast.ClassDef):
                decl = self._load_class(node, converter, comments)
                module.types[decl.name] = decl
        return module

    def _resolve_import_base(self, node: ast.ImportFrom) -> str:
        """Absolute module an ImportFrom imports from."""
        if not node.level:
            return node.module or ""

        package = self.module_name.split(".")
        if not self.is_package:
            package = package[:-1]
        if node.level > 1:
            package = package[: len(package) - (node.level - 1)]
        if node.module:
            package.append(node.module)
        return ".".join(package)

    def _load_class(
        self,
        node: ast.ClassDef,
        converter: AnnotationConverter,
        comments: SourceComments,
    ) -> TypeDecl:
        first_line = node.decorator_list[0].lineno if node.decorator_list else node.lineno
        decl = TypeDecl(
            name=node.name,
            module=self.module_name,
            doc=self._docstring(node) or comments.block_above(first_line),
            line=node.lineno,
        )

        base_names = [
            converter.special_name(base) or ast.unparse(base).rsplit(".", 1)[-1]
            for base in node.bases
        ]
        if any(n in NON_RECORD_BASES or n.endswith(("Error", "Exception")) for n in base_names):
            decl.is_record = False
            return decl

        for base, base_name in zip(node.bases, base_names):
            if isinstance(base, (ast.Name, ast.Attribute)) and base_name not in IGNORED_BASES:
                decl.members.append(
                    MemberDecl(
                        name=None,
                        type_expr=converter.convert(base),
                        embedded=True,
                        origin=MemberOrigin.BASE,
                        line=node.lineno,
                    )
                )

        body = node.body
        for index, stmt in enumerate(body):
            if not isinstance(stmt, ast.AnnAssign) or not isinstance(stmt.target, ast.Name):
                continue
            if converter.special_name(self._annotation_origin(stmt.annotation)) == "ClassVar":
                continue

            following = body[index + 1] if index + 1 < len(body) else None
            doc = self._attribute_docstring(following) or comments.block_above(stmt.lineno)
            tag = self._wire_tag(stmt.value)
            options = tag.split(",")[1:] if tag else []

            decl.members.append(
                MemberDecl(
                    name=stmt.target.id,
                    type_expr=converter.convert(stmt.annotation),
                    tag=tag,
                    doc=doc,
                    note=comments.trailing.get(stmt.end_lineno or stmt.lineno, ""),
                    embedded=INLINE_OPTION in (o.strip() for o in options),
                    line=stmt.lineno,
                )
            )
        return decl

    @staticmethod
    def _annotation_origin(node: ast.expr) -> ast.expr:
        if isinstance(node, ast.Subscript):
            return node.value
        return node

    @staticmethod
    def _docstring(node: ast.ClassDef) -> str:
        doc = ast.get_docstring(node)
        return doc or ""

    @staticmethod
    def _attribute_docstring(node: ast.stmt | None) -> str:
        if (
            isinstance(node, ast.Expr)
            and isinstance(node.value, ast.Constant)
            and isinstance(node.value.value, str)
        ):
            return inspect.cleandoc(node.value.value)
        return ""

    @staticmethod
    def _wire_tag(value: ast.expr | None) -> str | None:
        """Wire tag declared in a field() / Field() default, if any."""
        if not isinstance(value, ast.Call):
            return None

        for keyword in value.keywords:
            if keyword.arg == "metadata" and isinstance(keyword.value, ast.Dict):
                for key, item in zip(keyword.value.keys, keyword.value.values):
                    if (
                        isinstance(key, ast.Constant)
                        and key.value == TAG_METADATA_KEY
                        and isinstance(item, ast.Constant)
                        and isinstance(item.value, str)
                    ):
                        return item.value

        for keyword in value.keywords:
            if (
                keyword.arg in TAG_KEYWORDS
                and isinstance(keyword.value, ast.Constant)
                and isinstance(keyword.value.value, str)
            ):
                return keyword.value.value
        return None


def load_module(source: str, module_name: str, is_package: bool = False) -> ModuleDecls:
    """Load declarations from source text.

    Args:
        source: Python source code
        module_name: Dotted module name to register the declarations under
        is_package: Whether the source is a package __init__

    Returns:
        ModuleDecls for the source
    """
    return ModuleLoader(module_name, is_package).load(source)


def load_source(path: str | Path) -> SourceSet:
    """Load every module under a package directory or a single file.

    Files that cannot be read or parsed are logged and skipped.

    Args:
        path: Package directory or .py file

    Returns:
        SourceSet with one ModuleDecls per loaded file

    Raises:
        SourceLoadError: If the path does not exist or holds no modules
    """
    path = Path(path).resolve()
    if not path.exists():
        raise SourceLoadError("Source path not found", path=path)

    root = path.parent
    if path.is_file():
        files = [path]
    else:
        files = sorted(
            p
            for p in path.rglob("*.py")
            if not any(
                part.startswith(".") or part in EXCLUDED_DIRS
                for part in p.relative_to(path).parts[:-1]
            )
        )

    source_set = SourceSet(root=path)
    for file_path in files:
        module_name = path_to_module(file_path, root)
        try:
            text = file_path.read_text(encoding="utf-8")
            module = ModuleLoader(module_name, file_path.name == "__init__.py").load(text, file_path)
        except (SyntaxError, UnicodeDecodeError, tokenize.TokenError) as e:
            logger.warning(f"Failed to load {file_path}: {e}")
            continue
        source_set.add_module(module)

    if not source_set.modules:
        raise SourceLoadError("No Python modules found", path=path)

    logger.debug(f"Loaded {len(source_set.modules)} modules from {path}")
    return source_set
