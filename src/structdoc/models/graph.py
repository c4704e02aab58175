"""
Documentation graph models.

The graph is built in a single run and mutated only by the builder's
finalize pass, so its nodes are plain dataclasses. Appearances point back
at their owning RecordType; that reference is excluded from equality and
repr so self-referencing records compare and print without recursion.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field

from structdoc.models.text import Text


def wrap_name(prefix: str, name: str) -> str:
    """Join a module prefix and a bare name, skipping an empty prefix."""
    if not prefix:
        return name
    return f"{prefix}.{name}"


def record_key(module: str, name: str) -> str:
    """Identity of a record: its full dotted module and its bare name."""
    return wrap_name(module, name)


@dataclass
class Field:
    """A documented member of a record.

    Attributes:
        name: Declared attribute name
        tag: Wire-tag name, the externally visible identifier
        type: Display type, including container decoration
        type_ref: Reference key as computed by the resolver, empty when the
            field type is not a documented record. Informational only: it
            follows the module-prefix rule, so a by-value reference from a
            non-root module is the bare name
        text: Parsed documentation
        note: Trailing inline note
        target: record_key() of the record the field resolves to, used to
            attach examples and back-references
    """

    name: str
    tag: str
    type: str
    type_ref: str = ""
    text: Text = field(default_factory=Text)
    note: str = ""
    target: str = ""


@dataclass
class Appearance:
    """Back-reference: the owning record uses the target through `field_name`."""

    owner: "RecordType" = field(compare=False, repr=False)
    field_name: str = ""

    @property
    def type_name(self) -> str:
        return self.owner.get_name()


@dataclass
class RecordType:
    """A documented record type.

    Attributes:
        name: Bare type name
        module_prefix: Base name of the declaring module, empty for the root module
        text: Parsed type documentation
        fields: Collected fields in declaration order, embedded records flattened
        appears_in: Back-references in discovery order
        module: Dotted name of the declaring module
    """

    name: str
    module_prefix: str = ""
    text: Text = field(default_factory=Text)
    fields: list[Field] = field(default_factory=list)
    appears_in: list[Appearance] = field(default_factory=list)
    module: str = ""

    @property
    def key(self) -> str:
        """Identity within a run, see record_key()."""
        return record_key(self.module, self.name)

    def get_name(self) -> str:
        """Qualified name: prefix.Name outside the root module, Name inside it."""
        return wrap_name(self.module_prefix, self.name)

    def get_escaped_name(self) -> str:
        """Identifier-safe form of get_name() for generated code."""
        if not self.module_prefix:
            return self.name
        return f"{self.module_prefix.upper()}{self.name}"


@dataclass
class DocumentationGraph:
    """Finalized result of one generation run.

    Attributes:
        root: Name of the type the run was rooted at
        types: Every discovered record, in discovery order
    """

    root: str
    types: list[RecordType] = field(default_factory=list)

    def __iter__(self) -> Iterator[RecordType]:
        return iter(self.types)

    def __len__(self) -> int:
        return len(self.types)

    def get(self, name: str) -> RecordType | None:
        """Find a record by its qualified name."""
        for record in self.types:
            if record.get_name() == name:
                return record
        return None

    def names(self) -> list[str]:
        return [record.get_name() for record in self.types]
