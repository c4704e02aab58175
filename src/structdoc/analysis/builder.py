"""
Struct Graph Builder.

Builds the documentation graph for one root record in two passes.

Discovery walks the records reachable from the root depth-first, in member
order. Every record becomes exactly one RecordType, created the first time
it is reached; the visited set is updated before a record's members are
collected, so cyclic and diamond-shaped references terminate and never
duplicate a record.

Finalization then walks every field of every record in discovery order and,
for each field resolving to a documented record, appends the field's
examples and a back-reference to that record.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

from structdoc.analysis.collector import FieldCollector, MemberResult, ResolverContext
from structdoc.analysis.comments import parse_comment
from structdoc.errors import NoDocumentableTypesError
from structdoc.models.declarations import ModuleDecls, SourceSet, TypeDecl
from structdoc.models.graph import Appearance, DocumentationGraph, RecordType, record_key

logger = logging.getLogger(__name__)


@dataclass
class _Frame:
    """A record whose members are still being collected."""

    record: RecordType
    members: Iterator[MemberResult]


@dataclass
class DiscoverySession:
    """State of one discovery pass.

    Owns the visited set (through its collector), the records discovered
    so far and the work-list of records whose members are pending.

    Attributes:
        source: Every loaded module
        collector: Field collector holding the visited set
        records: Discovered records in discovery order
    """

    source: SourceSet
    collector: FieldCollector
    records: list[RecordType] = field(default_factory=list)
    _pending: list[_Frame] = field(default_factory=list)

    @property
    def visited(self) -> set[str]:
        return self.collector.visited

    def discover(self, decl: TypeDecl, context: ResolverContext) -> RecordType:
        """Create the record for a declaration and queue its members.

        The caller is responsible for having marked the record visited.
        """
        record = RecordType(
            name=decl.name,
            module_prefix=context.prefix,
            text=parse_comment(decl.doc),
            module=decl.module,
        )
        self.records.append(record)
        self._pending.append(_Frame(record=record, members=self.collector.iter_members(decl, context)))
        return record

    def run(self) -> list[RecordType]:
        """Process the work-list until every reachable record is collected."""
        while self._pending:
            frame = self._pending[-1]
            result = next(frame.members, None)
            if result is None:
                self._pending.pop()
                continue

            if result.field is not None:
                frame.record.fields.append(result.field)
            if result.candidate is not None:
                candidate = result.candidate
                logger.debug(f"discovered {candidate.key} through {frame.record.get_name()}")
                self.discover(candidate.decl, candidate.context)
        return self.records


class StructGraphBuilder:
    """Builds documentation graphs from a loaded source set.

    Usage:
        source = load_source("path/to/package")
        graph = StructGraphBuilder(source).build("Config")
    """

    def __init__(self, source: SourceSet) -> None:
        """Initialize the builder.

        Args:
            source: Every module loaded for the run
        """
        self._source = source

    @property
    def source(self) -> SourceSet:
        return self._source

    def build(
        self,
        root_type_name: str,
        root_module: ModuleDecls | str | None = None,
    ) -> DocumentationGraph:
        """Discover and finalize the graph rooted at one record.

        Args:
            root_type_name: Name of the root record, matched case-insensitively
            root_module: Module (or dotted module name) declaring the root;
                every module is searched when omitted

        Returns:
            Finalized DocumentationGraph

        Raises:
            NoDocumentableTypesError: If the root cannot be found or nothing
                reachable from it has documented fields
            MissingDocumentationError: If a documented field has no comment
        """
        if isinstance(root_module, ModuleDecls):
            root_module = root_module.name

        found = self._source.find_root(root_type_name, root_module)
        if found is None or not found[1].is_record:
            raise NoDocumentableTypesError(root_type_name, root_module or self._source.root)
        module, decl = found

        session = self.start_session(module)
        context = session.collector.context_for(self._source, module)
        session.visited.add(record_key(decl.module, decl.name))
        session.discover(decl, context)
        records = session.run()
        _warn_name_collisions(records)

        if not any(record.fields for record in records):
            raise NoDocumentableTypesError(decl.name, module.path or module.name)

        finalize(records)
        for record in records:
            logger.info(f'generating docs for type: "{record.get_name()}"')
        return DocumentationGraph(root=decl.name, types=records)

    def start_session(self, root_module: ModuleDecls) -> DiscoverySession:
        """Fresh discovery state for a run rooted in `root_module`."""
        return DiscoverySession(
            source=self._source,
            collector=FieldCollector(root_module=root_module.name),
        )


def _warn_name_collisions(records: list[RecordType]) -> None:
    """Warn when distinct records share a display name."""
    seen: dict[str, RecordType] = {}
    for record in records:
        other = seen.setdefault(record.get_name(), record)
        if other is not record:
            logger.warning(
                f"{other.key} and {record.key} are both documented as {record.get_name()!r}"
            )


def finalize(records: list[RecordType]) -> None:
    """Attach field examples and back-references to the referenced records.

    Examples carried by a field are appended to the record the field
    points at, after that record's own examples; the owning record does not
    gain them. Both lists follow field order across the whole graph.

    Args:
        records: Discovered records in discovery order
    """
    by_key = {record.key: record for record in records}
    for record in records:
        for fld in record.fields:
            if not fld.target:
                continue
            target = by_key.get(fld.target)
            if target is None:
                continue
            target.text.examples.extend(example.model_copy() for example in fld.text.examples)
            target.appears_in.append(Appearance(owner=record, field_name=fld.tag))


def build_graph(
    source: SourceSet,
    root_type_name: str,
    root_module: ModuleDecls | str | None = None,
) -> DocumentationGraph:
    """Convenience wrapper around StructGraphBuilder.build()."""
    return StructGraphBuilder(source).build(root_type_name, root_module)
