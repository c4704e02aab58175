"""
Field Collector.

Turns the members of one record declaration into documented Fields,
one member at a time. For each member the collector decides whether it is
documented at all, builds its Field, and reports the record declaration it
points at so the graph builder can discover it. Embedded records are
flattened: their fields are spliced into the embedding record at the
position of the embedding member.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

from structdoc.analysis.comments import parse_comment
from structdoc.analysis.resolver import display_type, reference_key, target_name
from structdoc.errors import MissingDocumentationError
from structdoc.models.base import MemberOrigin
from structdoc.models.declarations import MemberDecl, ModuleDecls, SourceSet, TypeDecl
from structdoc.models.graph import Field, record_key
from structdoc.models.types import QualifiedName

logger = logging.getLogger(__name__)

NODOC_MARKER = "docgen:nodoc"

# Re-export chains longer than this are treated as unresolved.
MAX_REEXPORT_DEPTH = 16


@dataclass(frozen=True)
class ResolverContext:
    """Where a record is declared.

    Attributes:
        source: Every loaded module
        module: Module declaring the record
        prefix: Module prefix applied to the record's names, empty in the root module
    """

    source: SourceSet
    module: ModuleDecls
    prefix: str = ""


@dataclass
class Candidate:
    """A record declaration reached through a member.

    Attributes:
        decl: The record declaration
        context: Resolver context of the declaring module
        embedded: Whether the member embeds the record
    """

    decl: TypeDecl
    context: ResolverContext
    embedded: bool = False

    @property
    def key(self) -> str:
        """Identity of the record, qualified by its full module name."""
        return record_key(self.decl.module, self.decl.name)


@dataclass
class MemberResult:
    """Outcome of collecting one member.

    Attributes:
        field: Documented field, None when the member is skipped or embedded
        candidate: Record to discover or embed, if any
    """

    field: Field | None = None
    candidate: Candidate | None = None


@dataclass
class FieldCollector:
    """Collects documented fields for records of one generation run.

    Attributes:
        root_module: Dotted name of the module the run is rooted at
        visited: Keys (record_key) of records already discovered
    """

    root_module: str
    visited: set[str] = field(default_factory=set)

    def context_for(self, source: SourceSet, module: ModuleDecls) -> ResolverContext:
        """Resolver context for records declared in `module`."""
        prefix = "" if module.name == self.root_module else module.base
        return ResolverContext(source=source, module=module, prefix=prefix)

    def collect_fields(
        self, decl: TypeDecl, context: ResolverContext
    ) -> tuple[list[Field], list[Candidate]]:
        """Collect one record's fields, flattening embedded records.

        Referenced records are reported, not recursed into.

        Args:
            decl: Record declaration
            context: Resolver context of the declaring module

        Returns:
            (fields, candidates) in member order
        """
        fields: list[Field] = []
        candidates: list[Candidate] = []
        for result in self.iter_members(decl, context):
            if result.field is not None:
                fields.append(result.field)
            if result.candidate is not None:
                candidates.append(result.candidate)
        return fields, candidates

    def iter_members(
        self,
        decl: TypeDecl,
        context: ResolverContext,
        chain: tuple[str, ...] = (),
    ) -> Iterator[MemberResult]:
        """Yield the collected members of a record lazily.

        Embedded records are expanded in place. The caller may discover a
        yielded candidate before resuming the iteration, which keeps
        discovery depth-first in member order.

        Args:
            decl: Record declaration
            context: Resolver context of the declaring module
            chain: Keys of the records currently being embedded into each other
        """
        chain = chain + (record_key(decl.module, decl.name),)
        for member in decl.members:
            result = self.collect_member(decl, member, context)
            candidate = result.candidate
            if candidate is not None and candidate.embedded:
                if candidate.key in chain:
                    logger.warning(f"{decl.name}: embedding {candidate.key} would recurse, skipping")
                    continue
                yield from self.iter_members(candidate.decl, candidate.context, chain)
                continue
            if result.field is None and candidate is None:
                continue
            yield result

    def collect_member(
        self, owner: TypeDecl, member: MemberDecl, context: ResolverContext
    ) -> MemberResult:
        """Collect a single member.

        Marks newly reached records as visited, so each record is reported
        for discovery at most once per run.

        Args:
            owner: Record declaring the member
            member: Member declaration
            context: Resolver context of the owner

        Returns:
            MemberResult with the field and/or candidate

        Raises:
            MissingDocumentationError: If a documented member has no comment
        """
        if member.embedded:
            return self._collect_embedded(owner, member, context)

        if member.tag is None:
            logger.debug(f"{owner.name}.{member.display_name}: no wire tag, skipping")
            return MemberResult()

        tag = member.tag.split(",")[0].strip()
        if tag in ("", "-"):
            logger.debug(f"{owner.name}.{member.display_name}: not serialized, skipping")
            return MemberResult()

        if NODOC_MARKER in member.doc:
            return MemberResult()

        if not member.name or member.name.startswith("_"):
            return MemberResult()

        if not member.doc.strip():
            raise MissingDocumentationError(owner.name, member.name)

        result = MemberResult(
            field=Field(
                name=member.name,
                tag=tag.lower(),
                type=display_type(member.type_expr, context.prefix, False),
                text=parse_comment(member.doc),
                note=member.note,
            )
        )

        candidate = self._resolve(member, context)
        if candidate is None:
            return result

        result.field.type_ref = reference_key(member.type_expr, context.prefix, False)
        result.field.target = candidate.key
        if candidate.key in self.visited:
            logger.debug(f"{owner.name}.{member.name}: {candidate.key} already discovered")
        else:
            self.visited.add(candidate.key)
            result.candidate = candidate
        return result

    def _collect_embedded(
        self, owner: TypeDecl, member: MemberDecl, context: ResolverContext
    ) -> MemberResult:
        if NODOC_MARKER in member.doc:
            return MemberResult()

        candidate = self._resolve(member, context, quiet=member.origin == MemberOrigin.BASE)
        if candidate is None:
            logger.debug(f"{owner.name}: embedded {member.display_name} is not a record, skipping")
            return MemberResult()

        candidate.embedded = True
        return MemberResult(candidate=candidate)

    def _resolve(
        self, member: MemberDecl, context: ResolverContext, quiet: bool = False
    ) -> Candidate | None:
        """Locate the documentable record a member type points at."""
        name = target_name(member.type_expr)
        if name is None:
            return None

        if isinstance(name, QualifiedName):
            found = self._find_qualified(context.source, name.module, name.name, quiet)
        else:
            found = self._find_local(context.module, name.name)
        if found is None:
            return None

        module, decl = found
        if not decl.is_record:
            return None
        if not decl.exported and not member.embedded:
            logger.debug(f"{decl.module}.{decl.name} is not exported, not documenting it")
            return None
        return Candidate(decl=decl, context=self.context_for(context.source, module))

    def _find_local(self, module: ModuleDecls, name: str) -> tuple[ModuleDecls, TypeDecl] | None:
        decl = module.find_type(name)
        if decl is not None:
            return module, decl
        return None

    def _find_qualified(
        self, source: SourceSet, module_name: str, name: str, quiet: bool = False
    ) -> tuple[ModuleDecls, TypeDecl] | None:
        """Find an imported declaration, following re-exports."""
        for _ in range(MAX_REEXPORT_DEPTH):
            module = source.get_module(module_name)
            if module is None:
                message = f"no module found for type {name}: {module_name}"
                if quiet or not source.is_internal(module_name):
                    logger.debug(message)
                else:
                    logger.warning(message)
                return None

            decl = module.find_type(name)
            if decl is not None:
                return module, decl

            target = module.imports.get(name)
            if target is None or "." not in target:
                if not quiet:
                    logger.warning(f"type {name} not declared in module {module_name}")
                return None
            module_name, name = target.rsplit(".", 1)

        logger.warning(f"re-export chain too long resolving {module_name}.{name}")
        return None
