"""
Documentation index models.

The serializable form of a finalized documentation graph. Every record is
emitted exactly once, in discovery order, with its fields in collection
order and its back-references in propagation order. Text is stored plain
(unescaped); writers escape again where they embed it in code.
"""

from pydantic import BaseModel, Field

from structdoc.analysis.comments import unescape
from structdoc.models.graph import DocumentationGraph, RecordType
from structdoc.models.graph import Field as GraphField
from structdoc.models.text import Text


class ExampleDoc(BaseModel):
    """A named example."""

    name: str = Field(default="", description="Example title")
    value: str = Field(..., min_length=1, description="Example value")


class AppearanceDoc(BaseModel):
    """Where a type is used."""

    type_name: str = Field(..., description="Qualified name of the owning type")
    field_name: str = Field(..., description="Wire-tag name of the owning field")


class FieldDoc(BaseModel):
    """Documentation of one field.

    Attributes:
        name: Wire-tag name
        type: Display type
        note: Inline note
        description: Long description
        comment: Short comment (first line of the description)
        examples: Examples with a value
        values: Allowed values
    """

    name: str = Field(..., min_length=1, description="Wire-tag name")
    type: str = Field(default="", description="Display type")
    note: str = Field(default="", description="Inline note")
    description: str = Field(default="", description="Long description")
    comment: str = Field(default="", description="Short comment")
    examples: list[ExampleDoc] = Field(default_factory=list)
    values: list[str] = Field(default_factory=list)


class TypeDoc(BaseModel):
    """Documentation of one record type.

    Attributes:
        type: Qualified type name
        identifier: Identifier-safe name for generated code
        description: Long description
        comment: Short comment
        examples: Own examples followed by examples propagated from fields
        appears_in: Back-references
        fields: Documented fields
    """

    type: str = Field(..., min_length=1, description="Qualified type name")
    identifier: str = Field(..., min_length=1, description="Identifier-safe name")
    description: str = Field(default="")
    comment: str = Field(default="")
    examples: list[ExampleDoc] = Field(default_factory=list)
    appears_in: list[AppearanceDoc] = Field(default_factory=list)
    fields: list[FieldDoc] = Field(default_factory=list)


class DocumentationIndex(BaseModel):
    """Documentation for every type reachable from one root type.

    Attributes:
        name: Root type name
        package: Package the generated artifact belongs to
        title: Document title
        header: Document description
        file: Destination the artifact is written to
        types: Documented types in discovery order
    """

    name: str = Field(..., min_length=1, description="Root type name")
    package: str = Field(default="main", description="Package of the generated artifact")
    title: str = Field(default="")
    header: str = Field(default="")
    file: str = Field(default="")
    types: list[TypeDoc] = Field(default_factory=list)

    def get_type(self, name: str) -> TypeDoc | None:
        for type_doc in self.types:
            if type_doc.type == name:
                return type_doc
        return None


def _examples(text: Text) -> list[ExampleDoc]:
    return [
        ExampleDoc(name=unescape(example.name), value=example.value)
        for example in text.examples
        if example.value
    ]


def _field_doc(fld: GraphField) -> FieldDoc:
    return FieldDoc(
        name=fld.tag,
        type=fld.type,
        note=fld.note,
        description=unescape(fld.text.description),
        comment=unescape(fld.text.comment),
        examples=_examples(fld.text),
        values=list(fld.text.values),
    )


def _type_doc(record: RecordType) -> TypeDoc:
    return TypeDoc(
        type=record.get_name(),
        identifier=record.get_escaped_name(),
        description=unescape(record.text.description),
        comment=unescape(record.text.comment),
        examples=_examples(record.text),
        appears_in=[
            AppearanceDoc(type_name=appearance.type_name, field_name=appearance.field_name)
            for appearance in record.appears_in
        ],
        fields=[_field_doc(fld) for fld in record.fields],
    )


def build_index(
    graph: DocumentationGraph,
    package: str = "main",
    title: str = "",
    header: str = "",
    file: str = "",
) -> DocumentationIndex:
    """Convert a finalized graph into its serializable index.

    Args:
        graph: Finalized documentation graph
        package: Package of the generated artifact
        title: Document title
        header: Document description
        file: Destination the artifact is written to

    Returns:
        DocumentationIndex with one TypeDoc per record
    """
    return DocumentationIndex(
        name=graph.root,
        package=package,
        title=title,
        header=header,
        file=file,
        types=[_type_doc(record) for record in graph],
    )
