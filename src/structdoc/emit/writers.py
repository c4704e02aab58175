"""
Documentation Index Writers.

Serializes a DocumentationIndex as JSON, YAML or a generated Python
module. The Python module is rendered from string templates and compiled
before it is written, so a broken artifact never reaches the disk.
"""

import json
import logging
import re
from pathlib import Path
from string import Template

import yaml

from structdoc.analysis.comments import escape
from structdoc.emit.index import DocumentationIndex, ExampleDoc, FieldDoc, TypeDoc
from structdoc.errors import EmitError
from structdoc.models.base import OutputFormat

logger = logging.getLogger(__name__)

MODULE_TEMPLATE = Template(
    '''# DO NOT EDIT: this file is automatically generated by structdoc
"""Documentation for ${name} (package ${package})."""

${type_docs}

def get_${func_name}_doc() -> dict:
    """Return documentation for the file ${file}."""
    return {
        "name": "${name}",
        "title": "${title}",
        "description": "${header}",
        "types": [
${type_refs}
        ],
    }
'''
)

TYPE_TEMPLATE = Template(
    """${var} = {
    "type": "${type}",
    "comment": "${comment}",
    "description": "${description}",
    "examples": [${examples}],
    "appears_in": [${appears_in}],
    "fields": [
${fields}
    ],
}
"""
)

FIELD_TEMPLATE = Template(
    """        {
            "name": "${name}",
            "type": "${type}",
            "note": "${note}",
            "description": "${description}",
            "comment": "${comment}",
            "examples": [${examples}],
            "values": [${values}],
        },"""
)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def snake_case(name: str) -> str:
    """Convert a CamelCase identifier to snake_case."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def _examples(examples: list[ExampleDoc]) -> str:
    # Values are emitted as written: they are Python expressions.
    return ", ".join(f'{{"name": "{escape(e.name)}", "value": {e.value}}}' for e in examples)


def _field(field_doc: FieldDoc) -> str:
    return FIELD_TEMPLATE.substitute(
        name=escape(field_doc.name),
        type=escape(field_doc.type),
        note=escape(field_doc.note),
        description=escape(field_doc.description),
        comment=escape(field_doc.comment),
        examples=_examples(field_doc.examples),
        values=", ".join(f'"{escape(v)}"' for v in field_doc.values),
    )


def _variable(type_doc: TypeDoc) -> str:
    return f"{snake_case(type_doc.type.replace('.', '_')).upper()}_DOC"


def _type(type_doc: TypeDoc) -> str:
    return TYPE_TEMPLATE.substitute(
        var=_variable(type_doc),
        type=escape(type_doc.type),
        comment=escape(type_doc.comment),
        description=escape(type_doc.description),
        examples=_examples(type_doc.examples),
        appears_in=", ".join(
            f'{{"type_name": "{escape(a.type_name)}", "field_name": "{escape(a.field_name)}"}}'
            for a in type_doc.appears_in
        ),
        fields="\n".join(_field(f) for f in type_doc.fields),
    )


def render_python(index: DocumentationIndex) -> str:
    """Render the index as a Python module.

    Raises:
        EmitError: If the rendered module does not compile
    """
    text = MODULE_TEMPLATE.substitute(
        name=escape(index.name),
        package=escape(index.package),
        file=escape(index.file),
        title=escape(index.title),
        header=escape(index.header),
        func_name=snake_case(index.name),
        type_docs="\n\n".join(_type(t) for t in index.types),
        type_refs="\n".join(f"            {_variable(t)}," for t in index.types),
    )

    try:
        compile(text, index.file or "<structdoc>", "exec")
    except SyntaxError as e:
        logger.debug(f"data: {text}")
        raise EmitError(f"could not compile generated code: {e}") from e
    return text


def render_index(index: DocumentationIndex, fmt: OutputFormat | str = OutputFormat.JSON) -> str:
    """Serialize the index in the requested format.

    Args:
        index: Documentation index
        fmt: Output format

    Returns:
        Serialized artifact

    Raises:
        EmitError: If the artifact cannot be produced
    """
    fmt = OutputFormat(fmt)
    if fmt == OutputFormat.PYTHON:
        return render_python(index)

    data = index.model_dump(mode="json")
    if fmt == OutputFormat.YAML:
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)
    return json.dumps(data, indent=2) + "\n"


def write_index(
    index: DocumentationIndex,
    fmt: OutputFormat | str = OutputFormat.JSON,
    dest: str | Path | None = None,
) -> str:
    """Serialize the index and write it to `dest`.

    Args:
        index: Documentation index
        fmt: Output format
        dest: Output file; nothing is written when None

    Returns:
        Serialized artifact

    Raises:
        EmitError: If the artifact cannot be produced or written
    """
    text = render_index(index, fmt)
    if dest is None:
        return text

    path = Path(dest).resolve()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise EmitError(f"could not create output file {path}: {e}") from e

    logger.info(f"Wrote {len(index.types)} types to {path}")
    return text
