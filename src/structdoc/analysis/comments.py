"""
Documentation Comment Parser.

Turns a raw documentation comment into a Text record. A comment is either
structured YAML matching the Text shape:

    description: |
      Listen address of the server.
    examples:
      - name: local only
        value: '"127.0.0.1:8080"'
    values:
      - tcp
      - udp

or free text, optionally followed by YAML lines carrying examples and
values beneath a one line introduction. Parsing never fails: anything
that does not decode falls back to plain text.
"""

import logging
import re
from typing import Any

import yaml
from pydantic import ValidationError

from structdoc.models.text import Text

logger = logging.getLogger(__name__)

_UNESCAPE_PATTERN = re.compile(r"\\(.)", re.DOTALL)

# A mapping needs at least one of these to count as structured
TEXT_KEYS = frozenset({"description", "examples", "values"})


def escape(value: str) -> str:
    """Escape a string for embedding in a double-quoted literal."""
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n").strip()


def unescape(value: str) -> str:
    """Invert escape() for consumers that want plain text back."""

    def replace(match: re.Match[str]) -> str:
        char = match.group(1)
        return "\n" if char == "n" else char

    return _UNESCAPE_PATTERN.sub(replace, value)


def first_line(value: str) -> str:
    return value.split("\n", 1)[0].strip()


def decode_structured(raw: str) -> Text | None:
    """Decode a comment as Text-shaped YAML.

    Args:
        raw: Comment text

    Returns:
        The decoded Text, or None when the comment is not structured.
        An empty document decodes to an empty Text. Prose that happens to
        read as a mapping ("Note: ...") is not structured.
    """
    try:
        data: Any = yaml.safe_load(raw)
    except yaml.YAMLError:
        return None

    if data is None:
        return Text()
    if not isinstance(data, dict) or not TEXT_KEYS.intersection(map(str, data)):
        return None

    try:
        return Text.model_validate({str(k): v for k, v in data.items()})
    except ValidationError as e:
        logger.debug(f"comment decodes as YAML but not as documentation: {e.error_count()} errors")
        return None


def parse_comment(raw: str) -> Text:
    """Parse a raw documentation comment.

    Args:
        raw: Comment text, possibly empty

    Returns:
        Text whose comment is the first line of its description, with the
        description and example names escaped for string literals and
        example values trimmed.
    """
    text = decode_structured(raw)
    if text is not None:
        description = text.description.strip()
    else:
        # Plain text; the lines after the first may still carry
        # examples and values as YAML.
        description = raw.strip()
        remainder = "\n".join(description.split("\n")[1:])
        text = decode_structured(remainder)
        if text is not None:
            description = first_line(description)
        else:
            text = Text()

    comment = first_line(description)
    return Text(
        comment=escape(comment),
        description=escape(description),
        examples=[
            example.model_copy(update={"name": escape(example.name), "value": example.value.strip()})
            for example in text.examples
        ],
        values=list(text.values),
    )
