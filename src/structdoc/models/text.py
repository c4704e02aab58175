"""
Parsed documentation text models.

A documentation comment decodes into a Text: the long description, the
short comment derived from its first line, named examples and the list of
allowed values. Decoding the structured form goes through pydantic so a
comment that is YAML but not Text-shaped is rejected like any other
non-structured comment.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _scalar_to_str(value: Any) -> str:
    """Decode a YAML scalar into a string the way a string field would."""
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise ValueError("expected a scalar value")
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _scalar_to_literal(value: Any) -> str:
    """Decode a YAML scalar into Python source for the same value.

    Strings are already written as expressions and pass through unchanged.
    """
    if isinstance(value, (bool, int, float)):
        return repr(value)
    return _scalar_to_str(value)


class Example(BaseModel):
    """A named example value.

    Attributes:
        name: Human readable example title
        value: Example value as a Python expression, emitted verbatim
    """

    model_config = ConfigDict(extra="ignore")

    name: str = Field(default="", description="Example title")
    value: str = Field(default="", description="Example value")

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> str:
        return _scalar_to_str(v)

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value(cls, v: Any) -> str:
        return _scalar_to_literal(v)


class Text(BaseModel):
    """Structured documentation attached to a type or field.

    Attributes:
        comment: First line of the description, never serialized
        description: Long description
        examples: Named examples in declaration order
        values: Enumerated allowed values
    """

    model_config = ConfigDict(extra="ignore")

    comment: str = Field(default="", exclude=True, description="Short comment")
    description: str = Field(default="", description="Long description")
    examples: list[Example] = Field(default_factory=list, description="Named examples")
    values: list[str] = Field(default_factory=list, description="Allowed values")

    @field_validator("description", mode="before")
    @classmethod
    def coerce_description(cls, v: Any) -> str:
        return _scalar_to_str(v)

    @field_validator("examples", mode="before")
    @classmethod
    def coerce_missing_examples(cls, v: Any) -> Any:
        """Treat an explicit null list as empty."""
        return [] if v is None else v

    @field_validator("values", mode="before")
    @classmethod
    def coerce_values(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, list):
            return [_scalar_to_str(item) for item in v]
        return v
