"""
Configuration Data Models.

Defines the configuration schema using Pydantic for validation
and type safety.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from structdoc.models.base import OutputFormat


class LogLevel(str, Enum):
    """Logging verbosity."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class SourceConfig(BaseModel):
    """Where to find the record types to document.

    Attributes:
        path: Package directory or module file to load
        structure: Name of the root record type
        module: Dotted module declaring the root type (optional)
    """

    path: str | None = Field(
        default=None,
        description="Package directory or module file",
        examples=["./src/myapp", "./settings.py"],
    )
    structure: str | None = Field(
        default=None,
        description="Root record type name",
        examples=["Config"],
    )
    module: str | None = Field(
        default=None,
        description="Module declaring the root type",
    )

    @field_validator("path", "structure")
    @classmethod
    def validate_not_blank(cls, v: str | None) -> str | None:
        """Reject values that are present but empty."""
        if v is not None and not v.strip():
            raise ValueError("value cannot be empty")
        return v


class OutputConfig(BaseModel):
    """Where and how to write the documentation index.

    Attributes:
        path: Output file, stdout when unset
        package: Package name recorded in the generated artifact
        format: Serialization format
        title: Document title
        header: Document description
    """

    path: str | None = Field(default=None, description="Output file")
    package: str = Field(default="main", description="Package of the generated artifact")
    format: OutputFormat = Field(default=OutputFormat.JSON, description="Output format")
    title: str = Field(default="", description="Document title")
    header: str = Field(default="", description="Document description")


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level used when --verbose is not given
        format: Log record format
    """

    level: LogLevel = Field(default=LogLevel.WARNING, description="Log level")
    format: str = Field(default="%(message)s", description="Log format")

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.upper()
        return v


class StructdocConfig(BaseModel):
    """Root configuration.

    Attributes:
        source: Source location and root type
        output: Output settings
        logging: Logging settings
    """

    source: SourceConfig = Field(default_factory=SourceConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
