"""
Configuration Loader.

Builds a StructdocConfig by layering, lowest first: model defaults, the
YAML configuration file, then STRUCTDOC_* environment overrides. String
values in the file may reference the environment as ${VAR} or
${VAR:-default}.
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from structdoc.config.environment import ensure_dotenv_loaded
from structdoc.config.models import SourceConfig, StructdocConfig
from structdoc.errors import StructdocError

# Searched in the working directory, in order
DEFAULT_CONFIG_PATHS = [
    "structdoc.yaml",
    "structdoc.yml",
    ".structdoc.yaml",
    ".structdoc.yml",
]

CONFIG_ENV_VAR = "STRUCTDOC_CONFIG"

# Environment variable -> dotted config path
ENV_VAR_OVERRIDES = {
    "STRUCTDOC_SOURCE_PATH": "source.path",
    "STRUCTDOC_STRUCTURE": "source.structure",
    "STRUCTDOC_MODULE": "source.module",
    "STRUCTDOC_OUTPUT": "output.path",
    "STRUCTDOC_PACKAGE": "output.package",
    "STRUCTDOC_FORMAT": "output.format",
    "STRUCTDOC_LOG_LEVEL": "logging.level",
}

MAX_REPORTED_ERRORS = 5

ENV_REFERENCE = re.compile(r"\$\{(\w+)(?::-([^}]*))?\}")


class ConfigurationError(StructdocError):
    """Raised when the configuration file or its overrides are invalid.

    Attributes:
        errors: Pydantic validation errors, if validation failed
        path: Configuration file involved, if any
    """

    def __init__(
        self,
        message: str,
        errors: list[dict] | None = None,
        path: Path | None = None,
    ) -> None:
        super().__init__(message)
        self.errors = errors or []
        self.path = path

    def __str__(self) -> str:
        lines = [super().__str__()]
        if self.path:
            lines[0] = f"{lines[0]} (file: {self.path})"
        for err in self.errors[:MAX_REPORTED_ERRORS]:
            location = ".".join(str(part) for part in err.get("loc", ()))
            lines.append(f"  - {location}: {err.get('msg', 'invalid value')}")
        hidden = len(self.errors) - MAX_REPORTED_ERRORS
        if hidden > 0:
            lines.append(f"  ... {hidden} more")
        return "\n".join(lines)


def read_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML configuration file into a plain mapping.

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigurationError: If the file is not a YAML mapping
    """
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML: {e}", path=path) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration must be a mapping", path=path)
    return data


def find_config_file() -> Path | None:
    """Locate the configuration file for this run.

    STRUCTDOC_CONFIG wins; otherwise the first default name present in the
    working directory is used.

    Raises:
        FileNotFoundError: If STRUCTDOC_CONFIG names a missing file
    """
    explicit = os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        path = Path(explicit)
        if not path.is_file():
            raise FileNotFoundError(f"{CONFIG_ENV_VAR} names a missing file: {explicit}")
        return path

    for name in DEFAULT_CONFIG_PATHS:
        if Path(name).is_file():
            return Path(name)
    return None


def expand_env(value: Any) -> Any:
    """Expand ${VAR} references in every string of a parsed document.

    A value that is exactly one reference and expands to "" becomes None,
    so the model default applies. Unknown variables without a default are
    left as written.
    """
    if isinstance(value, dict):
        return {k: expand_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [expand_env(item) for item in value]
    if not isinstance(value, str):
        return value

    def replace(match: re.Match[str]) -> str:
        name, default = match.groups()
        if name in os.environ:
            return os.environ[name]
        return default if default is not None else match.group(0)

    expanded = ENV_REFERENCE.sub(replace, value)
    if expanded == "" and ENV_REFERENCE.fullmatch(value):
        return None
    return expanded


def drop_nulls(value: Any) -> Any:
    """Remove null entries so empty YAML sections fall back to defaults."""
    if isinstance(value, dict):
        return {k: drop_nulls(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [drop_nulls(item) for item in value]
    return value


def apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply non-empty STRUCTDOC_* variables on top of the file values."""
    for env_var, dotted in ENV_VAR_OVERRIDES.items():
        value = os.environ.get(env_var)
        if not value:
            continue
        *sections, key = dotted.split(".")
        target = data
        for section in sections:
            if not isinstance(target.get(section), dict):
                target[section] = {}
            target = target[section]
        target[key] = value
    return data


class ConfigLoader:
    """Loads a StructdocConfig from a file and the environment.

    Usage:
        # Load from a specific file
        config = ConfigLoader("structdoc.yaml").load()

        # Load from STRUCTDOC_CONFIG or a default location, else defaults
        config = ConfigLoader().discover()
    """

    def __init__(
        self,
        config_path: str | Path | None = None,
        env_file: str = ".env",
    ) -> None:
        """Initialize the config loader.

        Args:
            config_path: YAML configuration file, optional
            env_file: .env file loaded before the environment is read
        """
        self.config_path = Path(config_path) if config_path else None
        self.env_file = env_file
        self.loaded_from: Path | None = None

    def load(self, path: str | Path | None = None) -> StructdocConfig:
        """Load and validate the configuration.

        Without any file only defaults and environment overrides apply.

        Args:
            path: Configuration file, replacing the one given at construction

        Returns:
            Validated StructdocConfig

        Raises:
            ConfigurationError: If the file or the resulting values are invalid
            FileNotFoundError: If the configuration file does not exist
        """
        if path is not None:
            self.config_path = Path(path)
        ensure_dotenv_loaded(self.env_file)

        data = read_config_file(self.config_path) if self.config_path else {}
        self.loaded_from = self.config_path
        data = apply_env_overrides(drop_nulls(expand_env(data)))

        try:
            return StructdocConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Configuration validation failed: {e.error_count()} errors",
                errors=e.errors(),
                path=self.loaded_from,
            ) from e

    def discover(self) -> StructdocConfig:
        """Load from STRUCTDOC_CONFIG, a default location, or defaults alone."""
        ensure_dotenv_loaded(self.env_file)
        return self.load(find_config_file())


def load_config(
    config_path: str | Path | None = None,
    env_file: str = ".env",
) -> StructdocConfig:
    """Load configuration from a file, or discover it when no path is given.

    Raises:
        ConfigurationError: If config validation fails
        FileNotFoundError: If the config file does not exist
    """
    loader = ConfigLoader(config_path, env_file)
    if config_path is None:
        return loader.discover()
    return loader.load()


def create_default_config(
    path: str, structure: str, module: str | None = None
) -> StructdocConfig:
    """Configuration for one source and root type, without a YAML file."""
    return StructdocConfig(source=SourceConfig(path=path, structure=structure, module=module))
