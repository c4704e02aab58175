"""Root configuration of the sample application."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from sample_config.server import ServerConfig


class LogLevel(str, Enum):
    """Verbosity of the application log."""

    DEBUG = "debug"
    INFO = "info"


@dataclass
class Metadata:
    """Metadata shared by every configuration document."""

    # Version of the configuration schema.
    version: str = field(default="v1", metadata={"yaml": "version"})


@dataclass
class StorageConfig:
    """StorageConfig selects where data is kept."""

    # Driver names the storage backend.
    driver: str = field(default="disk", metadata={"yaml": "driver"})
    # Path is the data directory.
    path: str = field(default="/var/lib/sample", metadata={"yaml": "path"})


@dataclass
class Backup:
    """Backup describes one backup destination."""

    # Destination is the URL backups are written to.
    # examples:
    #   - name: bucket
    #     value: '"s3://backups"'
    destination: str = field(default="", metadata={"yaml": "destination"})
    # Server is the server the backup is taken from.
    server: Optional[ServerConfig] = field(default=None, metadata={"yaml": "server"})


@dataclass
class Config(Metadata):
    """Config is the root configuration of the sample application.

    Loaded from config.yaml at startup.
    """

    # Name identifies the deployment.
    name: str = field(default="", metadata={"yaml": "Name"})
    # Server configures the HTTP listener.
    # examples:
    #   - name: local
    #     value: '{"port": 8080}'
    server: ServerConfig = field(default_factory=ServerConfig, metadata={"yaml": "server"})
    # Backups lists the backup destinations.
    backups: list[Backup] = field(default_factory=list, metadata={"yaml": "backups,omitempty"})
    # Labels are free-form annotations.
    labels: dict[str, str] = field(default_factory=dict, metadata={"yaml": "labels"})
    storage: StorageConfig = field(default_factory=StorageConfig, metadata={"yaml": ",inline"})
    # Level sets the log verbosity.
    # values:
    #   - debug
    #   - info
    level: LogLevel = field(default=LogLevel.INFO, metadata={"yaml": "level"})
    # Parent is the configuration this one extends.
    parent: Optional["Config"] = field(default=None, metadata={"yaml": "parent"})
    # Token used by the test harness. docgen:nodoc
    token: str = field(default="", metadata={"yaml": "token"})
    _secret: str = field(default="", metadata={"yaml": "secret"})
    runtime: dict = field(default_factory=dict)
    # Cache is rebuilt on startup.
    cache: dict = field(default_factory=dict, metadata={"yaml": "-"})
