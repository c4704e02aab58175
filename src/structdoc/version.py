"""Version information for structdoc."""

__version__ = "0.1.0"
