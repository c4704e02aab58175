"""Sample application configuration."""

from sample_config.config import Config

__all__ = ["Config"]
