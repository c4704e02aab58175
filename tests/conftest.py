"""
structdoc Test Configuration and Fixtures

This module provides pytest fixtures for testing the documentation generator.

Fixture Categories:
- Paths: the on-disk sample package under tests/fixtures
- Sources: in-memory modules and packages written into tmp_path
- Logging: isolation of handlers installed by the CLI
"""

import logging
import textwrap
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from structdoc.models.declarations import SourceSet
from structdoc.source.loader import load_module

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the fixtures directory path."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_package_dir(fixtures_dir: Path) -> Path:
    """Return the sample configuration package."""
    return fixtures_dir / "sample_config"


# =============================================================================
# Source Fixtures
# =============================================================================


@pytest.fixture
def make_source() -> Callable[..., SourceSet]:
    """Build a SourceSet from module sources given as keyword arguments.

    Module names use "__" for dots: make_source(app__config="...").
    """

    def _make(**modules: str) -> SourceSet:
        source = SourceSet()
        for key, text in modules.items():
            name = key.replace("__", ".")
            source.add_module(load_module(textwrap.dedent(text), name))
        return source

    return _make


@pytest.fixture
def write_package(tmp_path: Path) -> Callable[[str, dict[str, str]], Path]:
    """Write a package into tmp_path and return its directory."""

    def _write(name: str, files: dict[str, str]) -> Path:
        package_dir = tmp_path / name
        package_dir.mkdir(parents=True, exist_ok=True)
        for relative, text in files.items():
            path = package_dir / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(text), encoding="utf-8")
        return package_dir

    return _write


# =============================================================================
# Logging Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def restore_logging() -> Generator[None, None, None]:
    """Undo handler and level changes made by CLI invocations."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    for name in ("structdoc", "structdoc.analysis.builder"):
        logging.getLogger(name).setLevel(logging.NOTSET)
