"""
Smoke tests to verify the test infrastructure is working correctly.

These tests verify:
- pytest is properly configured
- fixtures are accessible
- the package imports with its public API
"""

from pathlib import Path

import pytest


class TestInfrastructure:
    """Tests to verify the testing infrastructure itself."""

    def test_pytest_works(self):
        """Verify basic pytest functionality."""
        assert True

    def test_fixtures_directory_exists(self, fixtures_dir: Path):
        """Verify the fixtures directory is accessible."""
        assert fixtures_dir.exists()
        assert fixtures_dir.is_dir()

    def test_sample_package_exists(self, sample_package_dir: Path):
        """Verify the sample package fixture is accessible."""
        assert (sample_package_dir / "__init__.py").exists()

    def test_project_root_fixture(self, project_root: Path):
        """Verify project root fixture returns correct path."""
        assert project_root.exists()
        assert (project_root / "pyproject.toml").exists()


class TestPackage:
    """Tests for the package surface."""

    def test_public_api(self):
        """Verify the top-level exports are importable."""
        import structdoc

        assert structdoc.__version__
        for name in structdoc.__all__:
            assert hasattr(structdoc, name)

    def test_module_entry_point(self):
        """Verify python -m structdoc resolves to the CLI group."""
        from structdoc.__main__ import main
        from structdoc.cli import main as cli_main

        assert main is cli_main

    @pytest.mark.parametrize(
        "module",
        [
            "structdoc.analysis",
            "structdoc.config",
            "structdoc.emit",
            "structdoc.models",
            "structdoc.source",
        ],
    )
    def test_subpackages_import(self, module):
        import importlib

        assert importlib.import_module(module).__all__
