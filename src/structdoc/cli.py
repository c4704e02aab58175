"""
structdoc Command Line Interface.

This module provides the CLI entry point for the documentation generator.
"""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from structdoc.analysis.builder import StructGraphBuilder
from structdoc.analysis.comments import unescape
from structdoc.config import (
    ConfigurationError,
    StructdocConfig,
    create_default_config,
    load_config,
)
from structdoc.emit.index import build_index
from structdoc.emit.writers import write_index
from structdoc.errors import StructdocError
from structdoc.models.base import OutputFormat
from structdoc.models.graph import DocumentationGraph
from structdoc.source.loader import load_source
from structdoc.version import __version__

console = Console()
# Diagnostics go to stderr so generated output can be piped
err_console = Console(stderr=True)

# Logger carrying the per-type progress lines
PROGRESS_LOGGER = "structdoc.analysis.builder"


def _fail(message: str) -> None:
    click.echo(f"FAIL: {message}", err=True)
    sys.exit(1)


def _configure_logging(cfg: StructdocConfig, verbose: bool) -> None:
    """Configure logging from --verbose and the logging config section."""
    log_level = logging.DEBUG if verbose else getattr(logging, cfg.logging.level.value)
    logging.basicConfig(
        level=log_level,
        format=cfg.logging.format,
        handlers=[logging.StreamHandler()],
        force=True,
    )
    logging.getLogger("structdoc").setLevel(log_level)
    # Per-type progress is always reported
    logging.getLogger(PROGRESS_LOGGER).setLevel(min(log_level, logging.INFO))


def _load_config(config_path: str | None) -> StructdocConfig:
    try:
        return load_config(config_path)
    except FileNotFoundError as e:
        raise ConfigurationError(str(e))


def _merge_options(cfg: StructdocConfig, **options: str | None) -> StructdocConfig:
    """Return a copy of the config with CLI options applied on top."""
    sections: dict[str, dict[str, str]] = {"source": {}, "output": {}}
    for key, value in options.items():
        if value is None:
            continue
        section, _, name = key.partition("_")
        sections[section][name] = value

    try:
        return StructdocConfig(
            source={**cfg.source.model_dump(), **sections["source"]},
            output={**cfg.output.model_dump(), **sections["output"]},
            logging=cfg.logging,
        )
    except ValueError as e:
        raise ConfigurationError(f"Invalid option: {e}")


def _build(cfg: StructdocConfig) -> DocumentationGraph:
    if not cfg.source.path:
        raise ConfigurationError("No source path given")
    if not cfg.source.structure:
        raise ConfigurationError("No root structure given (use --structure)")

    source = load_source(cfg.source.path)
    return StructGraphBuilder(source).build(cfg.source.structure, cfg.source.module)


@click.group()
@click.version_option(version=__version__, prog_name="structdoc")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """structdoc: Configuration Documentation Generator.

    Generate a documentation index for a root record type and every
    record reachable from it.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@main.command()
@click.argument("path", type=click.Path(exists=True), required=False)
@click.option("--structure", "-s", help="Name of the root record type")
@click.option("--module", "-m", help="Dotted module declaring the root type")
@click.option("--output", "-o", type=click.Path(), help="Output file (stdout when omitted)")
@click.option("--package", "-p", help="Package name recorded in the generated artifact")
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat]),
    help="Output format",
)
@click.option("--title", help="Document title")
@click.option("--header", help="Document description")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    help="Path to configuration file",
)
@click.pass_context
def generate(
    ctx: click.Context,
    path: str | None,
    structure: str | None,
    module: str | None,
    output: str | None,
    package: str | None,
    output_format: str | None,
    title: str | None,
    header: str | None,
    config: str | None,
) -> None:
    """Generate documentation for a root record type.

    PATH is the package directory or module file declaring the types.
    """
    verbose = ctx.obj.get("verbose", False)

    try:
        cfg = _merge_options(
            _load_config(config),
            source_path=path,
            source_structure=structure,
            source_module=module,
            output_path=output,
            output_package=package,
            output_format=output_format,
            output_title=title,
            output_header=header,
        )
        _configure_logging(cfg, verbose)

        graph = _build(cfg)
        index = build_index(
            graph,
            package=cfg.output.package,
            title=cfg.output.title,
            header=cfg.output.header,
            file=Path(cfg.output.path).name if cfg.output.path else "",
        )
        text = write_index(index, cfg.output.format, cfg.output.path)
    except (StructdocError, ConfigurationError) as e:
        if verbose:
            err_console.print_exception()
        _fail(str(e))
        return

    if cfg.output.path is None:
        click.echo(text, nl=False)
    elif verbose:
        err_console.print(
            f"[green]Documented {len(index.types)} types to:[/green] {cfg.output.path}"
        )


@main.command()
@click.argument("path", type=click.Path(exists=True))
@click.option("--structure", "-s", required=True, help="Name of the root record type")
@click.option("--module", "-m", help="Dotted module declaring the root type")
@click.pass_context
def inspect(ctx: click.Context, path: str, structure: str, module: str | None) -> None:
    """Show the documentation graph without writing files.

    PATH is the package directory or module file declaring the types.
    """
    verbose = ctx.obj.get("verbose", False)

    try:
        cfg = create_default_config(path, structure, module)
    except ValueError as e:
        _fail(f"Invalid option: {e}")
        return
    _configure_logging(cfg, verbose)

    try:
        graph = _build(cfg)
    except (StructdocError, ConfigurationError) as e:
        _fail(str(e))
        return

    console.print(
        Panel(
            f"[bold blue]{graph.root}[/bold blue]\n"
            f"{len(graph)} documented types",
            title="structdoc",
        )
    )
    _display_graph(graph)


def _display_graph(graph: DocumentationGraph) -> None:
    """Display every record as a table of its fields."""
    for record in graph:
        console.print()
        table = Table(title=record.get_name(), show_header=True)
        table.add_column("Field", style="cyan")
        table.add_column("Type", style="green")
        table.add_column("Comment")
        table.add_column("Examples", style="dim")
        for fld in record.fields:
            table.add_row(
                fld.tag,
                fld.type,
                unescape(fld.text.comment),
                ", ".join(example.value for example in fld.text.examples),
            )
        console.print(table)

        if record.appears_in:
            used_in = ", ".join(
                f"{appearance.type_name}.{appearance.field_name}" for appearance in record.appears_in
            )
            console.print(f"[dim]Appears in:[/dim] {used_in}")
