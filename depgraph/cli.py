"""Click CLI with graph, cycles, and dot subcommands."""

from __future__ import annotations

import functools
import logging
from pathlib import Path

import click

from depgraph import __version__
from depgraph.errors import DepGraphError
from depgraph.exporter.dot_writer import write_dot
from depgraph.models import GraphConfig
from depgraph.pipeline import analyze, run_pipeline

# Exit statuses below this carry the cycle count; this one means the run failed
FAILURE_EXIT_CODE = 255
MAX_CYCLE_EXIT_CODE = FAILURE_EXIT_CODE - 1


class RunFailed(click.ClickException):
    exit_code = FAILURE_EXIT_CODE


def _configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        force=True,
    )


def _cycle_exit(count: int) -> None:
    click.get_current_context().exit(min(count, MAX_CYCLE_EXIT_CODE))


def graph_options(fn):
    """Options shared by every subcommand that builds a graph."""
    @click.option("--path", "-p", "root_path", type=click.Path(exists=True, file_okay=False, path_type=Path),
                  default=".", help="Workspace root")
    @click.option("--extensions", default="js", show_default=True,
                  help="Comma-separated source extensions to scan")
    @click.option("--bundler-imports", is_flag=True, help="Scan sources for wildcard imports and require.context")
    @click.option("--allow-parse-error", is_flag=True, help="Warn about unparsable sources instead of failing")
    @click.option("--exclude-dir", "exclude_dirs", multiple=True, default=("node_modules",),
                  show_default=True, help="Vendored directory names to skip (repeatable)")
    @click.option("--concurrency", type=click.IntRange(min=1), default=None,
                  help="Maximum simultaneous file operations")
    @click.option("--verbose", "-v", is_flag=True, help="Debug output")
    @click.option("--quiet", "-q", is_flag=True, help="Only warnings and errors")
    @functools.wraps(fn)
    def wrapper(root_path, extensions, bundler_imports, allow_parse_error,
                exclude_dirs, concurrency, verbose, quiet, **kwargs):
        _configure_logging(verbose, quiet)
        config = GraphConfig(
            root_path=root_path,
            extensions=GraphConfig.parse_extensions(extensions),
            bundler_imports=bundler_imports,
            allow_parse_error=allow_parse_error,
            exclude_dirs=list(exclude_dirs),
            concurrency=concurrency,
        )
        try:
            return fn(config, **kwargs)
        except DepGraphError as e:
            raise RunFailed(str(e))
    return wrapper


@click.group()
@click.version_option(version=__version__)
def cli():
    """depgraph: Dependency graphs and cycle detection for multi-package workspaces."""


@cli.command()
@graph_options
@click.option("-o", "--output", "output_file", type=click.Path(path_type=Path), default="dependencies.svg",
              show_default=True, help="Image file; the format follows its extension")
def graph(config: GraphConfig, output_file: Path):
    """Render the workspace dependency graph to an image.

    Exits with the number of dependency cycles found.
    """
    config.output_file = config.root_path / output_file
    result = run_pipeline(config)
    _cycle_exit(result.cycle_count)


@cli.command()
@graph_options
def cycles(config: GraphConfig):
    """List dependency cycles without rendering.

    Exits with the number of dependency cycles found.
    """
    result = analyze(config)
    for trail in result.cycles:
        click.echo(" -> ".join(trail))
    if not result.cycles:
        click.echo("No dependency cycles found.")
    _cycle_exit(result.cycle_count)


@cli.command()
@graph_options
def dot(config: GraphConfig):
    """Print the DOT description of the graph to stdout."""
    result = analyze(config)
    write_dot(result.graph, click.get_text_stream("stdout"))


if __name__ == "__main__":
    cli()
