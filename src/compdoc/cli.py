"""
compdoc CLI

Command line interface for building, serving and inspecting component
library documentation sites.
"""

from __future__ import annotations

import asyncio
import json
import logging
import signal
import sys
from pathlib import Path
from typing import Optional

import click
import structlog
from rich import box
from rich.console import Console
from rich.table import Table

from compdoc import __version__
from compdoc.config import Config, load_config
from compdoc.exceptions import CompdocError
from compdoc.main import DocService

# Rich console for pretty output
console = Console()
error_console = Console(stderr=True)


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    error_console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]✓[/bold green] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[bold blue]i[/bold blue] {message}")


def configure_logging(level: str) -> None:
    """Send structlog output at or above ``level`` to stderr."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        logger_factory=lambda *args: structlog.PrintLogger(file=sys.stderr),
    )


def _config(ctx: click.Context) -> Config:
    return ctx.obj["config"]


@click.group()
@click.version_option(version=__version__, prog_name="compdoc")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option(
    "--project",
    "-p",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=Path.cwd(),
    help="Project root directory",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def main(ctx: click.Context, config: Optional[Path], project: Path, verbose: bool) -> None:
    """compdoc - documentation sites for component libraries."""
    ctx.ensure_object(dict)

    configure_logging("DEBUG" if verbose else "INFO")

    try:
        loaded = load_config(config_path=config, project_root=project)
    except CompdocError as e:
        print_error(str(e))
        sys.exit(1)

    if not verbose:
        configure_logging(loaded.log_level)
    ctx.obj["config"] = loaded


@main.command()
@click.pass_context
def build(ctx: click.Context) -> None:
    """Build all libraries and emit the site content."""
    config = _config(ctx)

    async def run_build() -> dict:
        service = DocService(config)
        async with service.session():
            await service.build()
            await service.emit()
            return service.get_stats()

    try:
        stats = asyncio.run(run_build())
    except CompdocError as e:
        print_error(str(e))
        sys.exit(1)

    for name, lib_stats in stats.items():
        print_success(f"Lib: {name} compiled successfully ({lib_stats['components']} components)")
    print_info(f"Output: {config.abs_site_path}")


@main.command()
@click.pass_context
def serve(ctx: click.Context) -> None:
    """Build, then rebuild changed components until interrupted."""
    config = _config(ctx).model_copy(update={"watch": True})

    async def run_serve() -> None:
        service = DocService(config)

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, service.request_shutdown)

        async with service.session():
            await service.build()
            await service.emit()
            await service.start_watching()
            console.print("Watching for changes... (Ctrl+C to stop)")
            await service.wait_closed()

    try:
        asyncio.run(run_serve())
    except CompdocError as e:
        print_error(str(e))
        sys.exit(1)


@main.command()
@click.argument("lib", required=False)
@click.pass_context
def components(ctx: click.Context, lib: Optional[str]) -> None:
    """List the components discovered in each library."""
    config = _config(ctx)

    async def run_discover() -> list[tuple[str, str, str]]:
        service = DocService(config)
        rows: list[tuple[str, str, str]] = []
        async with service.session():
            for name, builder in service.builders.items():
                if lib and name != lib:
                    continue
                for key, component in builder.components.items():
                    rows.append((name, component.name, key))
        return rows

    try:
        if lib:
            config.get_library(lib)
        rows = asyncio.run(run_discover())
    except CompdocError as e:
        print_error(str(e))
        sys.exit(1)

    table = Table(box=box.ROUNDED)
    table.add_column("Library", style="cyan")
    table.add_column("Component")
    table.add_column("Path", style="dim")
    for row in rows:
        table.add_row(*row)
    console.print(table)


@main.command()
@click.argument("locale")
@click.pass_context
def navs(ctx: click.Context, locale: str) -> None:
    """Print the merged navigation of LOCALE as JSON."""
    config = _config(ctx)

    async def run_navs() -> dict:
        service = DocService(config)
        async with service.session():
            await service.build()
            return service.generate_navigations()

    if locale not in config.locale_keys:
        print_error(f"Locale '{locale}' is not configured")
        sys.exit(1)

    try:
        navigations = asyncio.run(run_navs())
    except CompdocError as e:
        print_error(str(e))
        sys.exit(1)

    click.echo(json.dumps(navigations[locale], indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
