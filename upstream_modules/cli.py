"""CLI entry point: upstream-modules.

Subcommands:
    upstream-modules process deps.json                 # install upstream modules
    upstream-modules process deps.json --module-root m  # custom module root
    upstream-modules package-resources                 # copy package.json to build output
"""

from __future__ import annotations

from pathlib import Path

import click
from dotenv import load_dotenv

from upstream_modules.config import ResolverConfig
from upstream_modules.core.logging import setup_logging
from upstream_modules.exceptions import UpstreamModulesError
from upstream_modules.graph import JsonGraphProvider
from upstream_modules.processor import process_upstream_dependencies
from upstream_modules.resources import copy_project_manifest


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """Install upstream JavaScript modules packaged inside project dependencies."""
    load_dotenv(Path.cwd() / ".env")
    setup_logging("DEBUG" if verbose else None)


@main.command("process")
@click.argument("graph_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--base-dir", type=click.Path(file_okay=False), default=None, help="Project directory")
@click.option("--module-root", type=click.Path(file_okay=False), default=None, help="Module output directory")
def process(graph_file: str, base_dir: str | None, module_root: str | None) -> None:
    """Resolve GRAPH_FILE and materialize every upstream module it reaches."""
    config = ResolverConfig.from_env(base_dir=base_dir, module_root=module_root)
    try:
        result = process_upstream_dependencies(JsonGraphProvider(graph_file), config)
    except UpstreamModulesError as e:
        raise click.ClickException(str(e)) from e

    for installed in result.installed:
        click.echo(f"  {installed.name}  -> {installed.target_dir}  ({installed.written} written)")
    click.echo(
        f"Installed {len(result.artifacts)} module(s): "
        f"{result.files_written} file(s) written, {result.files_skipped} up to date "
        f"in {result.elapsed:.2f}s"
    )


@main.command("package-resources")
@click.option("--base-dir", type=click.Path(file_okay=False), default=None, help="Project directory")
@click.option("--output-dir", type=click.Path(file_okay=False), default=None, help="Build output directory")
def package_resources(base_dir: str | None, output_dir: str | None) -> None:
    """Copy the project's package.json into the build output directory."""
    config = ResolverConfig.from_env(base_dir=base_dir, output_dir=output_dir)
    try:
        dest = copy_project_manifest(config.base_dir, config.output_dir)
    except UpstreamModulesError as e:
        raise click.ClickException(str(e)) from e

    if dest is None:
        click.echo("package.json up to date (or absent)")
    else:
        click.echo(f"Copied package.json to {dest}")


if __name__ == "__main__":
    main()
