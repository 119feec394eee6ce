"""Typer-based command line interface for the catalog generator."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Tuple

import typer
from rich.console import Console

from .errors import CatalogError
from .pipeline import CatalogSync, SyncConfig, SyncResult
from .schema import Catalog, RunSummary
from .utils.logging import configure_logging, get_logger
from .writer import CatalogWriter, report

LOGGER = get_logger(__name__)

app = typer.Typer(add_completion=False, help="Generate the accessibility test-page catalog.")

RootOption = typer.Option(Path("."), "--root", help="Directory holding the index and test pages.")
ConfigOption = typer.Option(None, "--config", help="YAML configuration file (default: a11y-catalog.yml in root).")


def _resolve_root(path: Path) -> Path:
    if not path.is_dir():
        raise typer.BadParameter(f"Directory {path} does not exist")
    return path


def _build(root: Path, config: Optional[Path], write: bool) -> Tuple[SyncConfig, SyncResult]:
    try:
        sync_config = SyncConfig.from_root(_resolve_root(root), config)
        sync = CatalogSync()
        result = sync.run(sync_config) if write else sync.build(sync_config)
        return sync_config, result
    except CatalogError as exc:
        LOGGER.error("%s", exc)
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
) -> None:
    configure_logging("DEBUG" if verbose else "INFO")
    if ctx.invoked_subcommand is None:
        ctx.invoke(sync, root=Path("."), config=None)


@app.command()
def sync(root: Path = RootOption, config: Optional[Path] = ConfigOption) -> None:
    """Regenerate the catalog file from the index document."""

    _, result = _build(root, config, write=True)
    report(result.summary, Console())


@app.command()
def check(root: Path = RootOption, config: Optional[Path] = ConfigOption) -> None:
    """Fail when the catalog on disk is out of date (the generation date is ignored)."""

    sync_config, result = _build(root, config, write=False)
    if not CatalogWriter(sync_config.artifact_path).is_current(result.catalog):
        typer.echo(f"{sync_config.artifact_path} is out of date; run `a11y-catalog sync`", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"{sync_config.artifact_path} is up to date")


@app.command()
def summarize(catalog_path: Path = typer.Argument(..., help="Catalog JSON path.")) -> None:
    """Validate an existing catalog file and print its totals."""

    if not catalog_path.exists():
        raise typer.BadParameter(f"Catalog {catalog_path} not found")
    try:
        catalog = Catalog.model_validate(json.loads(catalog_path.read_text(encoding="utf-8")))
    except ValueError as exc:
        typer.echo(f"error: {catalog_path} is not a valid catalog: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    summary = RunSummary.from_catalog(catalog)
    summary.output_path = str(catalog_path)
    report(summary, Console())


if __name__ == "__main__":
    app()
