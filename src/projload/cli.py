"""
projload command line.

Commands:
- solution: Load a solution file and its project graph
- project: Load a project file and its project graph
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from projload.core.errors import ProjloadError
from projload.core.ir import DiagnosticKind, ProjectDescription, ProjectLoadProgress
from projload.core.loader import ProjectLoader
from projload.core.settings import LoaderSettings, load_settings

app = typer.Typer(help="Load solution and project files into project descriptions.")
console = Console()
err_console = Console(stderr=True)


def _parse_properties(values: list[str]) -> dict[str, str]:
    properties: dict[str, str] = {}
    for value in values:
        name, sep, prop_value = value.partition("=")
        if not sep or not name.strip():
            raise typer.BadParameter(f"Expected NAME=VALUE, got '{value}'", param_hint="--property")
        properties[name.strip()] = prop_value
    return properties


def _build_loader(
    config: Path | None,
    properties: list[str],
    strict: bool,
    metadata_refs: bool,
) -> ProjectLoader:
    settings = load_settings(config) if config else LoaderSettings()
    settings.properties.update(_parse_properties(properties))
    if strict:
        settings.skip_unrecognized_projects = False
    if metadata_refs:
        settings.load_metadata_for_referenced_projects = True
    return ProjectLoader.from_settings(settings)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )
    else:
        # Diagnostics are rendered with the results
        logging.getLogger("projload").setLevel(logging.ERROR)


def _print_progress(progress: ProjectLoadProgress) -> None:
    err_console.print(
        f"[dim]{progress.completed:>4}[/dim] {progress.outcome.value:<13} {progress.file_path}",
        highlight=False,
    )


def _render(projects: list[ProjectDescription], loader: ProjectLoader, as_json: bool) -> None:
    if as_json:
        payload = {
            "projects": [p.model_dump(mode="json") for p in projects],
            "diagnostics": [d.model_dump(mode="json") for d in loader.diagnostics],
        }
        console.print_json(json.dumps(payload))
        return

    names = {p.identity: p.name for p in projects}
    table = Table(title=f"{len(projects)} project(s)")
    table.add_column("Name", style="bold")
    table.add_column("Language")
    table.add_column("Documents", justify="right")
    table.add_column("References")
    table.add_column("Path", style="dim")
    for project in projects:
        references = ", ".join(names.get(r, str(r)) for r in project.project_references)
        name = f"{project.name} [dim](metadata)[/dim]" if project.is_metadata_only else project.name
        table.add_row(
            name, project.language, str(len(project.documents)), references, project.file_path
        )
    console.print(table)

    for diagnostic in loader.diagnostics:
        style = "red" if diagnostic.kind == DiagnosticKind.FAILURE else "yellow"
        console.print(f"[{style}]{diagnostic.kind.value}[/{style}] {diagnostic.message}")


@app.command("solution")
def solution_command(
    path: Path = typer.Argument(..., help="Solution (.sln) file"),
    config: Path | None = typer.Option(None, "--config", "-c", help="TOML settings file"),
    properties: list[str] = typer.Option([], "--property", "-p", help="Global property NAME=VALUE"),
    strict: bool = typer.Option(False, "--strict", help="Fail on unrecognized projects"),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON"),
    show_progress: bool = typer.Option(False, "--progress", help="Print per-project progress"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Load a solution and every project it (transitively) references."""
    _configure_logging(verbose)
    try:
        with _build_loader(config, properties, strict, metadata_refs=False) as loader:
            snapshot = asyncio.run(
                loader.load_solution(str(path), progress=_print_progress if show_progress else None)
            )
            _render(list(snapshot.projects), loader, as_json)
    except ProjloadError as e:
        err_console.print(f"[red]Error:[/red] {e}", highlight=False)
        raise typer.Exit(code=1)


@app.command("project")
def project_command(
    path: Path = typer.Argument(..., help="Project file"),
    config: Path | None = typer.Option(None, "--config", "-c", help="TOML settings file"),
    properties: list[str] = typer.Option([], "--property", "-p", help="Global property NAME=VALUE"),
    strict: bool = typer.Option(False, "--strict", help="Fail on unrecognized referenced projects"),
    metadata_refs: bool = typer.Option(
        False, "--metadata-refs", help="Use prebuilt outputs of referenced projects"
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON"),
    show_progress: bool = typer.Option(False, "--progress", help="Print per-project progress"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Load a project and every project it (transitively) references."""
    _configure_logging(verbose)
    try:
        with _build_loader(config, properties, strict, metadata_refs) as loader:
            projects = asyncio.run(
                loader.load_project(str(path), progress=_print_progress if show_progress else None)
            )
            _render(projects, loader, as_json)
    except ProjloadError as e:
        err_console.print(f"[red]Error:[/red] {e}", highlight=False)
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
