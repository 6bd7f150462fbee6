"""Typer-based CLI for Scar include-graph analysis."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .config_manager import AnalysisOptions, build_options, load_config, save_project_config
from .errors import ScarError
from .graph_export import export_dot, export_json
from .models import RankMode
from .orchestrator import AnalysisResult, analyze
from .report import render_cycles, render_report, to_payload
from .scanner import validate_project_path

app = typer.Typer(
    help="🔎 Scar: rank the most included and most impacting files of a C/C++ tree.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"Scar v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Enable debug logging."),
):
    """Scar: file-level include analysis for C/C++ projects."""
    _configure_logging(verbose)


def _fail(exc: ScarError) -> None:
    typer.echo(f"❌ {exc}", err=True)
    raise typer.Exit(code=1)


def _load_options(
    project_path: Path,
    include_dirs: Optional[List[Path]] = None,
    workers: Optional[int] = None,
    basename_fallback: Optional[bool] = None,
) -> AnalysisOptions:
    root = validate_project_path(project_path)
    file_settings = load_config(root)
    return build_options(
        root,
        file_settings,
        include_dirs=[str(d) for d in include_dirs] if include_dirs else None,
        workers=workers,
        basename_fallback=basename_fallback,
    )


def _run(
    project_path: Path,
    modes: List[RankMode],
    num: Optional[int],
    include_dirs: Optional[List[Path]],
    workers: Optional[int],
    basename_fallback: Optional[bool],
) -> AnalysisResult:
    try:
        options = _load_options(project_path, include_dirs, workers, basename_fallback)
        return analyze(project_path, modes=modes, n=num, options=options)
    except ScarError as exc:
        _fail(exc)


_INCLUDE_DIR_OPTION = typer.Option(
    None, "--include-dir", "-I", help="Extra include root, searched in the given order."
)
_WORKERS_OPTION = typer.Option(None, "--workers", "-j", min=1, help="Worker threads for extraction.")
_FALLBACK_OPTION = typer.Option(
    None,
    "--basename-fallback/--no-basename-fallback",
    help="Resolve unmatched quoted includes by file name.",
)


@app.command("analyze")
def analyze_command(
    project_path: Path = typer.Argument(..., help="Root of the C/C++ project."),
    topn: bool = typer.Option(False, "--topn", "-t", help="Rank by direct includers."),
    topn_impact: bool = typer.Option(False, "--topn-impact", "-i", help="Rank by transitive impact."),
    num: Optional[int] = typer.Option(None, "--num", "-n", min=0, help="Number of results (default 42)."),
    include_dirs: Optional[List[Path]] = _INCLUDE_DIR_OPTION,
    workers: Optional[int] = _WORKERS_OPTION,
    basename_fallback: Optional[bool] = _FALLBACK_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Emit a JSON report."),
    tree: bool = typer.Option(False, "--tree", help="Show the dependents tree of each impact entry."),
    tree_depth: Optional[int] = typer.Option(None, "--tree-depth", min=1, help="Limit tree depth."),
    details: bool = typer.Option(False, "--details", "-d", help="List every diagnostic."),
):
    """Rank files by direct fan-in and/or transitive impact.

    Without --topn or --topn-impact both rankings are produced.
    """
    modes: List[RankMode] = []
    if topn:
        modes.append(RankMode.TOPN)
    if topn_impact:
        modes.append(RankMode.IMPACT)
    if not modes:
        modes = [RankMode.TOPN, RankMode.IMPACT]

    result = _run(project_path, modes, num, include_dirs, workers, basename_fallback)

    if as_json:
        typer.echo(json.dumps(to_payload(result), indent=2))
        return
    render_report(result, console, show_tree=tree, tree_depth=tree_depth, details=details)


@app.command("cycles")
def cycles_command(
    project_path: Path = typer.Argument(..., help="Root of the C/C++ project."),
    include_dirs: Optional[List[Path]] = _INCLUDE_DIR_OPTION,
    workers: Optional[int] = _WORKERS_OPTION,
    basename_fallback: Optional[bool] = _FALLBACK_OPTION,
):
    """List include cycles and self-including files."""
    result = _run(project_path, [], 0, include_dirs, workers, basename_fallback)
    render_cycles(result, console)


@app.command("export-graph")
def export_graph(
    project_path: Path = typer.Argument(..., help="Root of the C/C++ project."),
    fmt: str = typer.Option("dot", "--format", "-f", help="Export format: dot or json."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file path."),
    focus: str = typer.Option("", "--focus", help="Only export edges touching matching files."),
    include_dirs: Optional[List[Path]] = _INCLUDE_DIR_OPTION,
    basename_fallback: Optional[bool] = _FALLBACK_OPTION,
):
    """Export the include graph to Graphviz DOT or JSON."""
    fmt = fmt.lower()
    if fmt not in {"dot", "json"}:
        raise typer.BadParameter("Format must be one of: dot, json")

    result = _run(project_path, [], 0, include_dirs, None, basename_fallback)
    if output is None:
        output = Path.cwd() / f"{result.project_root.name}_includes.{fmt}"

    if fmt == "dot":
        export_dot(result, output, focus=focus)
    else:
        export_json(result, output, focus=focus)

    typer.echo(f"Exported graph to {output}")


@app.command("init-config")
def init_config(
    project_path: Path = typer.Argument(..., help="Root of the C/C++ project."),
    include_dirs: Optional[List[str]] = typer.Option(
        None, "--include-dir", "-I", help="Include root relative to the project."
    ),
    exclude_dirs: Optional[List[str]] = typer.Option(None, "--exclude-dir", "-x", help="Directory name to skip."),
    top_n: Optional[int] = typer.Option(None, "--num", "-n", min=0, help="Default number of results."),
):
    """Write a .scar.toml with analysis settings into the project."""
    try:
        root = validate_project_path(project_path)
        settings = {}
        if include_dirs:
            settings["include_dirs"] = list(include_dirs)
        if exclude_dirs:
            settings["exclude_dirs"] = list(exclude_dirs)
        if top_n is not None:
            settings["top_n"] = top_n
        path = save_project_config(root, settings)
    except ScarError as exc:
        _fail(exc)
    typer.echo(f"Wrote {path}")


if __name__ == "__main__":
    app()
