"""Presentation of analysis results: Rich tables, trees and JSON payloads."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from .models import RankMode
from .orchestrator import AnalysisResult
from .ranking import impact_tree

SCORE_LABELS = {
    RankMode.TOPN: "Direct includers",
    RankMode.IMPACT: "Impacted files",
}

TITLES = {
    RankMode.TOPN: "Top included files",
    RankMode.IMPACT: "Top impacting files",
}

_TREE_COLORS = ("red", "yellow", "green", "blue", "magenta")


def _score_color(score: int, top: int) -> str:
    if top <= 0:
        return "dim"
    ratio = score / top
    if ratio >= 0.66:
        return "red"
    if ratio >= 0.33:
        return "yellow"
    return "green"


def ranking_table(result: AnalysisResult, mode: RankMode) -> Table:
    ranking = result.rankings[mode]
    table = Table(title=f"{TITLES[mode]} ({len(ranking)})", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("File", style="cyan")
    table.add_column(SCORE_LABELS[mode], justify="right")

    top = ranking.entries[0].score if ranking.entries else 0
    for position, entry in enumerate(ranking.entries, 1):
        color = _score_color(entry.score, top)
        table.add_row(str(position), result.relative(entry.path), f"[{color}]{entry.score}[/{color}]")
    return table


def build_impact_tree(result: AnalysisResult, path: Path, max_depth: Optional[int] = None) -> Tree:
    """Tree of files reaching *path*, one color per level."""
    children = impact_tree(result.graph, path, max_depth=max_depth)

    def _label(node: Path, level: int) -> str:
        color = _TREE_COLORS[level % len(_TREE_COLORS)]
        return f"[{color}]{result.relative(node)}[/{color}]"

    tree = Tree(_label(path, 0))
    pending = [(tree, path, 0)]
    while pending:
        branch, node, level = pending.pop()
        for child in children[node]:
            sub = branch.add(_label(child, level + 1))
            pending.append((sub, child, level + 1))
    return tree


def diagnostics_panel(result: AnalysisResult) -> Panel:
    diag = result.diagnostics
    lines = [
        f"Files analyzed:            {len(result.files)}",
        f"Include edges:             {result.graph.edge_count}",
        f"Unresolved local includes: {diag.unresolved_count}",
        f"Ambiguous resolutions:     {len(diag.ambiguous_resolutions)}",
        f"Multi-file cycles:         {diag.cycle_count}",
        f"Self includes:             {len(diag.self_includes)}",
        f"Unreadable files:          {len(diag.unreadable_files)}",
        f"System includes skipped:   {diag.system_includes}",
    ]
    return Panel("\n".join(lines), title="Diagnostics", border_style="blue")


def render_diagnostic_details(result: AnalysisResult, console: Console) -> None:
    diag = result.diagnostics
    for item in diag.unreadable_files:
        console.print(f"[red]unreadable[/red] {result.relative(item.path)}: {item.reason}")
    for item in diag.unresolved_includes:
        inc = item.include
        console.print(
            f"[yellow]unresolved[/yellow] {result.relative(inc.origin)}:{inc.line} "
            f"-> \"{inc.target}\""
        )
    for item in diag.ambiguous_resolutions:
        inc = item.include
        others = ", ".join(result.relative(c) for c in item.candidates[1:])
        console.print(
            f"[magenta]ambiguous[/magenta] {result.relative(inc.origin)}:{inc.line} "
            f"-> {inc.target} = {result.relative(item.chosen)} (also: {others})"
        )


def render_cycles(result: AnalysisResult, console: Console) -> None:
    diag = result.diagnostics
    if not diag.cycles and not diag.self_includes:
        console.print("[green]No include cycles found.[/green]")
        return
    for number, members in enumerate(diag.cycles, 1):
        console.print(f"[bold]Cycle {number}[/bold] ({len(members)} files)")
        for member in members:
            console.print(f"  {result.relative(member)}")
    for path in diag.self_includes:
        console.print(f"[bold]Self include[/bold] {result.relative(path)}")


def render_report(
    result: AnalysisResult,
    console: Console,
    show_tree: bool = False,
    tree_depth: Optional[int] = None,
    details: bool = False,
) -> None:
    if result.is_empty:
        console.print(f"[yellow]No C/C++ files found under {result.project_root}[/yellow]")
    for mode, ranking in result.rankings.items():
        console.print(ranking_table(result, mode))
        if show_tree and mode == RankMode.IMPACT:
            for entry in ranking.entries:
                console.print(build_impact_tree(result, entry.path, max_depth=tree_depth))
    console.print(diagnostics_panel(result))
    if details:
        render_diagnostic_details(result, console)


def to_payload(result: AnalysisResult) -> Dict[str, Any]:
    """JSON-serializable report."""
    diag = result.diagnostics
    return {
        "project": str(result.project_root),
        "files": len(result.files),
        "edges": result.graph.edge_count,
        "rankings": {
            mode.value: [
                {"file": result.relative(entry.path), "score": entry.score}
                for entry in ranking.entries
            ]
            for mode, ranking in result.rankings.items()
        },
        "diagnostics": {
            **diag.summary(),
            "unresolved": [
                {
                    "file": result.relative(u.include.origin),
                    "line": u.include.line,
                    "target": u.include.target,
                }
                for u in diag.unresolved_includes
            ],
            "cycle_members": [[result.relative(p) for p in members] for members in diag.cycles],
        },
    }
