"""Include graph export helpers for Graphviz DOT and JSON outputs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Set

from .models import SourceFile
from .orchestrator import AnalysisResult


def export_dot(result: AnalysisResult, output_file: Path, focus: str = "") -> None:
    nodes, edges = _focused_subgraph(result, focus)
    cyclic = {m for members in result.diagnostics.cycles for m in members}
    cyclic.update(result.diagnostics.self_includes)

    lines = ["digraph includes {"]
    lines.append("  rankdir=LR;")
    lines.append("  node [shape=box, fontsize=10];")

    for node in nodes:
        attrs = f'label="{_esc(result.relative(node))}"'
        if node in cyclic:
            attrs += ", color=red"
        lines.append(f'  "{_esc(result.relative(node))}" [{attrs}];')

    for src, dst in edges:
        lines.append(f'  "{_esc(result.relative(src))}" -> "{_esc(result.relative(dst))}";')

    lines.append("}")
    output_file.write_text("\n".join(lines) + "\n", encoding="utf-8")


def export_json(result: AnalysisResult, output_file: Path, focus: str = "") -> None:
    nodes, edges = _focused_subgraph(result, focus)
    payload = {
        "project": str(result.project_root),
        "nodes": [
            {
                "id": result.relative(node),
                "kind": SourceFile(node).kind.value,
                "component": result.condensed.component_of(node).index,
            }
            for node in nodes
        ],
        "edges": [
            {"src": result.relative(src), "dst": result.relative(dst)}
            for src, dst in edges
        ],
    }
    output_file.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def _focused_subgraph(result: AnalysisResult, focus: str):
    graph = result.graph
    all_edges = [(e.src, e.dst) for e in graph.edges()]
    if not focus:
        return list(graph.nodes), all_edges

    focus_nodes: Set[Path] = {n for n in graph.nodes if focus in result.relative(n)}
    if not focus_nodes:
        return list(graph.nodes), all_edges

    edge_subset: List = [e for e in all_edges if e[0] in focus_nodes or e[1] in focus_nodes]
    node_subset: Set[Path] = set(focus_nodes)
    for src, dst in edge_subset:
        node_subset.add(src)
        node_subset.add(dst)
    return sorted(node_subset, key=str), edge_subset


def _esc(text: str) -> str:
    return text.replace('"', '\\"')
