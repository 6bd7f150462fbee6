"""Tests for report rendering and graph export helpers."""

import json
from pathlib import Path

from rich.console import Console

from scar_cli.graph_export import export_dot, export_json
from scar_cli.models import RankMode
from scar_cli.orchestrator import analyze
from scar_cli.report import build_impact_tree, render_cycles, render_report, to_payload


def _console() -> Console:
    return Console(record=True, width=200)


def test_payload_uses_relative_paths(sample_project_path: Path):
    result = analyze(sample_project_path, n=1)

    payload = to_payload(result)

    assert payload["files"] == 4
    assert payload["edges"] == 3
    assert payload["rankings"]["topN"] == [{"file": "test001.h", "score": 2}]
    assert payload["rankings"]["topN-impact"] == [{"file": "test001.h", "score": 3}]


def test_render_report_contains_rankings(sample_project_path: Path):
    console = _console()

    render_report(analyze(sample_project_path), console)

    text = console.export_text()
    assert "Top included files" in text
    assert "Impacted files" in text
    assert "Unresolved local includes: 0" in text


def test_impact_tree_renders_all_dependents(sample_project_path: Path):
    result = analyze(sample_project_path)
    console = _console()
    root = result.rankings[RankMode.IMPACT].entries[0].path

    console.print(build_impact_tree(result, root))

    text = console.export_text()
    for name in ("test001.h", "test001.cpp", "test002.h", "test002.cpp"):
        assert name in text


def test_render_cycles_lists_members(make_project):
    root = make_project({
        "x.h": '#include "y.h"\n',
        "y.h": '#include "x.h"\n',
        "self.h": '#include "self.h"\n',
    })
    console = _console()

    render_cycles(analyze(root), console)

    text = console.export_text()
    assert "Cycle 1 (2 files)" in text
    assert "Self include self.h" in text


def test_export_dot_marks_cycles(make_project, temp_dir: Path):
    root = make_project({"x.h": '#include "y.h"\n', "y.h": '#include "x.h"\n'})
    output = temp_dir / "out.dot"

    export_dot(analyze(root), output)

    text = output.read_text(encoding="utf-8")
    assert '"x.h" [label="x.h", color=red];' in text
    assert '"x.h" -> "y.h";' in text


def test_export_json_focus(make_project, temp_dir: Path):
    root = make_project({
        "a.h": '#include "b.h"\n',
        "b.h": "",
        "c.h": '#include "d.h"\n',
        "d.h": "",
    })
    output = temp_dir / "out.json"

    export_json(analyze(root), output, focus="b.h")

    payload = json.loads(output.read_text(encoding="utf-8"))
    assert [n["id"] for n in payload["nodes"]] == ["a.h", "b.h"]
    assert payload["edges"] == [{"src": "a.h", "dst": "b.h"}]
    assert {n["kind"] for n in payload["nodes"]} == {"header"}
