"""Integration tests for CLI commands."""

import json
from pathlib import Path

from typer.testing import CliRunner

from scar_cli.cli import app

runner = CliRunner()


class TestAnalyzeCommand:
    """Tests for 'scar analyze'."""

    def test_analyze_both_modes(self, sample_project_path: Path):
        result = runner.invoke(app, ["analyze", str(sample_project_path)])

        assert result.exit_code == 0
        assert "Top included files" in result.stdout
        assert "Top impacting files" in result.stdout
        assert "test001.h" in result.stdout
        assert "Diagnostics" in result.stdout

    def test_analyze_topn_only(self, sample_project_path: Path):
        result = runner.invoke(app, ["analyze", str(sample_project_path), "--topn"])

        assert result.exit_code == 0
        assert "Top included files" in result.stdout
        assert "Top impacting files" not in result.stdout

    def test_analyze_json(self, sample_project_path: Path):
        result = runner.invoke(app, ["analyze", str(sample_project_path), "--json", "-i", "-n", "2"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert list(payload["rankings"]) == ["topN-impact"]
        assert payload["rankings"]["topN-impact"] == [
            {"file": "test001.h", "score": 3},
            {"file": "test002.h", "score": 1},
        ]
        assert payload["diagnostics"]["unresolved_includes"] == 0
        assert payload["diagnostics"]["cycles"] == 0

    def test_analyze_zero_results(self, sample_project_path: Path):
        result = runner.invoke(app, ["analyze", str(sample_project_path), "--json", "-n", "0"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["rankings"] == {"topN": [], "topN-impact": []}

    def test_analyze_with_tree(self, sample_project_path: Path):
        result = runner.invoke(app, ["analyze", str(sample_project_path), "-i", "--tree", "-n", "1"])

        assert result.exit_code == 0
        assert "test002.cpp" in result.stdout

    def test_analyze_nonexistent_path(self):
        result = runner.invoke(app, ["analyze", "/nonexistent/path"])

        assert result.exit_code == 1
        assert "Invalid project path" in result.output

    def test_analyze_negative_num(self, sample_project_path: Path):
        result = runner.invoke(app, ["analyze", str(sample_project_path), "-n", "-1"])

        assert result.exit_code != 0

    def test_analyze_empty_project(self, temp_dir: Path):
        result = runner.invoke(app, ["analyze", str(temp_dir)])

        assert result.exit_code == 0
        assert "No C/C++ files found" in result.output

    def test_analyze_details_lists_unresolved(self, make_project):
        root = make_project({"main.cpp": '#include <vector>\n#include "missing.h"\n'})

        result = runner.invoke(app, ["analyze", str(root), "--details"])

        assert result.exit_code == 0
        assert "missing.h" in result.stdout

    def test_analyze_bad_config_value_fails_cleanly(self, make_project):
        root = make_project({
            "main.cpp": "int main() { return 0; }\n",
            ".scar.toml": '[analysis]\nworkers = "four"\n',
        })

        result = runner.invoke(app, ["analyze", str(root)])

        assert result.exit_code == 1
        assert not isinstance(result.exception, ValueError)
        assert "Invalid value for 'workers'" in result.output


class TestCyclesCommand:
    """Tests for 'scar cycles'."""

    def test_reports_cycle(self, make_project):
        root = make_project({"x.h": '#include "y.h"\n', "y.h": '#include "x.h"\n'})

        result = runner.invoke(app, ["cycles", str(root)])

        assert result.exit_code == 0
        assert "Cycle 1" in result.stdout
        assert "x.h" in result.stdout
        assert "y.h" in result.stdout

    def test_no_cycles(self, sample_project_path: Path):
        result = runner.invoke(app, ["cycles", str(sample_project_path)])

        assert result.exit_code == 0
        assert "No include cycles" in result.stdout


class TestExportGraphCommand:
    """Tests for 'scar export-graph'."""

    def test_export_dot(self, sample_project_path: Path, temp_dir: Path):
        output = temp_dir / "graph.dot"

        result = runner.invoke(app, ["export-graph", str(sample_project_path), "-o", str(output)])

        assert result.exit_code == 0
        text = output.read_text(encoding="utf-8")
        assert text.startswith("digraph includes {")
        assert '"test002.h" -> "test001.h";' in text

    def test_export_json(self, sample_project_path: Path, temp_dir: Path):
        output = temp_dir / "graph.json"

        result = runner.invoke(
            app, ["export-graph", str(sample_project_path), "-f", "json", "-o", str(output)]
        )

        assert result.exit_code == 0
        payload = json.loads(output.read_text(encoding="utf-8"))
        assert {"src": "test001.cpp", "dst": "test001.h"} in payload["edges"]
        assert len(payload["nodes"]) == 4

    def test_export_bad_format(self, sample_project_path: Path):
        result = runner.invoke(app, ["export-graph", str(sample_project_path), "-f", "svg"])

        assert result.exit_code != 0


class TestInitConfigCommand:
    """Tests for 'scar init-config'."""

    def test_writes_project_config(self, make_project):
        root = make_project({"src/main.cpp": '#include <core.h>\n', "include/core.h": ""})

        result = runner.invoke(app, ["init-config", str(root), "-I", "include"])

        assert result.exit_code == 0
        assert (root / ".scar.toml").exists()

        analyzed = runner.invoke(app, ["analyze", str(root), "--json", "-t"])
        payload = json.loads(analyzed.stdout)
        assert payload["rankings"]["topN"][0] == {"file": "include/core.h", "score": 1}


def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert "Scar v" in result.stdout
