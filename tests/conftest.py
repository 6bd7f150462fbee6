"""Pytest configuration and fixtures for Scar tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Callable, Dict, Generator

import pytest


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path: Path, monkeypatch):
    """Point the user config at an empty directory so local settings never leak in."""
    home = tmp_path / "scar_home"
    monkeypatch.setattr("scar_cli.config.USER_CONFIG_FILE", home / "config.toml")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp.resolve()
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def sample_project_path() -> Path:
    """Get path to the sample C++ project."""
    return Path(__file__).parent / "fixtures" / "sample_project"


@pytest.fixture
def make_project(temp_dir: Path) -> Callable[[Dict[str, str]], Path]:
    """Factory writing ``{relative_path: content}`` into a fresh project tree."""

    def _make(files: Dict[str, str]) -> Path:
        root = temp_dir / "project"
        root.mkdir(exist_ok=True)
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return root

    return _make
