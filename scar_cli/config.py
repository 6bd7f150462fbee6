"""Static defaults for Scar analysis runs."""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(os.environ.get("SCAR_HOME", str(Path.home() / ".scar"))).expanduser()
USER_CONFIG_FILE = BASE_DIR / "config.toml"
PROJECT_CONFIG_NAME = ".scar.toml"

HEADER_EXTENSIONS = frozenset({".h", ".hh", ".hpp", ".hxx", ".h++", ".inl"})
IMPLEMENTATION_EXTENSIONS = frozenset({".c", ".cc", ".cpp", ".cxx", ".c++"})
SOURCE_EXTENSIONS = HEADER_EXTENSIONS | IMPLEMENTATION_EXTENSIONS

SKIP_DIRS = frozenset({
    ".git", ".svn", ".hg", "node_modules", "__pycache__",
    "build", "cmake-build-debug", "cmake-build-release", "out",
})

# Unreal-style generated and intermediate trees
SKIP_PATH_FRAGMENTS = ("Intermediate", "Binaries", "generated.h")

DEFAULT_TOP_N = 42
DEFAULT_WORKERS = min(32, (os.cpu_count() or 1) + 4)
PROGRESS_EVERY = 1000
