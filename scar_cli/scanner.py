"""Discover C/C++ source and header files below a project root."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional

from . import config
from .config_manager import AnalysisOptions
from .errors import InvalidProjectPathError
from .models import SourceFile

logger = logging.getLogger(__name__)


def validate_project_path(path: Path | str) -> Path:
    """Return the canonical project root or raise :class:`InvalidProjectPathError`."""
    candidate = Path(path).expanduser()
    if not candidate.exists():
        raise InvalidProjectPathError(str(path), "does not exist")
    if not candidate.is_dir():
        raise InvalidProjectPathError(str(path), "is not a directory")
    return candidate.resolve()


class ProjectScanner:
    """Walk a project tree and yield the files worth analyzing.

    Hidden entries, directories listed in ``exclude_dirs`` and any path
    containing one of ``exclude_patterns`` are skipped. Results are
    canonical (symlinks resolved), deduplicated and sorted, so two scans of
    an unchanged tree return identical lists.
    """

    def __init__(self, base_path: Path | str, options: Optional[AnalysisOptions] = None) -> None:
        self.base_path = validate_project_path(base_path)
        self.options = options or AnalysisOptions()
        self.processed_files = 0

    def scan_files(self) -> List[SourceFile]:
        seen = set()
        files: List[SourceFile] = []

        for dirpath, dirnames, filenames in os.walk(self.base_path):
            dirnames[:] = sorted(
                d for d in dirnames
                if not d.startswith(".") and d not in self.options.exclude_dirs
            )
            for filename in sorted(filenames):
                full_path = Path(dirpath) / filename
                if not self.is_valid_file_name(filename):
                    continue
                if self.is_blacklisted(full_path):
                    continue
                canonical = full_path.resolve()
                if canonical in seen:
                    logger.debug("Skipping alias %s of %s", full_path, canonical)
                    continue
                seen.add(canonical)
                files.append(SourceFile(canonical))
                self._on_processed_file()

        files.sort(key=lambda f: str(f.path))
        logger.info("Discovered %d source files under %s", len(files), self.base_path)
        return files

    def is_valid_file_name(self, name: str) -> bool:
        if name.startswith("."):
            return False
        return Path(name).suffix.lower() in self.options.extensions

    def is_blacklisted(self, path: Path) -> bool:
        try:
            rel = str(path.relative_to(self.base_path))
        except ValueError:
            rel = str(path)
        return any(fragment in rel for fragment in self.options.exclude_patterns)

    def _on_processed_file(self) -> None:
        self.processed_files += 1
        if self.processed_files % config.PROGRESS_EVERY == 0:
            logger.info("Processed num. files: %d", self.processed_files)
