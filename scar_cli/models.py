"""Core data models shared by the extraction, graph, and ranking layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Tuple

from .config import HEADER_EXTENSIONS


class IncludeForm(str, Enum):
    QUOTED = "quoted"
    ANGLE = "angle"


class FileKind(str, Enum):
    HEADER = "header"
    IMPLEMENTATION = "implementation"


class RankMode(str, Enum):
    TOPN = "topN"
    IMPACT = "topN-impact"


@dataclass(frozen=True)
class SourceFile:
    """A discovered file, identified by its canonical absolute path."""

    path: Path

    @property
    def kind(self) -> FileKind:
        if self.path.suffix.lower() in HEADER_EXTENSIONS:
            return FileKind.HEADER
        return FileKind.IMPLEMENTATION

    @property
    def name(self) -> str:
        return self.path.name

    def __str__(self) -> str:
        return str(self.path)


@dataclass(frozen=True)
class RawInclude:
    target: str
    form: IncludeForm
    origin: Path
    line: int


@dataclass(frozen=True)
class DependencyEdge:
    src: Path
    dst: Path


@dataclass(frozen=True)
class UnresolvedInclude:
    include: RawInclude


@dataclass(frozen=True)
class AmbiguousResolution:
    include: RawInclude
    chosen: Path
    candidates: Tuple[Path, ...]


@dataclass(frozen=True)
class UnreadableFile:
    path: Path
    reason: str


@dataclass(frozen=True)
class ExtractionResult:
    """Output of the Include Extractor for a single file."""

    path: Path
    includes: Tuple[RawInclude, ...] = ()
    error: UnreadableFile | None = None


@dataclass
class Diagnostics:
    unreadable_files: List[UnreadableFile] = field(default_factory=list)
    unresolved_includes: List[UnresolvedInclude] = field(default_factory=list)
    ambiguous_resolutions: List[AmbiguousResolution] = field(default_factory=list)
    cycles: List[Tuple[Path, ...]] = field(default_factory=list)
    self_includes: List[Path] = field(default_factory=list)
    system_includes: int = 0

    @property
    def unresolved_count(self) -> int:
        return len(self.unresolved_includes)

    @property
    def cycle_count(self) -> int:
        return len(self.cycles)

    def summary(self) -> Dict[str, int]:
        return {
            "unreadable_files": len(self.unreadable_files),
            "unresolved_includes": self.unresolved_count,
            "ambiguous_resolutions": len(self.ambiguous_resolutions),
            "cycles": self.cycle_count,
            "self_includes": len(self.self_includes),
            "system_includes": self.system_includes,
        }


@dataclass(frozen=True)
class RankingEntry:
    path: Path
    score: int


@dataclass(frozen=True)
class RankingResult:
    mode: RankMode
    entries: Tuple[RankingEntry, ...]

    def __len__(self) -> int:
        return len(self.entries)

    def as_pairs(self) -> List[Tuple[Path, int]]:
        return [(e.path, e.score) for e in self.entries]

    def scores(self) -> Dict[Path, int]:
        return {e.path: e.score for e in self.entries}
