"""Pipeline orchestrator: discover, extract, resolve, build, condense, rank."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .condenser import CondensedGraph, condense
from .config_manager import AnalysisOptions
from .errors import ConfigError
from .extractor import extract_file
from .graph import DependencyGraph, GraphBuilder
from .models import (
    AmbiguousResolution,
    Diagnostics,
    ExtractionResult,
    RankingResult,
    RankMode,
    SourceFile,
    UnresolvedInclude,
)
from .ranking import rank_direct, rank_impact
from .resolver import PathResolver, Resolution, ResolutionStatus
from .scanner import ProjectScanner, validate_project_path

logger = logging.getLogger(__name__)

ALL_MODES: Tuple[RankMode, ...] = (RankMode.TOPN, RankMode.IMPACT)


@dataclass
class AnalysisResult:
    project_root: Path
    files: Tuple[SourceFile, ...]
    graph: DependencyGraph
    condensed: CondensedGraph
    rankings: Dict[RankMode, RankingResult] = field(default_factory=dict)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    @property
    def is_empty(self) -> bool:
        return not self.files

    def relative(self, path: Path) -> str:
        try:
            return path.relative_to(self.project_root).as_posix()
        except ValueError:
            return str(path)


class AnalysisOrchestrator:
    """Runs one single-shot analysis of a project tree.

    Extraction and resolution fan out over a thread pool. Resolution starts
    only after every file has been discovered and extracted, since the
    resolver needs the complete file set. Graph building, condensation and
    ranking run on the calling thread over immutable data.
    """

    def __init__(self, project_path: Path | str, options: Optional[AnalysisOptions] = None) -> None:
        self.options = options or AnalysisOptions()
        self.project_root = validate_project_path(project_path)

    @property
    def search_roots(self) -> Tuple[Path, ...]:
        return tuple(self.options.include_dirs) + (self.project_root,)

    def discover(self) -> List[SourceFile]:
        return ProjectScanner(self.project_root, self.options).scan_files()

    def extract(self, files: Sequence[SourceFile]) -> List[ExtractionResult]:
        with ThreadPoolExecutor(max_workers=self.options.workers) as pool:
            return list(pool.map(extract_file, [f.path for f in files]))

    def resolve(
        self,
        files: Sequence[SourceFile],
        extractions: Sequence[ExtractionResult],
    ) -> List[List[Resolution]]:
        resolver = PathResolver(
            files,
            search_roots=self.search_roots,
            basename_fallback=self.options.basename_fallback,
        )
        with ThreadPoolExecutor(max_workers=self.options.workers) as pool:
            return list(pool.map(resolver.resolve_all, [e.includes for e in extractions]))

    def build(
        self,
        files: Sequence[SourceFile],
        extractions: Sequence[ExtractionResult],
        resolutions: Sequence[Sequence[Resolution]],
        diagnostics: Diagnostics,
    ) -> DependencyGraph:
        builder = GraphBuilder(files)
        for extraction, resolved in zip(extractions, resolutions):
            if extraction.error is not None:
                diagnostics.unreadable_files.append(extraction.error)
                continue
            for res in resolved:
                if res.status == ResolutionStatus.SYSTEM:
                    diagnostics.system_includes += 1
                elif res.status == ResolutionStatus.UNRESOLVED:
                    diagnostics.unresolved_includes.append(UnresolvedInclude(res.include))
                else:
                    if res.is_ambiguous:
                        diagnostics.ambiguous_resolutions.append(
                            AmbiguousResolution(res.include, res.target, res.candidates)
                        )
                    builder.add_edge(extraction.path, res.target)
        return builder.build()

    def run(self, modes: Iterable[RankMode] = ALL_MODES, n: Optional[int] = None) -> AnalysisResult:
        limit = self.options.top_n if n is None else n
        if limit < 0:
            raise ConfigError("n", limit, "must not be negative")
        modes = tuple(modes)

        files = self.discover()
        diagnostics = Diagnostics()
        if not files:
            logger.warning("No C/C++ files found under %s", self.project_root)

        extractions = self.extract(files)
        resolutions = self.resolve(files, extractions)
        graph = self.build(files, extractions, resolutions, diagnostics)
        condensed = condense(graph)

        diagnostics.cycles = [c.members for c in condensed.cycles()]
        diagnostics.self_includes = [c.representative for c in condensed.self_includes()]

        rankings: Dict[RankMode, RankingResult] = {}
        for mode in modes:
            if mode == RankMode.TOPN:
                rankings[mode] = rank_direct(graph, limit)
            else:
                rankings[mode] = rank_impact(condensed, limit)

        logger.info(
            "Analysis finished: %d files, %d unresolved includes, %d cycles",
            len(files), diagnostics.unresolved_count, diagnostics.cycle_count,
        )
        return AnalysisResult(
            project_root=self.project_root,
            files=tuple(files),
            graph=graph,
            condensed=condensed,
            rankings=rankings,
            diagnostics=diagnostics,
        )


def analyze(
    project_path: Path | str,
    modes: Iterable[RankMode] = ALL_MODES,
    n: Optional[int] = None,
    options: Optional[AnalysisOptions] = None,
) -> AnalysisResult:
    """Analyze *project_path* and return rankings plus diagnostics."""
    return AnalysisOrchestrator(project_path, options).run(modes=modes, n=n)
