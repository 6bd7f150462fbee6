"""Ranking engine: direct fan-in ("topN") and transitive impact ("topN-impact").

Both rankings are pure functions of the graph. Scores sort descending and
ties break on the file path in ascending order, so output is stable across
runs and platforms.

Fan-in counts the distinct *other* files that include a file; a self
include does not raise a file's own score. Impact counts the distinct
files that reach a file through reversed include edges, excluding the
members of its own component, and is shared by every member of a cycle.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import networkx as nx

from .condenser import CondensedGraph, condense
from .errors import ConfigError
from .graph import DependencyGraph
from .models import RankingEntry, RankingResult, RankMode

logger = logging.getLogger(__name__)


def _check_limit(n: int) -> None:
    if n < 0:
        raise ConfigError("n", n, "must not be negative")


def _top(mode: RankMode, scores: Iterable[Tuple[Path, int]], n: int) -> RankingResult:
    _check_limit(n)
    ordered = sorted(scores, key=lambda item: (-item[1], str(item[0])))
    entries = tuple(RankingEntry(path=path, score=score) for path, score in ordered[:n])
    logger.debug("%s: kept %d of %d scored files", mode.value, len(entries), len(ordered))
    return RankingResult(mode=mode, entries=entries)


def direct_scores(graph: DependencyGraph) -> Dict[Path, int]:
    return {node: graph.in_degree(node) for node in graph.nodes}


def impact_scores(condensed: CondensedGraph) -> Dict[Path, int]:
    """Transitive dependents per file, computed once per component.

    The ancestors of a component in the condensed DAG are the components
    that reach it; summing their sizes counts each dependent file once,
    however many paths lead from it.
    """
    dag = condensed.dag
    scores: Dict[Path, int] = {}
    for component in condensed.components:
        score = sum(condensed.components[i].size for i in nx.ancestors(dag, component.index))
        for member in component.members:
            scores[member] = score
    return scores


def rank_direct(graph: DependencyGraph, n: int) -> RankingResult:
    """Top *n* files by number of direct includers."""
    return _top(RankMode.TOPN, direct_scores(graph).items(), n)


def rank_impact(condensed: CondensedGraph, n: int) -> RankingResult:
    """Top *n* files by number of transitively affected files."""
    return _top(RankMode.IMPACT, impact_scores(condensed).items(), n)


def rank(
    graph: DependencyGraph,
    mode: RankMode,
    n: int,
    condensed: Optional[CondensedGraph] = None,
) -> RankingResult:
    if mode == RankMode.TOPN:
        return rank_direct(graph, n)
    return rank_impact(condensed if condensed is not None else condense(graph), n)


def impact_tree(
    graph: DependencyGraph,
    root: Path,
    max_depth: Optional[int] = None,
) -> Dict[Path, List[Path]]:
    """Breadth-first tree of the files that reach *root* by inclusion.

    Returns a mapping from each visited file to its children in the tree;
    every reached file appears exactly once.
    """
    children: Dict[Path, List[Path]] = {root: []}
    edges = nx.bfs_edges(
        graph.digraph,
        root,
        reverse=True,
        depth_limit=max_depth,
        sort_neighbors=lambda nodes: sorted(nodes, key=str),
    )
    for node, includer in edges:
        children[node].append(includer)
        children[includer] = []
    return children
