"""File-level include graph.

Nodes are canonical file paths; an edge ``a -> b`` means ``a`` includes
``b``. Edges form a set, so repeated includes collapse into one edge. Self
edges are kept: a file that includes itself is a cycle of length one.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, FrozenSet, Iterable, Iterator, List, Tuple

import networkx as nx

from .models import DependencyEdge, SourceFile

logger = logging.getLogger(__name__)


class DependencyGraph:
    """Read-only view over a frozen ``nx.DiGraph``. Build it with :class:`GraphBuilder`."""

    def __init__(self, digraph: "nx.DiGraph[Any]") -> None:
        self._g = nx.freeze(digraph)
        self._nodes: Tuple[Path, ...] = tuple(sorted(self._g.nodes, key=str))

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node: object) -> bool:
        return self._g.has_node(node)

    def __iter__(self) -> Iterator[Path]:
        return iter(self._nodes)

    @property
    def digraph(self) -> "nx.DiGraph[Any]":
        """The underlying frozen networkx graph."""
        return self._g

    @property
    def nodes(self) -> Tuple[Path, ...]:
        return self._nodes

    @property
    def edge_count(self) -> int:
        return self._g.number_of_edges()

    def edges(self) -> List[DependencyEdge]:
        return [
            DependencyEdge(src, dst)
            for src, dst in sorted(self._g.edges, key=lambda e: (str(e[0]), str(e[1])))
        ]

    def has_edge(self, src: Path, dst: Path) -> bool:
        return self._g.has_edge(src, dst)

    def successors(self, node: Path) -> FrozenSet[Path]:
        """Files included by *node*."""
        return frozenset(self._g.successors(node))

    def predecessors(self, node: Path) -> FrozenSet[Path]:
        """Files that include *node*."""
        return frozenset(self._g.predecessors(node))

    def in_degree(self, node: Path) -> int:
        """Number of distinct other files that include *node*."""
        return self._g.in_degree(node) - (1 if self._g.has_edge(node, node) else 0)

    def self_loops(self) -> List[Path]:
        return sorted(nx.nodes_with_selfloops(self._g), key=str)


class GraphBuilder:
    """Accumulates nodes and edges, then freezes them into a graph."""

    def __init__(self, files: Iterable[SourceFile] = ()) -> None:
        self._g: nx.DiGraph[Path] = nx.DiGraph()
        self._g.add_nodes_from(f.path for f in files)

    def add_file(self, path: Path) -> None:
        self._g.add_node(path)

    def add_edge(self, src: Path, dst: Path) -> bool:
        """Add ``src -> dst``. Returns False when the edge already existed."""
        for endpoint in (src, dst):
            if not self._g.has_node(endpoint):
                raise KeyError(f"Edge endpoint {endpoint} is not a node of the graph")
        if self._g.has_edge(src, dst):
            return False
        self._g.add_edge(src, dst)
        if src == dst:
            logger.debug("Self include recorded for %s", src)
        return True

    def build(self) -> DependencyGraph:
        graph = DependencyGraph(self._g.copy())
        logger.info("Built include graph: %d files, %d edges", len(graph), graph.edge_count)
        return graph


def graph_from_edges(nodes: Iterable[Path], edges: Iterable[Tuple[Path, Path]]) -> DependencyGraph:
    """Build a graph from explicit node and edge lists."""
    builder = GraphBuilder()
    for node in nodes:
        builder.add_file(node)
    for src, dst in edges:
        builder.add_edge(src, dst)
    return builder.build()
