"""Strongly connected components and the condensed include DAG.

Include cycles are legal C++, so reachability questions are answered on
the condensation: every strongly connected component becomes one node and
the resulting graph is acyclic. The original :class:`DependencyGraph` is
never modified.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Tuple

import networkx as nx

from .graph import DependencyGraph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Component:
    index: int
    members: Tuple[Path, ...]
    self_loop: bool = False

    @property
    def representative(self) -> Path:
        return self.members[0]

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def is_cycle(self) -> bool:
        """True for multi-file cycles and for files that include themselves."""
        return self.size > 1 or self.self_loop


def strongly_connected_components(graph: DependencyGraph) -> List[Tuple[Path, ...]]:
    """Components of *graph*, each as a path-sorted tuple of files."""
    return [
        tuple(sorted(scc, key=str))
        for scc in nx.strongly_connected_components(graph.digraph)
    ]


class CondensedGraph:
    """Read-only DAG whose nodes are the components of a dependency graph.

    Component ``X`` has an edge to ``Y`` iff some file of ``X`` includes
    some file of ``Y`` and ``X != Y``. Components are indexed in reverse
    topological order, so every edge points from a higher to a lower index.
    """

    def __init__(self, graph: DependencyGraph) -> None:
        self.graph = graph
        sccs = strongly_connected_components(graph)
        raw: "nx.DiGraph[Any]" = nx.condensation(graph.digraph, scc=[set(s) for s in sccs])

        # networkx numbers components in scc order; renumber so that
        # includers get higher indices, with ties broken by path.
        order = list(nx.lexicographical_topological_sort(raw, key=lambda i: str(sccs[i][0])))
        renumber = {old: len(order) - 1 - pos for pos, old in enumerate(order)}
        self._dag: nx.DiGraph[int] = nx.freeze(nx.relabel_nodes(raw, renumber))

        components: List[Component] = [None] * len(sccs)  # type: ignore[list-item]
        for old, members in enumerate(sccs):
            index = renumber[old]
            self_loop = len(members) == 1 and graph.has_edge(members[0], members[0])
            components[index] = Component(index=index, members=members, self_loop=self_loop)

        self.components: Tuple[Component, ...] = tuple(components)
        self._component_of: Dict[Path, int] = {
            path: renumber[old] for path, old in raw.graph["mapping"].items()
        }

        logger.info(
            "Condensed %d files into %d components (%d cycles)",
            len(graph), len(self.components), len(self.cycles()),
        )

    def __len__(self) -> int:
        return len(self.components)

    @property
    def dag(self) -> "nx.DiGraph[Any]":
        """The frozen condensation, nodes are component indices."""
        return self._dag

    def component_of(self, path: Path) -> Component:
        return self.components[self._component_of[path]]

    def successors(self, index: int) -> FrozenSet[int]:
        """Components included by component *index*."""
        return frozenset(self._dag.successors(index))

    def predecessors(self, index: int) -> FrozenSet[int]:
        """Components that include component *index*."""
        return frozenset(self._dag.predecessors(index))

    def edges(self) -> List[Tuple[int, int]]:
        return sorted(self._dag.edges)

    def cycles(self) -> List[Component]:
        """Components made of more than one file."""
        return [c for c in self.components if c.size > 1]

    def self_includes(self) -> List[Component]:
        return [c for c in self.components if c.self_loop]

    def topological_order(self) -> List[int]:
        """Component indices with every includer before what it includes."""
        return [c.index for c in reversed(self.components)]

    def is_acyclic(self) -> bool:
        return nx.is_directed_acyclic_graph(self._dag)


def condense(graph: DependencyGraph) -> CondensedGraph:
    return CondensedGraph(graph)
