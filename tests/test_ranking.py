"""Tests for the fan-in and transitive impact rankings."""

from pathlib import Path

import pytest

from scar_cli.condenser import condense
from scar_cli.errors import ConfigError
from scar_cli.graph import graph_from_edges
from scar_cli.models import RankMode
from scar_cli.ranking import (
    direct_scores,
    impact_scores,
    impact_tree,
    rank,
    rank_direct,
    rank_impact,
)


def _p(name: str) -> Path:
    return Path("/p") / name


A, B, C = _p("a.h"), _p("b.h"), _p("c.h")


@pytest.fixture
def chain():
    """a.h includes b.h, b.h includes c.h."""
    return graph_from_edges([A, B, C], [(A, B), (B, C)])


def test_direct_ranking_breaks_ties_by_path(chain):
    result = rank_direct(chain, 42)

    assert result.mode == RankMode.TOPN
    assert result.as_pairs() == [(B, 1), (C, 1), (A, 0)]


def test_impact_ranking_on_chain(chain):
    result = rank_impact(condense(chain), 42)

    assert result.mode == RankMode.IMPACT
    assert result.as_pairs() == [(C, 2), (B, 1), (A, 0)]


def test_two_cycle_members_share_impact_score():
    x, y = _p("x.h"), _p("y.h")
    graph = graph_from_edges([x, y], [(x, y), (y, x)])

    scores = impact_scores(condense(graph))

    assert scores == {x: 0, y: 0}


def test_cycle_impact_counts_only_outside_files():
    x, y, user1, user2 = _p("x.h"), _p("y.h"), _p("u1.cpp"), _p("u2.cpp")
    graph = graph_from_edges(
        [x, y, user1, user2],
        [(x, y), (y, x), (user1, x), (user2, user1)],
    )

    result = rank_impact(condense(graph), 10)

    assert result.as_pairs()[:2] == [(x, 2), (y, 2)]
    assert result.scores()[user1] == 1
    assert result.scores()[user2] == 0


def test_diamond_is_not_double_counted():
    top, left, right, base = _p("top.cpp"), _p("left.h"), _p("right.h"), _p("base.h")
    graph = graph_from_edges(
        [top, left, right, base],
        [(top, left), (top, right), (left, base), (right, base)],
    )

    scores = impact_scores(condense(graph))

    assert scores[base] == 3
    assert scores[left] == 1
    assert scores[right] == 1
    assert scores[top] == 0


def test_self_include_does_not_inflate_scores():
    s, user = _p("self.h"), _p("user.cpp")
    graph = graph_from_edges([s, user], [(s, s), (user, s)])

    assert direct_scores(graph)[s] == 1
    assert impact_scores(condense(graph))[s] == 1


def test_truncation_and_no_padding(chain):
    assert len(rank_direct(chain, 2)) == 2
    assert len(rank_direct(chain, 100)) == 3
    assert len(rank_impact(condense(chain), 1)) == 1


def test_zero_limit_yields_empty_ranking(chain):
    assert rank_direct(chain, 0).entries == ()
    assert rank_impact(condense(chain), 0).entries == ()


def test_negative_limit_is_rejected(chain):
    with pytest.raises(ConfigError):
        rank_direct(chain, -1)


def test_rank_dispatches_by_mode(chain):
    assert rank(chain, RankMode.TOPN, 5) == rank_direct(chain, 5)
    assert rank(chain, RankMode.IMPACT, 5) == rank_impact(condense(chain), 5)


def test_rankings_are_pure(chain):
    condensed = condense(chain)
    assert rank_impact(condensed, 3) == rank_impact(condensed, 3)
    assert rank_direct(chain, 3) == rank_direct(chain, 3)


def test_empty_graph_gives_empty_rankings():
    graph = graph_from_edges([], [])

    assert rank_direct(graph, 42).entries == ()
    assert rank_impact(condense(graph), 42).entries == ()


def test_impact_tree_lists_each_dependent_once():
    top, left, right, base = _p("top.cpp"), _p("left.h"), _p("right.h"), _p("base.h")
    graph = graph_from_edges(
        [top, left, right, base],
        [(top, left), (top, right), (left, base), (right, base)],
    )

    tree = impact_tree(graph, base)

    assert tree[base] == [left, right]
    assert tree[left] == [top]
    assert tree[right] == []
    assert set(tree) == {top, left, right, base}


def test_impact_tree_depth_limit(chain):
    tree = impact_tree(chain, C, max_depth=1)

    assert tree == {C: [B], B: []}
