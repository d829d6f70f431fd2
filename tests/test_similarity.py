"""Tests for pick-overlap similarity."""

import pytest

from conftest import chalk_picks
from engine.similarity import rank_similar, similarity
from models.bracket import points_for
from models.pool import PickSet


def test_identical_brackets_are_fully_similar(chalk_player):
    result = similarity(chalk_player, chalk_player)

    assert result.jaccard == 1.0
    assert result.weighted_jaccard == 1.0
    assert result.shared_points == 1920


def test_twenty_identical_games():
    games = list(range(1, 17)) + [33, 34, 49, 63]
    picks = {g: chalk_picks()[g] for g in games}
    a = PickSet("a", picks)
    b = PickSet("b", picks)

    result = similarity(a, b)

    assert result.jaccard == 1.0
    assert result.shared_points == sum(points_for(g) for g in games) == 16 * 10 + 2 * 20 + 40 + 320


def test_similarity_is_symmetric(chalk_player, upset_player):
    ab = similarity(chalk_player, upset_player)
    ba = similarity(upset_player, chalk_player)

    assert ab.jaccard == pytest.approx(ba.jaccard)
    assert ab.weighted_jaccard == pytest.approx(ba.weighted_jaccard)
    assert ab.shared_points == ba.shared_points


def test_weighted_similarity_emphasises_later_rounds():
    a = PickSet("a", {1: "X", 63: "Z"})
    b = PickSet("b", {1: "X", 63: "W"})

    result = similarity(a, b)

    assert result.jaccard == pytest.approx(1 / 3)
    assert result.weighted_jaccard == pytest.approx(10 / 650)
    assert result.shared_points == 10


def test_custom_round_weights():
    a = PickSet("a", {1: "X", 63: "Z"})
    b = PickSet("b", {1: "X", 63: "W"})
    flat = {r: 1 for r in range(1, 7)}

    assert similarity(a, b, flat).weighted_jaccard == pytest.approx(1 / 3)


def test_empty_pick_sets():
    assert similarity(PickSet("a"), PickSet("b")).jaccard == 1.0
    result = similarity(PickSet("a", {1: "X"}), PickSet("b"))
    assert result.jaccard == 0.0
    assert result.weighted_jaccard == 0.0
    assert result.shared_points == 0


def test_rank_similar(pool):
    ranked = rank_similar("chalky", pool, scores={"zed": 40, "upsetter": 30})

    assert [r.participant for r in ranked] == ["zed", "upsetter"]
    assert ranked[0].score == 40
    assert ranked[0].weighted_jaccard > ranked[1].weighted_jaccard


def test_rank_similar_degenerate_inputs(pool):
    assert rank_similar("nobody", pool) == []
    assert rank_similar("chalky", []) == []
    assert rank_similar("chalky", [pool[0]]) == []
