"""Tests for bracket scoring."""

import pytest

from conftest import chalk_picks, chalk_results, entrant, result
from engine.scorer import actual_totals, score, score_all
from models.pool import GameResult, PickSet, results_by_game


def test_five_correct_first_round_picks_score_50(chalk_player):
    record = score(chalk_player, chalk_results(range(1, 6)))

    assert record.actual_score == 50
    assert record.correct_picks == 5
    assert record.graded_picks == 5
    assert record.total_picks == 63
    assert record.round_scores["ROUND_64"] == 50
    assert record.champion == "G1a"


def test_ceiling_when_nothing_is_eliminated(chalk_player):
    record = score(chalk_player, chalk_results(range(1, 6)))
    assert record.max_possible_score == 1920


def test_ceiling_drops_picks_of_eliminated_entrants(chalk_player):
    results = chalk_results(range(2, 6))
    results[1] = result(1, "G1b", "G1a")

    record = score(chalk_player, results)

    assert record.actual_score == 40
    # G1a was picked in games 33, 49, 57, 61, 63 (20+40+80+160+320)
    assert record.max_possible_score == 1920 - 10 - 620


def test_hypothetical_winners_count_toward_projection_only(chalk_player):
    results = chalk_results([1, 2])
    record = score(chalk_player, results, {33: "G1a", 34: "G4a"})

    assert record.actual_score == 20
    assert record.projected_score == 40
    assert record.projected_round_scores["ROUND_32"] == 20
    assert record.round_scores["ROUND_32"] == 0


def test_result_takes_precedence_over_hypothetical(chalk_player):
    results = {1: result(1, "G1b", "G1a")}
    record = score(chalk_player, results, {1: "G1a"})

    assert record.actual_score == 0
    assert record.projected_score == 0


def test_hypothetical_winner_that_already_lost_earns_nothing(chalk_player):
    results = {1: result(1, "G1b", "G1a")}
    record = score(chalk_player, results, {33: "G1a"})

    assert record.projected_score == 0
    assert record.projected_score <= record.max_possible_score


def test_actual_le_projected_le_ceiling(pool):
    results = chalk_results(range(1, 17))
    results[20] = result(20, "G20b", "G20a")
    hypothetical = {33: "G1a", 34: "G3b", 49: "G1b", 63: "G17a"}

    for record in score_all(pool, results, hypothetical):
        assert record.actual_score <= record.projected_score <= record.max_possible_score


def test_empty_pick_set_scores_zero():
    record = score(PickSet("nobody"), chalk_results(range(1, 33)), {33: "G1a"})

    assert record.actual_score == 0
    assert record.projected_score == 0
    assert record.max_possible_score == 0
    assert record.champion is None
    assert all(v == 0 for v in record.round_scores.values())


def test_missing_picks_are_skipped():
    ps = PickSet("partial", {1: "G1a", 3: "G3a"})
    record = score(ps, chalk_results([1, 2, 3]))

    assert record.actual_score == 20
    assert record.graded_picks == 2


def test_score_is_pure(chalk_player):
    results = chalk_results(range(1, 9))
    hypothetical = {33: "G1a"}
    first = score(chalk_player, results, hypothetical)
    second = score(chalk_player, results, hypothetical)

    assert first == second
    assert hypothetical == {33: "G1a"}
    assert len(results) == 8


def test_actual_totals(pool):
    results = chalk_results([1, 2])
    assert actual_totals(pool, results) == {"chalky": 20, "upsetter": 10, "zed": 20}


def test_pick_set_copies_and_validates_picks():
    picks = {1: "G1a"}
    ps = PickSet("x", picks)
    picks[2] = "G2a"
    assert 2 not in ps.picks

    with pytest.raises(ValueError):
        PickSet("bad", {64: "G1a"})


def test_result_validation():
    with pytest.raises(ValueError):
        GameResult(game_id=1, winner="G1a", loser="G1a")
    with pytest.raises(ValueError):
        GameResult(game_id=70, winner="G1a")
    with pytest.raises(ValueError):
        results_by_game([result(1, "G1a"), result(1, "G1b")])


def test_full_chalk_bracket_scores_max():
    results = {}
    picks = chalk_picks()
    for g, winner in picks.items():
        results[g] = GameResult(game_id=g, winner=winner)
    record = score(PickSet("perfect", picks), results)

    assert record.actual_score == record.max_possible_score == 1920
    assert entrant(1, "a") == record.champion
