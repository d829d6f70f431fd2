"""Tests for file loaders."""

import json

import pytest

from ingestion.pool_loader import (
    load_hypothetical_from_csv,
    load_pool_from_json,
    load_probabilities_from_json,
    load_results_from_csv,
)


def test_load_pool_from_json(tmp_path):
    path = tmp_path / "pool.json"
    path.write_text(json.dumps({
        "metadata": {"total_brackets": 2},
        "games": {
            "1": {"picks": {"bob": "AUB", "alice": "ALST"}, "stats": {}},
            "63": {"picks": {"alice": "DUKE", "bob": ""}},
        },
    }))

    pool = load_pool_from_json(str(path))

    assert [ps.participant for ps in pool] == ["alice", "bob"]
    assert pool[0].picks == {1: "ALST", 63: "DUKE"}
    assert pool[1].picks == {1: "AUB"}
    assert pool[1].champion is None


def test_load_pool_rejects_bad_game_ids(tmp_path):
    path = tmp_path / "pool.json"
    path.write_text(json.dumps({"games": {"first": {"picks": {"a": "X"}}}}))
    with pytest.raises(ValueError):
        load_pool_from_json(str(path))

    path.write_text(json.dumps({"games": {"99": {"picks": {"a": "X"}}}}))
    with pytest.raises(ValueError):
        load_pool_from_json(str(path))


def test_load_results_from_csv(tmp_path):
    path = tmp_path / "results.csv"
    path.write_text(
        "Game ID,Winner,Loser,Order,Winner Seed,Loser Seed\n"
        "1,AUB,ALST,2,1,16\n"
        "2, LOU , CREI ,1,8,9\n"
    )

    results = load_results_from_csv(str(path))

    assert set(results) == {1, 2}
    assert results[1].winner == "AUB"
    assert results[1].loser_seed == 16
    assert results[2].winner == "LOU"
    assert results[2].loser == "CREI"
    assert results[2].order == 1


def test_load_winner_only_results(tmp_path):
    path = tmp_path / "winners.csv"
    path.write_text("Game ID,Winner\n1,AUB\n2,LOU\n")

    results = load_results_from_csv(str(path))

    assert results[1].loser is None
    assert results[1].winner_seed is None
    assert results[2].order == 1


def test_load_results_errors(tmp_path):
    path = tmp_path / "results.csv"
    path.write_text("Game,Winner\n1,AUB\n")
    with pytest.raises(ValueError):
        load_results_from_csv(str(path))

    path.write_text("Game ID,Winner\n1,AUB\n1,ALST\n")
    with pytest.raises(ValueError):
        load_results_from_csv(str(path))


def test_load_hypothetical_from_csv(tmp_path):
    path = tmp_path / "whatif.csv"
    path.write_text("Game ID,Winner\n33,AUB\n34,\n")

    assert load_hypothetical_from_csv(str(path)) == {33: "AUB"}


def test_load_probabilities_from_json(tmp_path):
    path = tmp_path / "probs.json"
    path.write_text(json.dumps({"63": {"DUKE": 0.6, "AUB": 0.4}}))
    assert load_probabilities_from_json(str(path)) == {63: {"DUKE": 0.6, "AUB": 0.4}}

    path.write_text(json.dumps({"63": {"DUKE": 0.6, "AUB": 0.6}}))
    with pytest.raises(ValueError):
        load_probabilities_from_json(str(path))
