import pytest

from models.bracket import feeders_of
from models.pool import GameResult, PickSet


def entrant(game_id: int, side: str) -> str:
    """First-round entrant name, e.g. G1a / G1b for game 1."""
    return f"G{game_id}{side}"


def chalk_picks(overrides: dict[int, str] | None = None) -> dict[int, str]:
    """A full 63-game bracket where the 'a' side always advances."""
    picks = {g: entrant(g, "a") for g in range(1, 33)}
    for g in range(33, 64):
        picks[g] = picks[feeders_of(g)[0]]
    picks.update(overrides or {})
    return picks


def result(game_id, winner, loser=None, order=None, winner_seed=None, loser_seed=None):
    return GameResult(
        game_id=game_id,
        winner=winner,
        loser=loser,
        order=game_id if order is None else order,
        winner_seed=winner_seed,
        loser_seed=loser_seed,
    )


def chalk_results(game_ids) -> dict[int, GameResult]:
    """First-round results where the 'a' side wins."""
    return {g: result(g, entrant(g, "a"), entrant(g, "b"), winner_seed=1, loser_seed=16) for g in game_ids}


@pytest.fixture
def chalk_player():
    return PickSet("chalky", chalk_picks())


@pytest.fixture
def upset_player():
    """Picks the 'b' side in game 1 and carries it to the title."""
    overrides = {1: "G1b", 33: "G1b", 49: "G1b", 57: "G1b", 61: "G1b", 63: "G1b"}
    return PickSet("upsetter", chalk_picks(overrides))


@pytest.fixture
def pool(chalk_player, upset_player):
    return [chalk_player, upset_player, PickSet("zed", chalk_picks({63: "G17a"}))]
