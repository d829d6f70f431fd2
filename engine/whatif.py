"""What-if helpers for exploring unplayed games.

These work on plain mappings supplied by the caller ({game_id: winner} for
hypothetical winners, {game_id: {entrant: p}} for probabilities) and always
return new mappings; nothing here holds state between calls.
"""

from __future__ import annotations

from typing import Iterable, Mapping

import numpy as np

import config
from engine.analysis import most_popular, pick_distribution
from models.bracket import all_game_ids, dependents_of, feeders_of, round_of
from models.pool import GameResult, PickSet
from models.probability import GameProbabilities, validate_probabilities

# {game_id: (entrant_a, entrant_b)} for first-round games
FirstRound = Mapping[int, tuple[str, str]]


def first_round_from_picks(pick_sets: Iterable[PickSet]) -> dict[int, tuple[str, str]]:
    """First-round matchups read off the pool's picks.

    A first-round game is known when the pool picked exactly two different
    entrants to win it. Games where everyone picked the same side are left out.
    """
    first_round = {}
    for game_id, dist in pick_distribution(pick_sets).items():
        if round_of(game_id) == 1 and len(dist) == 2:
            a, b = sorted(dist)
            first_round[game_id] = (a, b)
    return first_round


def game_entrants(game_id: int, results: Mapping[int, GameResult],
                  hypothetical: Mapping[int, str] | None = None,
                  first_round: FirstRound | None = None) -> tuple[str | None, str | None]:
    """Get the two entrants currently facing each other in a game.

    First-round entrants come from `first_round`, else from the game's own
    result. Later games take the winners (recorded, else hypothetical) of
    their feeder games. None marks a side that isn't decided yet.
    """
    hypothetical = hypothetical or {}
    if round_of(game_id) == 1:
        if first_round and game_id in first_round:
            a, b = first_round[game_id]
            return a, b
        result = results.get(game_id)
        if result is not None and result.loser:
            return result.winner, result.loser
        return None, None

    sides = []
    for feeder in feeders_of(game_id):
        if feeder in results:
            sides.append(results[feeder].winner)
        else:
            sides.append(hypothetical.get(feeder))
    return sides[0], sides[1]


def open_matchups(results: Mapping[int, GameResult],
                  hypothetical: Mapping[int, str] | None = None,
                  first_round: FirstRound | None = None) -> dict[int, tuple[str, str]]:
    """Unplayed games whose two entrants are both known."""
    matchups = {}
    for game_id in all_game_ids():
        if game_id in results:
            continue
        a, b = game_entrants(game_id, results, hypothetical, first_round)
        if a is not None and b is not None:
            matchups[game_id] = (a, b)
    return matchups


def can_win(game_id: int, entrant: str, results: Mapping[int, GameResult],
            hypothetical: Mapping[int, str] | None = None,
            first_round: FirstRound | None = None) -> bool:
    """Whether `entrant` can still be the winner of a game.

    A decided game (recorded or hypothetical) only allows its winner. An
    undecided game allows anyone who can win one of its feeder games. A
    first-round game with unknown entrants allows anyone.
    """
    hypothetical = hypothetical or {}
    if game_id in results:
        return results[game_id].winner == entrant
    if game_id in hypothetical:
        return hypothetical[game_id] == entrant
    if round_of(game_id) == 1:
        entrants = game_entrants(game_id, results, hypothetical, first_round)
        return None in entrants or entrant in entrants
    return any(can_win(f, entrant, results, hypothetical, first_round) for f in feeders_of(game_id))


def update_prediction(hypothetical: Mapping[int, str], game_id: int, winner: str | None,
                      results: Mapping[int, GameResult],
                      first_round: FirstRound | None = None) -> dict[int, str]:
    """Set (or clear, with winner=None) a hypothetical winner.

    Predictions for later games whose winner can no longer reach that game
    are dropped.
    """
    if game_id in results:
        raise ValueError(f"Game {game_id} already has a result ({results[game_id].winner})")

    updated = dict(hypothetical)
    if winner:
        updated[game_id] = winner
    else:
        updated.pop(game_id, None)

    # Nearest round first, so pruning cascades toward the championship
    for dependent in dependents_of(game_id):
        predicted = updated.get(dependent)
        if predicted is None:
            continue
        if not any(can_win(f, predicted, results, updated, first_round) for f in feeders_of(dependent)):
            del updated[dependent]
    return updated


def simulate_outcomes(probabilities: GameProbabilities, results: Mapping[int, GameResult],
                      first_round: FirstRound | None = None,
                      seed: int | None = None) -> dict[int, str]:
    """Sample one consistent set of winners for every unplayed game.

    Games are resolved round by round so later matchups use the sampled
    winners. Games without a probability assignment are treated as 50/50;
    games whose entrants can't be determined are skipped.

    Returns:
        {game_id: sampled winner}, usable as a hypothetical winner set
    """
    validate_probabilities(probabilities)
    rng = np.random.default_rng(seed)
    sampled: dict[int, str] = {}

    for game_id in all_game_ids():
        if game_id in results:
            continue
        team_a, team_b = game_entrants(game_id, results, sampled, first_round)
        if team_a is None or team_b is None:
            continue
        probs = probabilities.get(game_id, {})
        p_a_wins = probs[team_a] if team_a in probs and team_b in probs else 0.5
        sampled[game_id] = team_a if rng.random() < p_a_wins else team_b

    return sampled


def equal_probabilities(matchups: Mapping[int, tuple[str, str]]) -> dict[int, dict[str, float]]:
    """50/50 for every matchup."""
    return {game_id: {a: 0.5, b: 0.5} for game_id, (a, b) in matchups.items()}


def pick_share_probabilities(matchups: Mapping[int, tuple[str, str]],
                             pick_sets: Iterable[PickSet]) -> dict[int, dict[str, float]]:
    """Win probability equal to each entrant's share of the pool's picks in that game.

    A matchup where the pool picked neither entrant falls back to 50/50.
    """
    distribution = pick_distribution(pick_sets)
    probabilities = {}
    for game_id, (a, b) in matchups.items():
        dist = distribution.get(game_id, {})
        count_a, count_b = dist.get(a, 0), dist.get(b, 0)
        if count_a + count_b == 0:
            probabilities[game_id] = {a: 0.5, b: 0.5}
            continue
        p_a = count_a / (count_a + count_b)
        probabilities[game_id] = {a: p_a, b: 1.0 - p_a}
    return probabilities


def popular_winners(pick_sets: Iterable[PickSet], results: Mapping[int, GameResult]) -> dict[int, str]:
    """The pool's most-picked entrant for every unplayed game."""
    winners = {}
    for game_id, dist in pick_distribution(pick_sets).items():
        if game_id in results:
            continue
        entrant, _ = most_popular(dist)
        if entrant is not None:
            winners[game_id] = entrant
    return winners


def ranking_games(pick_sets: Iterable[PickSet], results: Mapping[int, GameResult],
                  probabilities: GameProbabilities,
                  limit: int = config.MAX_ENUMERATED_GAMES) -> list[int]:
    """Pick which unplayed games to enumerate when there are too many.

    Games are ranked by points at stake times the number of participants
    backing either entrant, highest first (ties by game id). A game every
    participant picked the same way can't change the order and ranks last.
    Returns at most `limit` game ids, in ascending order.
    """
    pick_sets = list(pick_sets)
    distribution = pick_distribution(pick_sets)
    impact = []
    for game_id, probs in probabilities.items():
        if game_id in results:
            continue
        dist = distribution.get(game_id, {})
        backers = sum(dist.get(entrant, 0) for entrant in probs)
        unanimous = any(dist.get(entrant, 0) == len(pick_sets) for entrant in probs)
        weight = 0 if unanimous else config.ROUND_POINTS[round_of(game_id)] * backers
        impact.append((-weight, game_id))
    return sorted(game_id for _, game_id in sorted(impact)[:limit])
