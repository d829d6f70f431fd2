"""Standings projection.

Two modes share the scorer:

1. Deterministic: merge recorded results with a set of hypothetical winners
   and rank every participant by projected score.
2. Probabilistic: given a win probability for each remaining game, compute
   each participant's expected score (a cheap linear approximation) and
   their chance of finishing first (exact, by enumerating every combination
   of remaining winners).

Enumeration grows as 2^k in the number of remaining games, so it is capped
at MAX_ENUMERATED_GAMES. Past the cap the caller has to pick a subset of
games to enumerate; nothing is silently truncated.
"""

from __future__ import annotations

import math
from itertools import product
from typing import Iterable, Iterator, Mapping

import numpy as np
from tqdm import tqdm

import config
from engine.scorer import actual_totals, score_all
from models.bracket import feeders_of, points_for
from models.pool import GameResult, PickSet, eliminated_entrants, roster
from models.probability import GameProbabilities, validate_probabilities
from models.records import ProbabilityScore, ScoreRecord

MAX_ENUMERATED_GAMES = config.MAX_ENUMERATED_GAMES


class EnumerationCapacityError(ValueError):
    """Raised when asked to enumerate more games than MAX_ENUMERATED_GAMES."""


def project(pick_sets: Iterable[PickSet], results: Mapping[int, GameResult],
            hypothetical: Mapping[int, str] | None = None) -> list[ScoreRecord]:
    """Score every participant with the same hypothetical winners.

    Returns:
        ScoreRecords sorted by projected score (highest first), ties broken
        by participant id ascending
    """
    records = score_all(pick_sets, results, hypothetical)
    records.sort(key=lambda r: (-r.projected_score, r.participant))
    return records


def expected_score(pick_set: PickSet, results: Mapping[int, GameResult],
                   probabilities: GameProbabilities) -> float:
    """Actual score plus P(pick wins) * points for every unplayed game.

    Each remaining game is treated as an independent coin flip. This ignores
    that later-round entrants depend on earlier outcomes, so it is an
    approximation, not the mean of the enumerated outcomes.
    """
    total = float(actual_totals([pick_set], results)[pick_set.participant])
    for game_id, pick in pick_set.picks.items():
        if game_id in results:
            continue
        probs = probabilities.get(game_id)
        if probs:
            total += probs.get(pick, 0.0) * points_for(game_id)
    return total


def remaining_games(results: Mapping[int, GameResult], probabilities: GameProbabilities) -> list[int]:
    """Unplayed games that have a probability assignment."""
    return sorted(g for g in probabilities if g not in results)


def undetermined_games(pick_sets: Iterable[PickSet], results: Mapping[int, GameResult]) -> list[int]:
    """Unplayed games that at least one participant picked."""
    return sorted({g for ps in pick_sets for g, pick in ps.picks.items() if pick and g not in results})


def with_hypothetical(results: Mapping[int, GameResult],
                      hypothetical: Mapping[int, str] | None = None) -> dict[int, GameResult]:
    """Recorded results plus hypothetical winners treated as fixed outcomes.

    Recorded results win over a hypothetical for the same game, and a
    hypothetical winner already knocked out in a recorded game is ignored.
    """
    fixed = dict(results)
    eliminated = eliminated_entrants(results)
    for game_id, winner in (hypothetical or {}).items():
        if game_id in fixed or not winner or winner in eliminated:
            continue
        fixed[game_id] = GameResult(game_id=game_id, winner=winner)
    return fixed


def enumerate_outcomes(probabilities: GameProbabilities, game_ids: Iterable[int],
                       results: Mapping[int, GameResult] | None = None
                       ) -> Iterator[tuple[dict[int, str], float]]:
    """Yield every consistent combination of winners for the given games.

    Args:
        probabilities: {game_id: {entrant: p}} covering every game in game_ids
        game_ids: Games to enumerate (at most MAX_ENUMERATED_GAMES)
        results: Recorded results, used to reject combinations that contradict them

    Yields:
        ({game_id: winner}, weight) where weight is the product of the chosen
        entrants' probabilities. Combinations where a game's winner didn't win
        a feeder game are skipped.
    """
    results = results or {}
    game_ids = sorted(set(game_ids))
    if len(game_ids) > MAX_ENUMERATED_GAMES:
        raise EnumerationCapacityError(
            f"Cannot enumerate {len(game_ids)} games (2^{len(game_ids)} outcomes); "
            f"the limit is {MAX_ENUMERATED_GAMES}. Select a subset of remaining games."
        )

    choices = []
    for game_id in game_ids:
        if game_id in results:
            raise ValueError(f"Game {game_id} already has a result and can't be enumerated")
        if game_id not in probabilities:
            raise ValueError(f"Game {game_id} has no probability assignment")
        choices.append(sorted(probabilities[game_id].items()))

    for combo in product(*choices):
        winners = {game_id: entrant for game_id, (entrant, _) in zip(game_ids, combo)}
        if not _is_consistent(winners, results):
            continue
        yield winners, math.prod(p for _, p in combo)


def _is_consistent(winners: Mapping[int, str], results: Mapping[int, GameResult]) -> bool:
    for game_id, winner in winners.items():
        feeder_winners = []
        for feeder in feeders_of(game_id):
            if feeder in results:
                feeder_winners.append(results[feeder].winner)
            elif feeder in winners:
                feeder_winners.append(winners[feeder])
        # With a feeder still open, the winner may come from that side
        if len(feeder_winners) == 2 and winner not in feeder_winners:
            return False
    return True


def project_probabilistic(pick_sets: Iterable[PickSet], results: Mapping[int, GameResult],
                          probabilities: GameProbabilities,
                          games: Iterable[int] | None = None,
                          show_progress: bool = False,
                          hypothetical: Mapping[int, str] | None = None) -> list[ProbabilityScore]:
    """Expected scores and probability of finishing first for every participant.

    Args:
        pick_sets: All participants' picks
        results: {game_id: GameResult} for completed games
        probabilities: {game_id: {entrant: p}} for unplayed games
        games: Optional subset of unplayed games to enumerate. Defaults to
            every unplayed game with a probability assignment, in which case
            every undecided game someone picked must have one.
        show_progress: Show a progress bar over the enumeration
        hypothetical: Optional {game_id: winner} held fixed. These games
            score like recorded results and are not enumerated.

    Returns:
        ProbabilityScores sorted by win probability, then expected score
        (both highest first), then participant id

    Raises:
        ValueError: an assignment doesn't cover exactly two entrants summing
            to 1, or (without `games`) a picked undecided game has no assignment
        EnumerationCapacityError: more than MAX_ENUMERATED_GAMES games to enumerate
    """
    validate_probabilities(probabilities)
    players = sorted(roster(pick_sets).values(), key=lambda ps: ps.participant)
    if not players:
        return []

    results = with_hypothetical(results, hypothetical)
    if games is None:
        unassigned = [g for g in undetermined_games(players, results) if g not in probabilities]
        if unassigned:
            raise ValueError(
                f"{len(unassigned)} undecided games have no probability assignment: {unassigned}. "
                f"Assign probabilities or pass `games` to choose which ones to enumerate."
            )
        game_ids = remaining_games(results, probabilities)
    else:
        game_ids = sorted(set(games))
    if len(game_ids) > MAX_ENUMERATED_GAMES:
        raise EnumerationCapacityError(
            f"{len(game_ids)} remaining games exceed the enumeration limit of "
            f"{MAX_ENUMERATED_GAMES}. Pass `games` to choose which ones to enumerate."
        )

    base = actual_totals(players, results)
    base_scores = np.array([base[ps.participant] for ps in players], dtype=np.int64)

    # gains[game_id][entrant] = points each participant earns if that entrant wins
    gains: dict[int, dict[str, np.ndarray]] = {}
    for game_id in game_ids:
        points = points_for(game_id)
        gains[game_id] = {
            entrant: np.array([points if ps.picks.get(game_id) == entrant else 0 for ps in players],
                              dtype=np.int64)
            for entrant in probabilities.get(game_id, {})
        }

    win_counts = np.zeros(len(players), dtype=np.int64)
    win_weights = np.zeros(len(players), dtype=np.float64)
    total_weight = 0.0
    n_outcomes = 0

    outcomes = enumerate_outcomes(probabilities, game_ids, results)
    if show_progress:
        outcomes = tqdm(outcomes, total=2 ** len(game_ids), desc="Enumerating outcomes")

    for winners, weight in outcomes:
        totals = base_scores.copy()
        for game_id, winner in winners.items():
            totals += gains[game_id][winner]
        # argmax takes the first maximum, i.e. the lowest participant id
        leader = int(np.argmax(totals))
        win_counts[leader] += 1
        win_weights[leader] += weight
        total_weight += weight
        n_outcomes += 1

    if total_weight <= 0:
        raise ValueError("Probability assignments leave no possible outcome for the enumerated games")

    scores = []
    for i, ps in enumerate(players):
        scores.append(ProbabilityScore(
            participant=ps.participant,
            base_score=base[ps.participant],
            expected_score=expected_score(ps, results, probabilities),
            win_probability=float(win_weights[i] / total_weight * 100),
            win_count=int(win_counts[i]),
            outcomes=n_outcomes,
            champion=ps.champion,
        ))

    scores.sort(key=lambda s: (-s.win_probability, -s.expected_score, s.participant))
    return scores
