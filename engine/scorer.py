"""Bracket scoring.

Scores a participant's picks against completed results and, optionally,
a set of hypothetical winners for games that haven't been played yet.
"""

from __future__ import annotations

from typing import Iterable, Mapping

import config
from models.bracket import points_for, round_of
from models.pool import GameResult, PickSet, eliminated_entrants
from models.records import ScoreRecord


def score(pick_set: PickSet, results: Mapping[int, GameResult],
          hypothetical: Mapping[int, str] | None = None) -> ScoreRecord:
    """Score one participant.

    Args:
        pick_set: The participant's picks
        results: {game_id: GameResult} for completed games
        hypothetical: Optional {game_id: assumed winner} for unplayed games.
            A recorded result always wins over a hypothetical for the same game.

    Returns:
        ScoreRecord with actual, projected and maximum-possible scores
    """
    hypothetical = hypothetical or {}
    eliminated = eliminated_entrants(results)
    record = ScoreRecord(
        participant=pick_set.participant,
        total_picks=len(pick_set.picks),
        champion=pick_set.champion,
    )

    for game_id in sorted(pick_set.picks):
        pick = pick_set.picks[game_id]
        if not pick:
            continue
        points = points_for(game_id)
        round_key = config.ROUND_NAMES[round_of(game_id)]

        result = results.get(game_id)
        if result is not None:
            record.graded_picks += 1
            if result.winner == pick:
                record.correct_picks += 1
                record.actual_score += points
                record.projected_score += points
                record.round_scores[round_key] += points
                record.projected_round_scores[round_key] += points
            continue

        if pick in eliminated:
            # Picked entrant is already out: no points now or later
            continue

        record.max_possible_score += points
        if hypothetical.get(game_id) == pick:
            record.projected_score += points
            record.projected_round_scores[round_key] += points

    record.max_possible_score += record.actual_score
    return record


def score_all(pick_sets: Iterable[PickSet], results: Mapping[int, GameResult],
              hypothetical: Mapping[int, str] | None = None) -> list[ScoreRecord]:
    """Score every participant in the order given."""
    return [score(ps, results, hypothetical) for ps in pick_sets]


def actual_totals(pick_sets: Iterable[PickSet], results: Mapping[int, GameResult]) -> dict[str, int]:
    """{participant: points from completed games}."""
    totals = {}
    for ps in pick_sets:
        total = 0
        for game_id, pick in ps.picks.items():
            result = results.get(game_id)
            if result is not None and result.winner == pick:
                total += points_for(game_id)
        totals[ps.participant] = total
    return totals
