"""Pick-overlap similarity between participants.

Each pick is a (game, entrant) pair. Plain Jaccard counts every pair the
same; the weighted variant gives each pair its round's point value, so
agreeing on a champion counts far more than agreeing on a first-round game.
"""

from __future__ import annotations

from typing import Iterable, Mapping

import config
from models.bracket import round_of
from models.pool import PickSet
from models.records import SimilarityResult


def _weighted_pairs(pick_set: PickSet, round_weights: Mapping[int, int]) -> dict[tuple[int, str], int]:
    return {
        (game_id, pick): round_weights[round_of(game_id)]
        for game_id, pick in pick_set.picks.items()
        if pick
    }


def similarity(pick_set_a: PickSet, pick_set_b: PickSet,
               round_weights: Mapping[int, int] = config.ROUND_POINTS) -> SimilarityResult:
    """Compare two participants' picks.

    Returns:
        SimilarityResult for pick_set_b with jaccard, weighted_jaccard and
        shared_points (sum of round weights over identical picks)
    """
    a = _weighted_pairs(pick_set_a, round_weights)
    b = _weighted_pairs(pick_set_b, round_weights)

    keys = set(a) | set(b)
    if not keys:
        # Two empty pick sets are identical
        return SimilarityResult(pick_set_b.participant, 1.0, 1.0, 0)

    shared = set(a) & set(b)
    jaccard = len(shared) / len(keys)

    weighted_intersection = 0
    weighted_union = 0
    shared_points = 0
    for key in keys:
        wa = a.get(key, 0)
        wb = b.get(key, 0)
        if wa > 0 and wb > 0:
            weighted_intersection += min(wa, wb)
            shared_points += wa
        weighted_union += max(wa, wb)

    weighted = weighted_intersection / weighted_union if weighted_union > 0 else 0.0
    return SimilarityResult(
        participant=pick_set_b.participant,
        jaccard=jaccard,
        weighted_jaccard=weighted,
        shared_points=shared_points,
    )


def rank_similar(selected: str, pick_sets: Iterable[PickSet],
                 scores: Mapping[str, int] | None = None,
                 round_weights: Mapping[int, int] = config.ROUND_POINTS) -> list[SimilarityResult]:
    """Compare one participant against everyone else in the pool.

    Args:
        selected: Participant id to compare from
        pick_sets: The whole pool
        scores: Optional {participant: current score} to attach to each row

    Returns:
        SimilarityResults sorted by weighted similarity (highest first),
        ties broken by participant id. Empty if `selected` isn't in the pool.
    """
    pick_sets = list(pick_sets)
    me = next((ps for ps in pick_sets if ps.participant == selected), None)
    if me is None:
        return []

    scores = scores or {}
    ranked = []
    for other in pick_sets:
        if other.participant == selected:
            continue
        result = similarity(me, other, round_weights)
        result.score = scores.get(other.participant, 0)
        ranked.append(result)

    ranked.sort(key=lambda r: (-r.weighted_jaccard, r.participant))
    return ranked
