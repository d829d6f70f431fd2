"""Per-game win probability assignments."""

from __future__ import annotations

import math
from typing import Mapping

import config
from models.bracket import round_of

# {game_id: {entrant: probability}}
GameProbabilities = Mapping[int, Mapping[str, float]]


def validate_assignment(game_id: int, probs: Mapping[str, float]) -> None:
    """Check a single game's probability assignment.

    Raises:
        ValueError: unless there are exactly two entrants with probabilities
            in [0, 1] that sum to 1 (within PROBABILITY_TOLERANCE)
    """
    round_of(game_id)
    if len(probs) != 2:
        raise ValueError(
            f"Game {game_id}: expected probabilities for exactly 2 entrants, got {len(probs)}"
        )
    for entrant, p in probs.items():
        if not isinstance(p, (int, float)) or math.isnan(p) or p < 0 or p > 1:
            raise ValueError(f"Game {game_id}: probability for {entrant} must be in [0, 1], got {p!r}")
    total = sum(probs.values())
    if abs(total - 1.0) > config.PROBABILITY_TOLERANCE:
        raise ValueError(f"Game {game_id}: probabilities sum to {total:.6f}, expected 1.0")


def validate_probabilities(probabilities: GameProbabilities) -> None:
    for game_id, probs in probabilities.items():
        validate_assignment(game_id, probs)
