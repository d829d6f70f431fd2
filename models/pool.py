"""Pool data model: participants' picks and recorded game results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping

import config
from models.bracket import round_of


@dataclass(frozen=True)
class PickSet:
    """One participant's picks: {game_id: entrant picked to win}."""
    participant: str
    picks: Mapping[int, str] = field(default_factory=dict)

    def __post_init__(self):
        for game_id in self.picks:
            round_of(game_id)
        # Private copy so later edits to the caller's dict don't leak in
        object.__setattr__(self, "picks", dict(self.picks))

    @property
    def champion(self) -> str | None:
        return self.picks.get(config.CHAMPIONSHIP_GAME)

    def __str__(self):
        return f"{self.participant} ({len(self.picks)} picks)"


@dataclass(frozen=True)
class GameResult:
    """A completed game. Results are append-only and never edited."""
    game_id: int
    winner: str
    loser: str | None = None
    order: int = 0  # chronological order the game finished in
    winner_seed: int | None = None
    loser_seed: int | None = None

    def __post_init__(self):
        round_of(self.game_id)
        if not self.winner:
            raise ValueError(f"Result for game {self.game_id} has no winner")
        if self.loser is not None and self.loser == self.winner:
            raise ValueError(f"Result for game {self.game_id} has the same winner and loser: {self.winner}")


def results_by_game(results: Iterable[GameResult]) -> dict[int, GameResult]:
    """Index results by game id, rejecting a game recorded twice."""
    indexed: dict[int, GameResult] = {}
    for result in results:
        if result.game_id in indexed:
            raise ValueError(f"Game {result.game_id} has more than one recorded result")
        indexed[result.game_id] = result
    return indexed


def eliminated_entrants(results: Mapping[int, GameResult]) -> set[str]:
    """Entrants recorded as the loser of any completed game."""
    return {r.loser for r in results.values() if r.loser}


def seeds_from_results(results: Mapping[int, GameResult]) -> dict[str, int]:
    """Collect every seed the result feed reports, keyed by entrant."""
    seeds = {}
    for r in results.values():
        if r.winner_seed is not None:
            seeds[r.winner] = r.winner_seed
        if r.loser is not None and r.loser_seed is not None:
            seeds[r.loser] = r.loser_seed
    return seeds


def chronological(results: Mapping[int, GameResult]) -> list[GameResult]:
    """Results in the order the games finished (game id breaks ties)."""
    return sorted(results.values(), key=lambda r: (r.order, r.game_id))


def roster(pick_sets: Iterable[PickSet]) -> dict[str, PickSet]:
    """Index pick sets by participant, rejecting duplicate participants."""
    by_name: dict[str, PickSet] = {}
    for ps in pick_sets:
        if ps.participant in by_name:
            raise ValueError(f"Duplicate participant: {ps.participant}")
        by_name[ps.participant] = ps
    return by_name
