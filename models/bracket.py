"""Bracket structure.

The bracket is 63 games numbered 1-63, laid out round by round:
- Games 1-32:  Round of 64
- Games 33-48: Round of 32
- Games 49-56: Sweet 16
- Games 57-60: Elite Eight
- Games 61-62: Final Four
- Game 63:     Championship

Each game after the first round is fed by two consecutive games of the
previous round: game 33 is fed by games 1 and 2, game 49 by games 33 and 34,
and so on up to game 63, fed by the two semifinals (61, 62).

Regions occupy contiguous blocks of each round, in this order:
South (games 1-8), West (9-16), East (17-24), Midwest (25-32).

All lookups below are backed by tables built once at import time.
"""

from __future__ import annotations

from dataclasses import dataclass

import config

REGION_NAMES = ["South", "West", "East", "Midwest"]

# First game id of each round (round 7 is a sentinel)
ROUND_STARTS = {1: 1, 2: 33, 3: 49, 4: 57, 5: 61, 6: 63, 7: 64}


def _build_round_table() -> dict[int, int]:
    table = {}
    for round_num in range(1, config.NUM_ROUNDS + 1):
        for game_id in range(ROUND_STARTS[round_num], ROUND_STARTS[round_num + 1]):
            table[game_id] = round_num
    return table


def _build_feeder_table(rounds: dict[int, int]) -> dict[int, tuple[int, ...]]:
    table: dict[int, tuple[int, ...]] = {}
    for game_id, round_num in rounds.items():
        if round_num == 1:
            table[game_id] = ()
            continue
        offset = game_id - ROUND_STARTS[round_num]
        first = ROUND_STARTS[round_num - 1] + 2 * offset
        table[game_id] = (first, first + 1)
    return table


def _build_next_game_table(feeders: dict[int, tuple[int, ...]]) -> dict[int, int]:
    table = {}
    for game_id, pair in feeders.items():
        for feeder in pair:
            table[feeder] = game_id
    return table


_ROUND_OF = _build_round_table()
_FEEDERS = _build_feeder_table(_ROUND_OF)
_NEXT_GAME = _build_next_game_table(_FEEDERS)


@dataclass(frozen=True)
class Game:
    game_id: int
    round: int
    points: int
    feeders: tuple[int, ...] = ()
    # Only known up front for first-round games
    entrants: tuple[str, str] | None = None

    @property
    def round_name(self) -> str:
        return config.ROUND_NAMES[self.round]

    def __str__(self):
        return f"Game {self.game_id} ({self.round_name})"


def _check_game_id(game_id) -> int:
    if isinstance(game_id, bool) or not isinstance(game_id, int):
        raise ValueError(f"Invalid game id: {game_id!r}")
    if game_id not in _ROUND_OF:
        raise ValueError(f"Invalid game id: {game_id} (expected 1-{config.NUM_GAMES})")
    return game_id


def round_of(game_id: int) -> int:
    """Get the round number (1-6) for a game id."""
    return _ROUND_OF[_check_game_id(game_id)]


def round_name(round_num: int) -> str:
    """Get the round tag (e.g. "SWEET_16") for a round number."""
    if round_num not in config.ROUND_NAMES:
        raise ValueError(f"Invalid round: {round_num!r}")
    return config.ROUND_NAMES[round_num]


def points_for(game_id: int) -> int:
    """Points awarded for correctly picking the winner of a game."""
    return config.ROUND_POINTS[round_of(game_id)]


def feeders_of(game_id: int) -> tuple[int, ...]:
    """Get the two games feeding into this one, or () for a first-round game."""
    return _FEEDERS[_check_game_id(game_id)]


def next_game(game_id: int) -> int | None:
    """Get the game the winner of this game advances to. None for the championship."""
    return _NEXT_GAME.get(_check_game_id(game_id))


def dependents_of(game_id: int) -> list[int]:
    """Get every later game whose entrants depend on this game's outcome.

    Returns:
        Game ids from the nearest round to the championship, e.g. [33, 49, 57, 61, 63] for game 1
    """
    path = []
    nxt = next_game(game_id)
    while nxt is not None:
        path.append(nxt)
        nxt = _NEXT_GAME.get(nxt)
    return path


def games_in_round(round_num: int) -> list[int]:
    """Get all game ids for a given round."""
    if round_num not in config.ROUND_POINTS:
        raise ValueError(f"Invalid round: {round_num!r}")
    return list(range(ROUND_STARTS[round_num], ROUND_STARTS[round_num + 1]))


def all_game_ids() -> list[int]:
    return list(range(1, config.NUM_GAMES + 1))


def region_of(game_id: int) -> str | None:
    """Get the region a game is played in. None for Final Four / Championship."""
    round_num = round_of(game_id)
    if round_num >= 5:
        return None
    per_region = config.GAMES_PER_ROUND[round_num] // len(REGION_NAMES)
    return REGION_NAMES[(game_id - ROUND_STARTS[round_num]) // per_region]


def build_games(first_round: dict[int, tuple[str, str]] | None = None) -> list[Game]:
    """Build the 63 Game records.

    Args:
        first_round: Optional {game_id: (entrant_a, entrant_b)} for round 1 games
    """
    first_round = first_round or {}
    for game_id in first_round:
        if round_of(game_id) != 1:
            raise ValueError(f"Entrants can only be given for first-round games, got game {game_id}")

    games = []
    for game_id in all_game_ids():
        entrants = first_round.get(game_id)
        games.append(Game(
            game_id=game_id,
            round=_ROUND_OF[game_id],
            points=points_for(game_id),
            feeders=_FEEDERS[game_id],
            entrants=tuple(entrants) if entrants else None,
        ))
    return games
