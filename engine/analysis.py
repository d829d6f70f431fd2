"""Pool-wide pick analysis: distributions, round accuracy, team confidence, trends."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Mapping

import config
from engine.projection import project
from models.bracket import round_of
from models.pool import GameResult, PickSet, chronological


def pick_distribution(pick_sets: Iterable[PickSet]) -> dict[int, dict[str, int]]:
    """{game_id: {entrant: number of participants who picked it}}."""
    counts: dict[int, Counter] = {}
    for ps in pick_sets:
        for game_id, pick in ps.picks.items():
            if pick:
                counts.setdefault(game_id, Counter())[pick] += 1
    return {game_id: dict(c) for game_id, c in sorted(counts.items())}


def most_popular(distribution: Mapping[str, int]) -> tuple[str | None, int]:
    """The most-picked entrant and its pick count. Ties go to the first name alphabetically."""
    if not distribution:
        return None, 0
    entrant, count = min(distribution.items(), key=lambda item: (-item[1], item[0]))
    return entrant, count


def round_accuracy(pick_sets: Iterable[PickSet], results: Mapping[int, GameResult]) -> dict[str, dict]:
    """How often the pool picked completed games correctly, by round.

    Returns:
        {round_name: {"correct": int, "total": int, "accuracy": percent}}
    """
    accuracy = {name: {"correct": 0, "total": 0, "accuracy": 0.0} for name in config.ROUND_NAMES.values()}

    for ps in pick_sets:
        for game_id, pick in ps.picks.items():
            result = results.get(game_id)
            if result is None or not pick:
                continue
            bucket = accuracy[config.ROUND_NAMES[round_of(game_id)]]
            bucket["total"] += 1
            if pick == result.winner:
                bucket["correct"] += 1

    for bucket in accuracy.values():
        if bucket["total"] > 0:
            bucket["accuracy"] = bucket["correct"] / bucket["total"] * 100
    return accuracy


def team_confidence(pick_sets: Iterable[PickSet]) -> list[dict]:
    """Percent of participants picking each entrant to win a game in each round.

    Returns:
        [{"team": name, "ROUND_64": pct, ..., "CHAMPIONSHIP": pct}], sorted by
        championship share then by name
    """
    pick_sets = list(pick_sets)
    if not pick_sets:
        return []

    n = len(pick_sets)
    rows: dict[str, dict] = {}
    for game_id, dist in pick_distribution(pick_sets).items():
        round_key = config.ROUND_NAMES[round_of(game_id)]
        for team, count in dist.items():
            row = rows.setdefault(team, {"team": team, **{name: 0.0 for name in config.ROUND_NAMES.values()}})
            row[round_key] += count / n * 100

    return sorted(rows.values(), key=lambda r: (-r["CHAMPIONSHIP"], r["team"]))


def leaderboard_trend(pick_sets: Iterable[PickSet], results: Mapping[int, GameResult],
                      top: int = config.TREND_TOP_N) -> list[dict]:
    """Standings after each completed game, in the order games finished.

    Returns:
        [{"game_id": id, "order": order, "scores": [ScoreRecord, ...top]}]
    """
    pick_sets = list(pick_sets)
    trend = []
    so_far: dict[int, GameResult] = {}
    for result in chronological(results):
        so_far[result.game_id] = result
        standings = project(pick_sets, so_far)
        trend.append({
            "game_id": result.game_id,
            "order": result.order,
            "scores": standings[:top],
        })
    return trend
