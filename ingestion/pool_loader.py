"""Load pool picks, game results, what-if winners and probabilities from files.

Supported formats:
1. Pool JSON as exported by the pool site:
   {"games": {"1": {"picks": {"alice": "DUKE", ...}}, ...}}
2. Results CSV: Game ID, Winner, Loser, Order, Winner Seed, Loser Seed
   (only Game ID and Winner are required)
3. What-if CSV: Game ID, Winner
4. Probabilities JSON: {"61": {"DUKE": 0.6, "AUB": 0.4}, ...}
"""

import json

import pandas as pd

from models.bracket import round_of
from models.pool import GameResult, PickSet, results_by_game
from models.probability import validate_probabilities

RESULT_COLUMNS = {
    "game_id": "Game ID",
    "winner": "Winner",
    "loser": "Loser",
    "order": "Order",
    "winner_seed": "Winner Seed",
    "loser_seed": "Loser Seed",
}


def _game_id(value, source: str) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValueError(f"{source}: invalid game id {value!r}") from None


def _optional_int(value):
    if pd.isna(value) or str(value).strip() == "":
        return None
    return int(float(value))


def _optional_str(value):
    if pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


def load_pool_from_json(filepath: str) -> list[PickSet]:
    """Load every participant's picks from a pool JSON export.

    Returns:
        PickSets sorted by participant id
    """
    with open(filepath, "r", encoding="utf-8") as f:
        data = json.load(f)

    if "games" not in data:
        raise ValueError(f"{filepath}: missing 'games'")

    picks: dict[str, dict[int, str]] = {}
    for game_key, game in data["games"].items():
        game_id = _game_id(game_key, filepath)
        for username, team in (game.get("picks") or {}).items():
            picks.setdefault(username, {})
            if team:
                picks[username][game_id] = str(team)

    pick_sets = [PickSet(participant=name, picks=p) for name, p in sorted(picks.items())]
    print(f"Loaded picks for {len(pick_sets)} participants from {filepath}")
    return pick_sets


def load_results_from_csv(filepath: str) -> dict[int, GameResult]:
    """Load completed game results.

    Returns:
        {game_id: GameResult}
    """
    df = pd.read_csv(filepath, dtype=str, skipinitialspace=True)
    df.columns = [c.strip() for c in df.columns]
    for key in ("game_id", "winner"):
        if RESULT_COLUMNS[key] not in df.columns:
            raise ValueError(f"{filepath}: missing column '{RESULT_COLUMNS[key]}'")

    def column(row, key):
        name = RESULT_COLUMNS[key]
        return row[name] if name in df.columns else None

    results = []
    for i, row in df.iterrows():
        winner = _optional_str(column(row, "winner"))
        if winner is None:
            raise ValueError(f"{filepath}: row {i + 2} has no winner")
        order = _optional_int(column(row, "order"))
        results.append(GameResult(
            game_id=_game_id(column(row, "game_id"), filepath),
            winner=winner,
            loser=_optional_str(column(row, "loser")),
            order=order if order is not None else i,
            winner_seed=_optional_int(column(row, "winner_seed")),
            loser_seed=_optional_int(column(row, "loser_seed")),
        ))

    indexed = results_by_game(results)
    print(f"Loaded {len(indexed)} game results from {filepath}")
    return indexed


def load_hypothetical_from_csv(filepath: str) -> dict[int, str]:
    """Load what-if winners: {game_id: winner}."""
    df = pd.read_csv(filepath, dtype=str, skipinitialspace=True)
    df.columns = [c.strip() for c in df.columns]
    for name in ("Game ID", "Winner"):
        if name not in df.columns:
            raise ValueError(f"{filepath}: missing column '{name}'")

    winners = {}
    for _, row in df.iterrows():
        winner = _optional_str(row["Winner"])
        if winner:
            game_id = _game_id(row["Game ID"], filepath)
            round_of(game_id)
            winners[game_id] = winner

    print(f"Loaded {len(winners)} what-if winners from {filepath}")
    return winners


def load_probabilities_from_json(filepath: str) -> dict[int, dict[str, float]]:
    """Load and validate per-game win probabilities."""
    with open(filepath, "r", encoding="utf-8") as f:
        data = json.load(f)

    probabilities = {
        _game_id(game_key, filepath): {str(team): float(p) for team, p in probs.items()}
        for game_key, probs in data.items()
    }
    validate_probabilities(probabilities)
    print(f"Loaded win probabilities for {len(probabilities)} games from {filepath}")
    return probabilities
