"""Pretty-print standings, projections and pool analysis."""

from tabulate import tabulate

import config
from models.bracket import region_of
from models.records import ClusterAssignment, ProbabilityScore, ScoreRecord, SimilarityResult


def print_standings(records: list[ScoreRecord], title: str = "STANDINGS",
                    limit: int | None = None):
    """Print a leaderboard of ScoreRecords in the order given."""
    print("\n" + "=" * 60)
    print(f"           {title}")
    print("=" * 60 + "\n")

    rows = []
    for rank, r in enumerate(records[:limit] if limit else records, 1):
        rows.append([
            rank, r.participant, r.actual_score, r.projected_score,
            r.max_possible_score, f"{r.correct_picks}/{r.graded_picks}", r.champion or "-",
        ])

    headers = ["#", "Participant", "Score", "Projected", "Max", "Correct", "Champion"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))


def print_round_breakdown(records: list[ScoreRecord], limit: int | None = None):
    """Print each participant's actual points by round."""
    rounds = list(config.ROUND_NAMES.values())
    rows = [[r.participant] + [r.round_scores[name] for name in rounds] + [r.actual_score]
            for r in (records[:limit] if limit else records)]
    print()
    print(tabulate(rows, headers=["Participant"] + rounds + ["Total"], tablefmt="simple"))


def print_projection(scores: list[ProbabilityScore], limit: int | None = None):
    """Print expected scores and win probabilities."""
    print("\n=== WIN PROBABILITIES ===\n")

    rows = []
    for s in scores[:limit] if limit else scores:
        rows.append([
            s.participant, s.base_score, f"{s.expected_score:.1f}",
            f"{s.win_probability:.1f}%", f"{s.win_count}/{s.outcomes}", s.champion or "-",
        ])

    headers = ["Participant", "Score", "Expected*", "Win %", "Outcomes won", "Champion"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    print("\n  * expected score treats each remaining game as independent")


def print_similarity(selected: str, results: list[SimilarityResult],
                     limit: int = config.DEFAULT_TOP_N):
    """Print the participants most similar to `selected`."""
    print(f"\n=== MOST SIMILAR TO {selected} ===\n")

    if not results:
        print("  No other participants to compare.")
        return

    rows = [[r.participant, f"{r.jaccard:.1%}", f"{r.weighted_jaccard:.1%}", r.shared_points, r.score]
            for r in results[:limit]]
    headers = ["Participant", "Regular", "Weighted", "Shared pts", "Score"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))


def print_clusters(clusters: list[ClusterAssignment], max_members: int = 8):
    """Print cluster membership and average strategy features."""
    print("\n=== STRATEGY CLUSTERS ===\n")

    if not clusters:
        print("  No clusters.")
        return

    rows = []
    for c in clusters:
        members = ", ".join(c.members[:max_members])
        if c.size > max_members:
            members += f" (+{c.size - max_members} more)"
        label = f"{c.cluster_id}: {c.champion}" if c.champion else str(c.cluster_id)
        rows.append([
            label, c.size, f"{c.avg_chalk_score:.1f}", f"{c.avg_herding_score:.1f}",
            f"{c.avg_deviation_score:.2f}", c.description, members,
        ])

    headers = ["Cluster", "Size", "Chalk %", "Herding %", "Deviation", "Strategy", "Members"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))


def print_round_accuracy(accuracy: dict[str, dict]):
    rows = [[name, a["correct"], a["total"], f"{a['accuracy']:.1f}%"]
            for name, a in accuracy.items() if a["total"]]
    print("\n=== POOL ACCURACY BY ROUND ===\n")
    print(tabulate(rows, headers=["Round", "Correct", "Total", "Accuracy"], tablefmt="simple"))


def print_trend(trend: list[dict], top: int = 3):
    """Print the leaders after each completed game."""
    print("\n=== LEADERBOARD TREND ===\n")
    rows = []
    for point in trend:
        leaders = ", ".join(f"{r.participant} ({r.actual_score})" for r in point["scores"][:top])
        region = region_of(point["game_id"]) or "Final Four"
        rows.append([point["order"], point["game_id"], region, leaders])
    print(tabulate(rows, headers=["Order", "Game", "Region", "Leaders"], tablefmt="simple"))


def print_team_confidence(rows: list[dict], limit: int = config.DEFAULT_TOP_N):
    """Print the share of the pool advancing each entrant through each round."""
    print("\n=== TEAM CONFIDENCE (% of pool) ===\n")
    rounds = list(config.ROUND_NAMES.values())
    table = [[r["team"]] + [f"{r[name]:.0f}" for name in rounds] for r in rows[:limit]]
    print(tabulate(table, headers=["Team"] + rounds, tablefmt="simple"))
