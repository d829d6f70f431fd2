"""Bracket pool standings - CLI entry point.

Usage:
    python cli.py load-pool --file pool.json
    python cli.py load-results --file results.csv
    python cli.py standings [--top 25] [--by-round]
    python cli.py what-if [--file whatif.csv | --popular | --sample | --clear]
    python cli.py simulate [--probabilities probs.json | --preset equal|picks] [--games 61,62,63]
    python cli.py similar --user alice [--top 15]
    python cli.py clusters [--mode champion|kmeans] [--count 3]
    python cli.py analyze
    python cli.py reset
"""

import argparse
import os
import pickle
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import config

DATA_DIR = os.path.join(os.path.dirname(__file__), "data")
STATE_FILE = os.path.join(DATA_DIR, "state.pkl")


def save_state(state: dict):
    """Save loaded inputs and the current what-if session to disk."""
    os.makedirs(DATA_DIR, exist_ok=True)
    with open(STATE_FILE, "wb") as f:
        pickle.dump(state, f)


def load_state() -> dict:
    """Load saved state from disk."""
    if os.path.exists(STATE_FILE):
        with open(STATE_FILE, "rb") as f:
            return pickle.load(f)
    return {}


def _require_pool(state: dict):
    pool = state.get("pool")
    if not pool:
        print("ERROR: No pool loaded. Run 'python cli.py load-pool --file pool.json' first.")
    return pool


def _session(state: dict) -> str:
    if state.get("probabilities"):
        return "simulated"
    if state.get("hypothetical"):
        return "predicting"
    return "clean"


# --- Commands ---

def cmd_load_pool(args):
    """Load every participant's picks."""
    from ingestion.pool_loader import load_pool_from_json

    state = load_state()
    state["pool"] = load_pool_from_json(args.file)
    save_state(state)


def cmd_load_results(args):
    """Load completed game results."""
    from ingestion.pool_loader import load_results_from_csv

    state = load_state()
    results = load_results_from_csv(args.file)

    previous = state.get("results", {})
    missing = sorted(set(previous) - set(results))
    if missing:
        print(f"WARNING: new results file drops {len(missing)} previously recorded games: {missing}")

    # Drop what-if winners that now have real results
    hypothetical = {g: w for g, w in state.get("hypothetical", {}).items() if g not in results}
    state["results"] = results
    state["hypothetical"] = hypothetical
    save_state(state)


def cmd_standings(args):
    """Show current (and projected) standings."""
    state = load_state()
    pool = _require_pool(state)
    if not pool:
        return

    from engine.projection import project
    from output.printer import print_round_breakdown, print_standings

    records = project(pool, state.get("results", {}), state.get("hypothetical", {}))
    title = "PROJECTED STANDINGS" if state.get("hypothetical") else "STANDINGS"
    print_standings(records, title=title, limit=args.top)
    print(f"\n  What-if session: {_session(state)}")
    if args.by_round:
        print_round_breakdown(records, limit=args.top)


def cmd_what_if(args):
    """Set hypothetical winners for unplayed games."""
    state = load_state()
    pool = _require_pool(state)
    if not pool:
        return
    results = state.get("results", {})

    if args.clear:
        state["hypothetical"] = {}
        print("Cleared what-if winners.")
    elif args.file:
        from ingestion.pool_loader import load_hypothetical_from_csv
        state["hypothetical"] = load_hypothetical_from_csv(args.file)
    elif args.popular:
        from engine.whatif import popular_winners
        state["hypothetical"] = popular_winners(pool, results)
        print(f"Set {len(state['hypothetical'])} games to the pool's most popular pick.")
    elif args.sample:
        from engine.whatif import first_round_from_picks, simulate_outcomes
        state["hypothetical"] = simulate_outcomes(
            state.get("probabilities", {}), results, first_round_from_picks(pool), seed=args.seed
        )
        print(f"Sampled winners for {len(state['hypothetical'])} games.")
    elif args.game:
        from engine.whatif import first_round_from_picks, update_prediction
        state["hypothetical"] = update_prediction(
            state.get("hypothetical", {}), args.game, args.winner, results, first_round_from_picks(pool)
        )
        print(f"Game {args.game}: {args.winner or 'cleared'}")
    else:
        print("Nothing to do: pass --file, --popular, --sample, --game or --clear.")
        return

    save_state(state)


def cmd_simulate(args):
    """Expected scores and win probabilities over the remaining games."""
    state = load_state()
    pool = _require_pool(state)
    if not pool:
        return
    results = state.get("results", {})
    hypothetical = state.get("hypothetical", {})

    from engine.projection import (
        MAX_ENUMERATED_GAMES, project_probabilistic, remaining_games, undetermined_games, with_hypothetical,
    )
    from engine.whatif import ranking_games

    # What-if winners stay fixed while the other games are enumerated
    fixed = with_hypothetical(results, hypothetical)

    if args.probabilities:
        from ingestion.pool_loader import load_probabilities_from_json
        probabilities = load_probabilities_from_json(args.probabilities)
    else:
        from engine.whatif import equal_probabilities, first_round_from_picks, open_matchups, pick_share_probabilities
        matchups = open_matchups(fixed, first_round=first_round_from_picks(pool))
        if args.preset == "picks":
            probabilities = pick_share_probabilities(matchups, pool)
        else:
            probabilities = equal_probabilities(matchups)

    games = None
    if args.games:
        games = [int(g) for g in args.games.split(",") if g.strip()]
    else:
        unassigned = [g for g in undetermined_games(pool, fixed) if g not in probabilities]
        candidates = remaining_games(fixed, probabilities)
        if unassigned or len(candidates) > MAX_ENUMERATED_GAMES:
            games = ranking_games(pool, fixed, probabilities)
            if unassigned:
                print(f"NOTE: {len(unassigned)} undecided games have no win probabilities yet "
                      f"and are left out: {unassigned}")
            print(f"Enumerating {len(games)} of {len(candidates)} games with probabilities "
                  f"(chosen by points at stake): {games}")

    scores = project_probabilistic(pool, results, probabilities, games=games,
                                   show_progress=True, hypothetical=hypothetical)

    state["probabilities"] = probabilities
    save_state(state)

    from output.printer import print_projection
    print_projection(scores, limit=args.top)


def cmd_similar(args):
    """Rank participants by pick similarity to one participant."""
    state = load_state()
    pool = _require_pool(state)
    if not pool:
        return

    from engine.scorer import actual_totals
    from engine.similarity import rank_similar
    from output.printer import print_similarity

    if args.user not in {ps.participant for ps in pool}:
        print(f"ERROR: Unknown participant: {args.user}")
        return

    scores = actual_totals(pool, state.get("results", {}))
    print_similarity(args.user, rank_similar(args.user, pool, scores), limit=args.top)


def cmd_clusters(args):
    """Group participants into strategy clusters."""
    state = load_state()
    pool = _require_pool(state)
    if not pool:
        return

    from engine.clustering import cluster_participants
    from output.printer import print_clusters

    clusters = cluster_participants(
        pool, state.get("results", {}), mode=args.mode, cluster_count=args.count, seed=args.seed
    )
    print_clusters(clusters)


def cmd_analyze(args):
    """Print the pool analysis tables."""
    state = load_state()
    pool = _require_pool(state)
    if not pool:
        return
    results = state.get("results", {})

    from engine.analysis import leaderboard_trend, round_accuracy, team_confidence
    from output.printer import print_round_accuracy, print_team_confidence, print_trend

    print_round_accuracy(round_accuracy(pool, results))
    print_trend(leaderboard_trend(pool, results))
    print_team_confidence(team_confidence(pool))


def cmd_reset(args):
    """Discard what-if winners and probabilities."""
    state = load_state()
    state["hypothetical"] = {}
    state["probabilities"] = {}
    save_state(state)
    print("What-if session reset.")


# --- Main ---

def main():
    parser = argparse.ArgumentParser(
        description="Bracket Pool Standings and Projections",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Workflow:
  1. python cli.py load-pool --file pool.json        # Everyone's picks
  2. python cli.py load-results --file results.csv   # Completed games (re-run as games finish)
  3. python cli.py standings                         # Leaderboard
  4. python cli.py what-if --popular                 # Explore unplayed games
  5. python cli.py simulate --preset picks           # Win probabilities
        """
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    p_pool = subparsers.add_parser("load-pool", help="Load participants' picks")
    p_pool.add_argument("--file", required=True, help="Pool JSON export")

    p_results = subparsers.add_parser("load-results", help="Load completed game results")
    p_results.add_argument("--file", required=True, help="Results CSV")

    p_standings = subparsers.add_parser("standings", help="Show the leaderboard")
    p_standings.add_argument("--top", type=int, default=None)
    p_standings.add_argument("--by-round", action="store_true", help="Show points by round")

    p_whatif = subparsers.add_parser("what-if", help="Set hypothetical winners")
    p_whatif.add_argument("--file", help="CSV with Game ID, Winner")
    p_whatif.add_argument("--popular", action="store_true", help="Most popular pick wins every game")
    p_whatif.add_argument("--sample", action="store_true", help="Sample winners from saved probabilities")
    p_whatif.add_argument("--game", type=int, help="Set a single game")
    p_whatif.add_argument("--winner", help="Winner for --game (omit to clear)")
    p_whatif.add_argument("--clear", action="store_true")
    p_whatif.add_argument("--seed", type=int, default=None)

    p_sim = subparsers.add_parser("simulate", help="Expected scores and win probabilities")
    p_sim.add_argument("--probabilities", help="JSON with per-game win probabilities")
    p_sim.add_argument("--preset", choices=["equal", "picks"], default="equal")
    p_sim.add_argument("--games", help="Comma-separated game ids to enumerate")
    p_sim.add_argument("--top", type=int, default=config.DEFAULT_TOP_N)

    p_similar = subparsers.add_parser("similar", help="Most similar brackets")
    p_similar.add_argument("--user", required=True)
    p_similar.add_argument("--top", type=int, default=config.DEFAULT_TOP_N)

    p_clusters = subparsers.add_parser("clusters", help="Strategy clusters")
    p_clusters.add_argument("--mode", choices=["champion", "kmeans"], default="champion")
    p_clusters.add_argument("--count", type=int, default=config.DEFAULT_CLUSTER_COUNT,
                            choices=range(config.MIN_CLUSTER_COUNT, config.MAX_CLUSTER_COUNT + 1))
    p_clusters.add_argument("--seed", type=int, default=config.DEFAULT_SEED)

    subparsers.add_parser("analyze", help="Round accuracy, leaderboard trend, team confidence")
    subparsers.add_parser("reset", help="Clear what-if winners and probabilities")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    commands = {
        "load-pool": cmd_load_pool,
        "load-results": cmd_load_results,
        "standings": cmd_standings,
        "what-if": cmd_what_if,
        "simulate": cmd_simulate,
        "similar": cmd_similar,
        "clusters": cmd_clusters,
        "analyze": cmd_analyze,
        "reset": cmd_reset,
    }

    cmd_func = commands.get(args.command)
    if not cmd_func:
        parser.print_help()
        return

    try:
        cmd_func(args)
    except ValueError as e:
        print(f"ERROR: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
