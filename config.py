"""Central configuration for the bracket pool standings engine."""

# Scoring: points awarded per correct pick in each round
# Round 1 = Round of 64, Round 6 = Championship
ROUND_POINTS = {1: 10, 2: 20, 3: 40, 4: 80, 5: 160, 6: 320}

ROUND_NAMES = {
    1: "ROUND_64",
    2: "ROUND_32",
    3: "SWEET_16",
    4: "ELITE_8",
    5: "FINAL_FOUR",
    6: "CHAMPIONSHIP",
}

# Number of games per round
GAMES_PER_ROUND = {1: 32, 2: 16, 3: 8, 4: 4, 5: 2, 6: 1}

# Max possible score: 32*10 + 16*20 + 8*40 + 4*80 + 2*160 + 1*320 = 1920
MAX_SCORE = sum(GAMES_PER_ROUND[r] * ROUND_POINTS[r] for r in range(1, 7))

# Bracket structure
NUM_ROUNDS = 6
NUM_GAMES = 63
CHAMPIONSHIP_GAME = 63

# Projection settings
MAX_ENUMERATED_GAMES = 10  # 2**10 outcomes per projection
PROBABILITY_TOLERANCE = 1e-6

# Clustering settings
DEFAULT_CLUSTER_COUNT = 3
MIN_CLUSTER_COUNT = 2
MAX_CLUSTER_COUNT = 5
KMEANS_ITERATIONS = 10
DEFAULT_SEED = 42

# Cluster descriptions (percent thresholds)
CHALK_THRESHOLD = 75
HERDING_THRESHOLD = 75
CONTRARIAN_THRESHOLD = 40

# Output settings
DEFAULT_TOP_N = 15
TREND_TOP_N = 10
