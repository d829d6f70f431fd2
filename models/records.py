"""Result records returned by the engine."""

from dataclasses import dataclass, field

import config


def empty_round_scores() -> dict[str, int]:
    return {name: 0 for name in config.ROUND_NAMES.values()}


@dataclass
class ScoreRecord:
    participant: str
    actual_score: int = 0  # completed games only
    projected_score: int = 0  # completed + hypothetical winners
    max_possible_score: int = 0
    round_scores: dict[str, int] = field(default_factory=empty_round_scores)
    projected_round_scores: dict[str, int] = field(default_factory=empty_round_scores)
    correct_picks: int = 0
    graded_picks: int = 0
    total_picks: int = 0
    champion: str | None = None

    def __str__(self):
        return f"{self.participant}: {self.actual_score} ({self.projected_score} projected, max {self.max_possible_score})"


@dataclass
class ProbabilityScore:
    participant: str
    base_score: int  # points from completed games and fixed hypothetical winners
    expected_score: float  # linear expectation, ignores bracket dependencies
    # Percent of the total outcome weight (product of per-game probabilities)
    # this participant leads. Equals win_count / outcomes only when every
    # enumerated game is 50/50.
    win_probability: float
    win_count: int = 0  # unweighted number of enumerated outcomes led
    outcomes: int = 0
    champion: str | None = None


@dataclass
class SimilarityResult:
    participant: str
    jaccard: float
    weighted_jaccard: float
    shared_points: int
    score: int = 0


@dataclass
class ParticipantFeatures:
    participant: str
    chalk_score: float = 0.0  # % of picks on the better seed
    herding_score: float = 0.0  # % of picks on the pool's most popular entrant
    deviation_score: float = 0.0  # not a percentage, grows with contrarian picks
    total_picks: int = 0

    @property
    def point(self) -> tuple[float, float]:
        return self.chalk_score, self.herding_score


@dataclass
class ClusterAssignment:
    cluster_id: int
    members: list[str]
    centroid: tuple[float, float]
    avg_chalk_score: float
    avg_herding_score: float
    avg_deviation_score: float
    champion: str | None = None
    description: str = ""

    @property
    def size(self) -> int:
        return len(self.members)
