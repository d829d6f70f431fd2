"""Participant strategy clustering.

Each participant is described by three features computed from the pool's picks:
- chalk_score: % of picks on the better (lower) seed in that game
- herding_score: % of picks matching the pool's most popular entrant
- deviation_score: sum over non-popular picks of
  1 - picks_for_chosen / picks_for_most_popular (not a percentage)

Participants are then grouped either by k-means over (chalk, herding), or
simply by who they picked to win the championship. The championship grouping
is usually the more telling one in a small pool.
"""

from __future__ import annotations

from typing import Iterable, Mapping

import numpy as np

import config
from engine.analysis import most_popular, pick_distribution
from models.pool import GameResult, PickSet, seeds_from_results
from models.records import ClusterAssignment, ParticipantFeatures

CLUSTER_MODES = ("champion", "kmeans")


def _chalk_entrant(distribution: Mapping[str, int], seeds: Mapping[str, int]) -> str | None:
    seeded = [(seeds[team], team) for team in distribution if team in seeds]
    if not seeded:
        return None
    return min(seeded)[1]


def participant_features(pick_sets: Iterable[PickSet], results: Mapping[int, GameResult],
                         seeds: Mapping[str, int] | None = None) -> list[ParticipantFeatures]:
    """Compute chalk, herding and deviation scores for every participant.

    Args:
        pick_sets: The whole pool
        results: Completed results; their winner/loser seeds feed the chalk score
        seeds: Optional extra {entrant: seed}, overriding seeds from results
    """
    pick_sets = list(pick_sets)
    seed_map = seeds_from_results(results)
    seed_map.update(seeds or {})

    chalk_by_game = {}
    popular_by_game = {}
    for game_id, dist in pick_distribution(pick_sets).items():
        chalk_by_game[game_id] = _chalk_entrant(dist, seed_map)
        popular_by_game[game_id] = (dist, *most_popular(dist))

    features = []
    for ps in pick_sets:
        chalk = herding = 0
        deviation = 0.0
        total = 0
        for game_id, pick in ps.picks.items():
            if not pick:
                continue
            total += 1
            if pick == chalk_by_game[game_id]:
                chalk += 1
            dist, popular, max_picks = popular_by_game[game_id]
            if pick == popular:
                herding += 1
            else:
                deviation += 1 - dist.get(pick, 0) / max_picks

        features.append(ParticipantFeatures(
            participant=ps.participant,
            chalk_score=chalk / total * 100 if total else 0.0,
            herding_score=herding / total * 100 if total else 0.0,
            deviation_score=deviation,
            total_picks=total,
        ))
    return features


def describe_cluster(avg_chalk: float, avg_herding: float) -> str:
    if avg_chalk > config.CHALK_THRESHOLD:
        return "Heavily favors chalk picks (better seeds)."
    if avg_herding > config.HERDING_THRESHOLD:
        return "Tends to follow the crowd with popular picks."
    if avg_chalk < config.CONTRARIAN_THRESHOLD and avg_herding < config.CONTRARIAN_THRESHOLD:
        return "Contrarian: avoids both chalk and popular picks."
    return "Balanced picking strategy."


def _assignment(cluster_id: int, members: list[ParticipantFeatures],
                centroid: tuple[float, float] | None = None,
                champion: str | None = None) -> ClusterAssignment:
    avg_chalk = float(np.mean([f.chalk_score for f in members]))
    avg_herding = float(np.mean([f.herding_score for f in members]))
    avg_deviation = float(np.mean([f.deviation_score for f in members]))
    return ClusterAssignment(
        cluster_id=cluster_id,
        members=[f.participant for f in members],
        centroid=centroid if centroid is not None else (avg_chalk, avg_herding),
        avg_chalk_score=avg_chalk,
        avg_herding_score=avg_herding,
        avg_deviation_score=avg_deviation,
        champion=champion,
        description=describe_cluster(avg_chalk, avg_herding),
    )


def kmeans_clusters(features: list[ParticipantFeatures],
                    cluster_count: int = config.DEFAULT_CLUSTER_COUNT,
                    iterations: int = config.KMEANS_ITERATIONS,
                    seed: int | None = config.DEFAULT_SEED) -> list[ClusterAssignment]:
    """k-means over the (chalk_score, herding_score) plane.

    Centroids start at random points inside the features' bounding box and
    move to their members' mean for a fixed number of iterations. A cluster
    that loses all its members keeps its old centroid and is left out of
    the result.
    """
    if cluster_count < 1:
        raise ValueError(f"cluster_count must be at least 1, got {cluster_count}")
    if not features:
        return []

    rng = np.random.default_rng(seed)
    points = np.array([f.point for f in features], dtype=np.float64)
    centroids = rng.uniform(points.min(axis=0), points.max(axis=0), size=(cluster_count, 2))

    labels = np.zeros(len(points), dtype=np.int64)
    for _ in range(iterations):
        distances = np.linalg.norm(points[:, None, :] - centroids[None, :, :], axis=2)
        labels = distances.argmin(axis=1)
        for c in range(cluster_count):
            mask = labels == c
            if mask.any():
                centroids[c] = points[mask].mean(axis=0)

    clusters = []
    for c in range(cluster_count):
        members = [f for f, label in zip(features, labels) if label == c]
        if not members:
            continue
        centroid = (float(centroids[c][0]), float(centroids[c][1]))
        clusters.append(_assignment(len(clusters) + 1, members, centroid=centroid))
    return clusters


def champion_clusters(pick_sets: Iterable[PickSet],
                      features: list[ParticipantFeatures]) -> list[ClusterAssignment]:
    """Group participants by their championship pick.

    Largest group first, ties by entrant name. Participants with no
    championship pick are left out.
    """
    by_name = {f.participant: f for f in features}
    groups: dict[str, list[ParticipantFeatures]] = {}
    for ps in pick_sets:
        champ = ps.champion
        if not champ:
            continue
        member = by_name.get(ps.participant) or ParticipantFeatures(ps.participant)
        groups.setdefault(champ, []).append(member)

    ordered = sorted(groups.items(), key=lambda item: (-len(item[1]), item[0]))
    return [_assignment(i, members, champion=champ) for i, (champ, members) in enumerate(ordered, 1)]


def cluster_participants(pick_sets: Iterable[PickSet], results: Mapping[int, GameResult],
                         mode: str = "champion",
                         cluster_count: int = config.DEFAULT_CLUSTER_COUNT,
                         seeds: Mapping[str, int] | None = None,
                         seed: int | None = config.DEFAULT_SEED) -> list[ClusterAssignment]:
    """Cluster the pool by championship pick or by k-means over strategy features."""
    if mode not in CLUSTER_MODES:
        raise ValueError(f"Unknown cluster mode: {mode!r} (expected one of {', '.join(CLUSTER_MODES)})")
    pick_sets = list(pick_sets)
    features = participant_features(pick_sets, results, seeds)
    if mode == "champion":
        return champion_clusters(pick_sets, features)
    return kmeans_clusters(features, cluster_count=cluster_count, seed=seed)
