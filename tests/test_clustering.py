"""Tests for strategy features and clustering."""

import pytest

from conftest import chalk_picks, result
from engine.clustering import (
    champion_clusters,
    cluster_participants,
    describe_cluster,
    kmeans_clusters,
    participant_features,
)
from models.pool import PickSet
from models.records import ParticipantFeatures


@pytest.fixture
def small_pool():
    return [
        PickSet("alice", {1: "A", 2: "C"}),
        PickSet("bob", {1: "A", 2: "D"}),
        PickSet("carol", {1: "B", 2: "C"}),
    ]


@pytest.fixture
def seeded_results():
    return {
        1: result(1, "A", "B", winner_seed=1, loser_seed=16),
        2: result(2, "D", "C", winner_seed=13, loser_seed=4),
    }


def test_participant_features(small_pool, seeded_results):
    features = {f.participant: f for f in participant_features(small_pool, seeded_results)}

    assert features["alice"].chalk_score == pytest.approx(100.0)
    assert features["alice"].herding_score == pytest.approx(100.0)
    assert features["alice"].deviation_score == pytest.approx(0.0)

    assert features["bob"].chalk_score == pytest.approx(50.0)
    assert features["bob"].herding_score == pytest.approx(50.0)
    assert features["bob"].deviation_score == pytest.approx(0.5)

    assert features["carol"].chalk_score == pytest.approx(50.0)
    assert features["carol"].total_picks == 2


def test_caller_seeds_override_result_seeds(small_pool, seeded_results):
    features = {f.participant: f for f in participant_features(small_pool, seeded_results, seeds={"D": 2})}

    assert features["bob"].chalk_score == pytest.approx(100.0)
    assert features["alice"].chalk_score == pytest.approx(50.0)


def test_no_seeds_means_no_chalk_picks(small_pool):
    for f in participant_features(small_pool, {}):
        assert f.chalk_score == 0.0


def test_zero_picks_gives_zero_features(small_pool):
    features = participant_features(small_pool + [PickSet("empty")], {})
    empty = next(f for f in features if f.participant == "empty")

    assert (empty.chalk_score, empty.herding_score, empty.deviation_score) == (0.0, 0.0, 0.0)


def test_same_champion_gives_one_cluster():
    pool = [PickSet(name, chalk_picks()) for name in ("a", "b", "c", "d")]

    clusters = cluster_participants(pool, {}, mode="champion", cluster_count=3)

    assert len(clusters) == 1
    assert clusters[0].champion == "G1a"
    assert clusters[0].members == ["a", "b", "c", "d"]


def test_champion_clusters_sorted_by_size(pool):
    clusters = champion_clusters(pool, participant_features(pool, {}))

    # All singletons, so ordered by entrant name
    assert [c.champion for c in clusters] == ["G17a", "G1a", "G1b"]
    assert [c.cluster_id for c in clusters] == [1, 2, 3]
    assert all(c.size == 1 for c in clusters)


def test_champion_clusters_skip_missing_champion_pick():
    pool = [PickSet("a", {63: "X"}), PickSet("b", {63: "X"}), PickSet("c", {1: "Y"})]
    clusters = champion_clusters(pool, participant_features(pool, {}))

    assert len(clusters) == 1
    assert clusters[0].members == ["a", "b"]


def _features(points):
    return [ParticipantFeatures(f"p{i}", chalk, herding) for i, (chalk, herding) in enumerate(points)]


def test_kmeans_assigns_everyone_once():
    features = _features([(90, 90), (88, 92), (91, 89), (10, 15), (12, 11), (50, 50)])

    clusters = kmeans_clusters(features, cluster_count=3, seed=7)

    members = sorted(m for c in clusters for m in c.members)
    assert members == sorted(f.participant for f in features)
    assert 1 <= len(clusters) <= 3
    assert [c.cluster_id for c in clusters] == list(range(1, len(clusters) + 1))


def test_kmeans_is_deterministic_for_a_seed():
    features = _features([(90, 90), (88, 92), (10, 15), (12, 11), (50, 55)])

    assert kmeans_clusters(features, 3, seed=3) == kmeans_clusters(features, 3, seed=3)


def test_single_cluster_centroid_is_the_mean():
    features = _features([(0, 0), (100, 50)])

    clusters = kmeans_clusters(features, cluster_count=1)

    assert len(clusters) == 1
    assert clusters[0].centroid == pytest.approx((50.0, 25.0))
    assert clusters[0].avg_chalk_score == pytest.approx(50.0)


def test_kmeans_degenerate_inputs():
    assert kmeans_clusters([], cluster_count=3) == []
    with pytest.raises(ValueError):
        kmeans_clusters(_features([(1, 1)]), cluster_count=0)


def test_cluster_participants_modes(pool):
    assert cluster_participants([], {}, mode="kmeans") == []
    assert cluster_participants([], {}, mode="champion") == []
    with pytest.raises(ValueError):
        cluster_participants(pool, {}, mode="spectral")


def test_describe_cluster():
    assert "chalk" in describe_cluster(80, 10)
    assert "crowd" in describe_cluster(50, 80)
    assert "Contrarian" in describe_cluster(20, 30)
    assert "Balanced" in describe_cluster(50, 50)
