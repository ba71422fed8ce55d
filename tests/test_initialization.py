"""Tests for initialization strategies."""

import pytest
import numpy as np

from lloydkit.clustering.initialization import (
    EqualBlockRandom,
    RandomCentroidSample,
    KMeansPlusPlus,
    FixedAssignment,
    get_initializer,
)
from lloydkit.clustering.distance import EuclideanDistance
from lloydkit.errors import InvalidParameterError


@pytest.fixture
def points():
    return np.arange(20, dtype=float).reshape(10, 2)


class TestEqualBlockRandom:
    """Tests for the shuffled block partition."""

    def test_near_equal_blocks(self, points):
        """Test that block sizes differ by at most one and no block is empty."""
        state = EqualBlockRandom()(points, 3, EuclideanDistance(), np.random.RandomState(0))
        sizes = np.bincount(state.labels, minlength=3)

        assert sorted(sizes.tolist()) == [3, 3, 4]
        assert state.centroids is None

    def test_seeded_shuffle_is_reproducible(self, points):
        first = EqualBlockRandom()(points, 3, EuclideanDistance(), np.random.RandomState(9))
        second = EqualBlockRandom()(points, 3, EuclideanDistance(), np.random.RandomState(9))

        np.testing.assert_array_equal(first.labels, second.labels)


class TestSeedStrategies:
    """Tests for strategies that start from seed centroids."""

    @pytest.mark.parametrize('strategy', [RandomCentroidSample(), KMeansPlusPlus()])
    def test_seeds_are_distinct_points(self, points, strategy):
        """Test that k distinct dataset points are chosen."""
        state = strategy(points, 4, EuclideanDistance(), np.random.RandomState(3))

        assert state.centroids.shape == (4, 2)
        assert len({tuple(c) for c in state.centroids}) == 4
        for centroid in state.centroids:
            assert any(np.array_equal(centroid, p) for p in points)

    @pytest.mark.parametrize('strategy', [RandomCentroidSample(), KMeansPlusPlus()])
    def test_labels_follow_nearest_seed(self, points, strategy):
        """Test that every seed owns itself after the initial assignment."""
        state = strategy(points, 3, EuclideanDistance(), np.random.RandomState(5))

        assert state.labels.shape == (10,)
        for cluster_id, centroid in enumerate(state.centroids):
            index = next(i for i, p in enumerate(points) if np.array_equal(p, centroid))
            assert state.labels[index] == cluster_id

    def test_kmeans_plus_plus_spreads_seeds(self):
        """Test that two far-apart groups each receive a seed."""
        data = np.array([[0.0, 0.0], [0.1, 0.0], [100.0, 0.0], [100.1, 0.0]])
        for seed in range(10):
            state = KMeansPlusPlus()(data, 2, EuclideanDistance(), np.random.RandomState(seed))
            xs = sorted(c[0] for c in state.centroids)
            assert xs[0] < 50 < xs[1]

    def test_kmeans_plus_plus_with_identical_points(self):
        """Test that all-zero distances fall back to uniform sampling."""
        data = np.ones((5, 2))
        state = KMeansPlusPlus()(data, 3, EuclideanDistance(), np.random.RandomState(0))

        assert state.centroids.shape == (3, 2)
        assert np.all(state.labels == 0)


class TestFixedAssignment:
    """Tests for caller-supplied partitions."""

    def test_returns_copy(self, points):
        labels = [0, 1] * 5
        init = FixedAssignment(labels)
        state = init(points, 2, EuclideanDistance(), np.random.RandomState(0))

        assert state.labels.tolist() == labels
        state.labels[0] = 1
        assert init.labels[0] == 0

    def test_wrong_length(self, points):
        with pytest.raises(InvalidParameterError, match="labels"):
            FixedAssignment([0, 1])(points, 2, EuclideanDistance(), np.random.RandomState(0))

    def test_label_out_of_range(self, points):
        with pytest.raises(InvalidParameterError, match="must lie in"):
            FixedAssignment([0] * 9 + [2])(points, 2, EuclideanDistance(), np.random.RandomState(0))


class TestGetInitializer:
    """Tests for resolving strategies."""

    @pytest.mark.parametrize('name, cls', [
        ('equal-block-random', EqualBlockRandom),
        ('random-centroid-sample', RandomCentroidSample),
        ('k-means++', KMeansPlusPlus),
    ])
    def test_by_name(self, name, cls):
        assert isinstance(get_initializer(name), cls)
        assert get_initializer(name).name == name

    def test_unknown_name(self):
        with pytest.raises(InvalidParameterError, match="Unknown initialization"):
            get_initializer('forgy')
