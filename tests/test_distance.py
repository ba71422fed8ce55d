"""Tests for distance providers."""

import pytest
import numpy as np

from lloydkit.clustering.distance import (
    EuclideanDistance,
    ManhattanDistance,
    EditDistance,
    CallableDistance,
    get_distance,
    check_distances,
)
from lloydkit.errors import InvalidParameterError


class TestNumericDistances:
    """Tests for coordinate distances."""

    def test_euclidean(self):
        assert EuclideanDistance()((0, 0), (3, 4)) == pytest.approx(5.0)

    def test_manhattan(self):
        assert ManhattanDistance()((0, 0), (3, -4)) == pytest.approx(7.0)

    def test_identical_points_are_zero(self):
        assert EuclideanDistance()((1.5, 2.5, 3.5), (1.5, 2.5, 3.5)) == 0.0

    def test_pairwise_matches_pointwise(self):
        """Test that the vectorized matrix agrees with single calls."""
        rng = np.random.default_rng(0)
        points = rng.normal(size=(6, 3))
        centroids = rng.normal(size=(2, 3))

        for distance in (EuclideanDistance(), ManhattanDistance()):
            matrix = distance.pairwise(points, centroids)
            assert matrix.shape == (6, 2)
            for i in range(6):
                for j in range(2):
                    assert matrix[i, j] == pytest.approx(distance(points[i], centroids[j]))


class TestEditDistance:
    """Tests for Levenshtein distance."""

    @pytest.mark.parametrize('a, b, expected', [
        ('kitten', 'sitting', 3),
        ('flaw', 'lawn', 2),
        ('', 'abc', 3),
        ('abc', '', 3),
        ('same', 'same', 0),
        ('cat', 'cart', 1),
    ])
    def test_known_values(self, a, b, expected):
        assert EditDistance()(a, b) == expected

    def test_symmetric(self):
        distance = EditDistance()
        assert distance('house', 'horse') == distance('horse', 'house')

    def test_works_on_symbol_lists(self):
        """Test sequences other than strings."""
        assert EditDistance()(['a', 'b', 'c'], ['a', 'c']) == 1

    def test_pairwise_fallback(self):
        matrix = EditDistance().pairwise(['cat', 'dog'], ['cat', 'cot', 'dog'])
        np.testing.assert_array_equal(matrix, [[0, 1, 3], [3, 2, 0]])


class TestGetDistance:
    """Tests for resolving distance providers."""

    def test_by_name(self):
        assert isinstance(get_distance('euclidean'), EuclideanDistance)
        assert isinstance(get_distance('Levenshtein'), EditDistance)

    def test_instance_passthrough(self):
        distance = ManhattanDistance()
        assert get_distance(distance) is distance

    def test_callable_is_wrapped(self):
        def chebyshev(a, b):
            return max(abs(x - y) for x, y in zip(a, b))

        distance = get_distance(chebyshev)
        assert isinstance(distance, CallableDistance)
        assert distance.name == 'chebyshev'
        assert distance((0, 0), (3, -5)) == 5.0

    def test_unknown_name_raises(self):
        with pytest.raises(InvalidParameterError, match="Unknown distance"):
            get_distance('cosine-ish')

    def test_non_callable_raises(self):
        with pytest.raises(InvalidParameterError):
            get_distance(42)


class TestCheckDistances:
    """Tests for distance matrix validation."""

    def test_accepts_valid(self):
        matrix = np.array([[0.0, 1.0]])
        assert check_distances(matrix) is matrix

    def test_rejects_negative(self):
        with pytest.raises(InvalidParameterError, match="negative"):
            check_distances(np.array([[0.0, -1.0]]))

    def test_rejects_nan(self):
        with pytest.raises(InvalidParameterError, match="non-finite"):
            check_distances(np.array([[np.nan, 1.0]]))
