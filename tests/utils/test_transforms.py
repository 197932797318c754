"""Tests for rerf.utils.transforms."""

import numpy as np
import pytest

from rerf.utils.transforms import random_rotation, rank_matrix


class TestRankMatrix:
    def test_ranks_per_column(self):
        """Each column is ranked independently."""
        X = np.array([[10.0, -1.0], [30.0, -3.0], [20.0, -2.0]])
        np.testing.assert_array_equal(rank_matrix(X), [[1, 3], [3, 1], [2, 2]])

    def test_ties_get_average_rank(self):
        X = np.array([[1.0], [2.0], [2.0], [5.0]])
        np.testing.assert_array_equal(rank_matrix(X)[:, 0], [1.0, 2.5, 2.5, 4.0])

    def test_monotone_invariance(self):
        X = np.random.default_rng(0).normal(size=(20, 3))
        np.testing.assert_array_equal(rank_matrix(X), rank_matrix(np.exp(X)))

    def test_rejects_vector(self):
        with pytest.raises(ValueError, match="2-dimensional"):
            rank_matrix(np.arange(3.0))


class TestRandomRotation:
    @pytest.mark.parametrize("p", [2, 3, 5])
    def test_orthogonal(self, p):
        R = random_rotation(p, np.random.default_rng(1))
        assert R.shape == (p, p)
        np.testing.assert_allclose(R @ R.T, np.eye(p), atol=1e-10)

    def test_single_dimension(self):
        np.testing.assert_array_equal(random_rotation(1, np.random.default_rng(0)), [[1.0]])

    def test_reproducible(self):
        a = random_rotation(4, np.random.default_rng(3))
        b = random_rotation(4, np.random.default_rng(3))
        np.testing.assert_array_equal(a, b)

    def test_invalid_dimension(self):
        with pytest.raises(ValueError):
            random_rotation(0, np.random.default_rng(0))
