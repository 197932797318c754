"""Tests for rerf/projection/random_matrix.py module."""

from __future__ import annotations

import os
import sys

import numpy as np
import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from rerf.forest.config import ProjectionOptions
from rerf.projection.random_matrix import (
    CategoricalProjection,
    NumericProjection,
    sample_projection,
)


@pytest.fixture
def rng():
    return np.random.default_rng(0)


class TestSampleProjection:
    """Test cases for sample_projection."""

    @pytest.mark.parametrize("kind", ["binary", "continuous", "rf", "poisson", "frc"])
    def test_triplets_in_range(self, kind, rng):
        matrix = sample_projection(kind, p=10, d=4, rho=2.0 if kind in ("poisson", "frc") else 0.3, rng=rng)

        assert matrix.ndim == 2 and matrix.shape[1] == 3
        assert len(matrix) >= 1
        assert np.all((matrix[:, 0] >= 0) & (matrix[:, 0] < 10))
        assert np.all((matrix[:, 1] >= 0) & (matrix[:, 1] < 4))

    def test_binary_density(self, rng):
        matrix = sample_projection("binary", p=10, d=4, rho=0.25, rng=rng)
        assert len(matrix) == 10
        assert set(np.unique(matrix[:, 2])) <= {-1.0, 1.0}

    def test_binary_entries_distinct(self, rng):
        matrix = sample_projection("binary", p=5, d=5, rho=0.8, rng=rng)
        cells = {(int(f), int(j)) for f, j in matrix[:, :2]}
        assert len(cells) == len(matrix)

    def test_at_least_one_entry(self, rng):
        assert len(sample_projection("binary", p=3, d=1, rho=0.0, rng=rng)) == 1

    def test_density_capped(self, rng):
        assert len(sample_projection("continuous", p=3, d=2, rho=5.0, rng=rng)) == 6

    def test_rf_is_axis_aligned(self, rng):
        matrix = sample_projection("rf", p=6, d=3, rho=0.0, rng=rng)
        assert len(matrix) == 3
        assert len(np.unique(matrix[:, 0])) == 3
        np.testing.assert_array_equal(matrix[:, 1], [0, 1, 2])
        np.testing.assert_array_equal(matrix[:, 2], 1.0)

    def test_rf_more_projections_than_features(self, rng):
        assert len(sample_projection("rf", p=2, d=5, rho=0.0, rng=rng)) == 2

    def test_frc_mixes_fixed_number(self, rng):
        matrix = sample_projection("frc", p=8, d=3, rho=2, rng=rng)
        _, counts = np.unique(matrix[:, 1], return_counts=True)
        np.testing.assert_array_equal(counts, [2, 2, 2])
        assert np.all(np.abs(matrix[:, 2]) <= 1.0)

    def test_poisson_every_projection_non_empty(self, rng):
        matrix = sample_projection("poisson", p=5, d=6, rho=0.1, rng=rng)
        assert set(matrix[:, 1].astype(int)) == set(range(6))

    def test_reproducible(self):
        a = sample_projection("binary", 8, 3, 0.5, np.random.default_rng(1))
        b = sample_projection("binary", 8, 3, 0.5, np.random.default_rng(1))
        np.testing.assert_array_equal(a, b)

    def test_unknown_kind(self, rng):
        with pytest.raises(ValueError, match="Unknown random matrix kind"):
            sample_projection("dense", 3, 1, 0.5, rng)


class TestProjectionStrategies:
    """Test cases for the numeric and categorical strategies."""

    def test_numeric_uses_options(self, rng):
        options = ProjectionOptions(p=4, d=2, random_matrix="rf")
        matrix = NumericProjection()(options, rng)
        assert len(matrix) == 2

    def test_strategies_compare_by_kind(self):
        assert NumericProjection() == NumericProjection()
        assert NumericProjection() != CategoricalProjection()
        assert hash(CategoricalProjection()) == hash(CategoricalProjection())

    def test_categorical_requires_map(self, rng):
        with pytest.raises(ValueError, match="cat_map"):
            CategoricalProjection()(ProjectionOptions(p=4, d=2), rng)

    def test_categorical_maps_groups_to_member_columns(self):
        cat_map = ((2, 3, 4), (5, 6))
        options = ProjectionOptions(p=7, d=4, random_matrix="binary", rho=1.0, cat_map=cat_map)
        strategy = CategoricalProjection()

        rng = np.random.default_rng(5)
        seen = set()
        for _ in range(50):
            matrix = strategy(options, rng)
            features = matrix[:, 0].astype(int)
            assert np.all((features >= 0) & (features < 7))
            seen.update(features.tolist())
        assert seen == set(range(7))

    def test_categorical_samples_virtual_features(self):
        """rf over 2 numeric columns + 2 groups draws at most one column per group."""
        cat_map = ((2, 3, 4), (5, 6))
        options = ProjectionOptions(p=7, d=4, random_matrix="rf", cat_map=cat_map)
        matrix = CategoricalProjection()(options, np.random.default_rng(2))

        features = matrix[:, 0].astype(int)
        assert len(features) == 4
        assert sum(f in cat_map[0] for f in features) == 1
        assert sum(f in cat_map[1] for f in features) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
