"""Random sparse projection matrices.

A projection matrix is returned as an array of shape (nnz, 3) whose rows are
(feature index, projection index, weight) triplets with 0-based indices. Each
candidate split of a node projects the node's rows onto the d columns it
describes.

Supported kinds:
- binary: round(p * d * rho) random entries, weights +/-1
- continuous: same positions as binary, standard normal weights
- rf: d distinct single features, weight 1 (axis-aligned splits)
- poisson: Poisson(rho) features per projection, weights +/-1
- frc: int(rho) features per projection, weights uniform on [-1, 1]
"""

from __future__ import annotations

import numpy as np

from rerf.forest.config import ProjectionOptions
from rerf.projection.categorical_map import numeric_column_count

TRIPLET_COLUMNS: int = 3


def _triplets(features: np.ndarray, projections: np.ndarray, weights: np.ndarray) -> np.ndarray:
    return np.column_stack([features, projections, weights]).astype(np.float64, copy=False)


def _sample_entries(p: int, d: int, rho: float, rng: np.random.Generator) -> tuple[np.ndarray, np.ndarray]:
    n_cells = p * d
    nnz = min(n_cells, max(1, int(round(n_cells * rho))))
    cells = np.sort(rng.choice(n_cells, size=nnz, replace=False))
    return cells % p, cells // p


def _sample_per_projection(
    p: int, d: int, sizes: np.ndarray, rng: np.random.Generator
) -> tuple[np.ndarray, np.ndarray]:
    features = [rng.choice(p, size=int(size), replace=False) for size in sizes]
    projections = np.repeat(np.arange(d), sizes)
    return np.concatenate(features), projections


def sample_projection(
    kind: str, p: int, d: int, rho: float, rng: np.random.Generator
) -> np.ndarray:
    """Draw one random projection matrix over ``p`` features.

    Args:
        kind: Matrix kind ("binary", "continuous", "rf", "poisson", "frc").
        p: Number of features.
        d: Number of projections.
        rho: Density, Poisson rate or mixing size depending on ``kind``.
        rng: Generator to draw from.

    Returns:
        Array of (feature, projection, weight) triplets.
    """
    if kind == "binary":
        features, projections = _sample_entries(p, d, rho, rng)
        weights = rng.choice(np.array([-1.0, 1.0]), size=len(features))
    elif kind == "continuous":
        features, projections = _sample_entries(p, d, rho, rng)
        weights = rng.standard_normal(len(features))
    elif kind == "rf":
        k = min(d, p)
        features = rng.choice(p, size=k, replace=False)
        projections = np.arange(k)
        weights = np.ones(k)
    elif kind == "poisson":
        sizes = np.clip(rng.poisson(rho, size=d), 1, p)
        features, projections = _sample_per_projection(p, d, sizes, rng)
        weights = rng.choice(np.array([-1.0, 1.0]), size=len(features))
    elif kind == "frc":
        sizes = np.full(d, min(p, max(1, int(rho))))
        features, projections = _sample_per_projection(p, d, sizes, rng)
        weights = rng.uniform(-1.0, 1.0, size=len(features))
    else:
        raise ValueError(f"Unknown random matrix kind: {kind!r}")
    return _triplets(features, projections, weights)


class NumericProjection:
    """Projection strategy treating every column of X as numeric."""

    kind: str = "numeric"

    def __call__(self, options: ProjectionOptions, rng: np.random.Generator) -> np.ndarray:
        return sample_projection(options.random_matrix, options.p, options.d, options.rho, rng)

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self)

    def __hash__(self) -> int:
        return hash(self.kind)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class CategoricalProjection(NumericProjection):
    """Projection strategy aware of one-of-K encoded categorical features.

    Sampling happens over the numeric columns plus one virtual feature per
    categorical group; a drawn group is replaced by one of its columns chosen
    uniformly at random.
    """

    kind: str = "categorical"

    def __call__(self, options: ProjectionOptions, rng: np.random.Generator) -> np.ndarray:
        if options.cat_map is None:
            raise ValueError("CategoricalProjection requires options with a cat_map")

        p_num = numeric_column_count(options.cat_map)
        n_virtual = p_num + len(options.cat_map)
        matrix = sample_projection(options.random_matrix, n_virtual, options.d, options.rho, rng)

        features = matrix[:, 0].astype(np.int64)
        for row in np.flatnonzero(features >= p_num):
            group = options.cat_map[features[row] - p_num]
            features[row] = group[rng.integers(len(group))]
        matrix[:, 0] = features
        return matrix
