"""Matrix transforms applied to the training data."""

from __future__ import annotations

import numpy as np
from scipy import stats  # type: ignore[import-untyped]


def rank_matrix(X: np.ndarray) -> np.ndarray:
    """Rank-transform each column of X.

    The smallest value of a column becomes 1 and the largest n; ties get the
    average of their ranks.

    Args:
        X: Matrix of shape (n, p).

    Returns:
        Float matrix of column-wise ranks, same shape as X.
    """
    X = np.asarray(X, dtype=np.float64)
    if X.ndim != 2:
        raise ValueError(f"X must be 2-dimensional, got shape {X.shape}")
    return stats.rankdata(X, method="average", axis=0).astype(np.float64)


def random_rotation(p: int, rng: np.random.Generator) -> np.ndarray:
    """Draw a uniformly random (Haar) p x p orthogonal matrix.

    Args:
        p: Dimension.
        rng: Generator to draw from.

    Returns:
        Orthogonal matrix of shape (p, p).
    """
    if p < 1:
        raise ValueError(f"p must be >= 1, got: {p}")
    if p == 1:
        return np.ones((1, 1))
    return stats.ortho_group.rvs(dim=p, random_state=rng)
