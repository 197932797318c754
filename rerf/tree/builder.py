"""Tree Builder

This module grows one randomized oblique decision tree: at each node a random
sparse projection of the features is drawn, the node's rows are projected onto
it and the split minimizing the weighted Gini impurity is kept.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

import numpy as np

from rerf.config_logging import get_logger
from rerf.constants import PROGRESS_MARK
from rerf.forest.config import ProjectionOptions, ProjectionStrategy
from rerf.forest.stratify import ClassIndex
from rerf.projection.random_matrix import TRIPLET_COLUMNS
from rerf.tree.sampling import draw_sample
from rerf.utils.transforms import random_rotation

logger = get_logger(__name__)

LEAF: int = -1

# Projection of an internal node: (feature indices, weights)
NodeProjection = tuple[np.ndarray, np.ndarray]


@dataclass(frozen=True, eq=False)
class Tree:
    """Grown tree, stored as flat per-node arrays (node 0 is the root).

    Attributes:
        children_left: Left child id per node (-1 for leaves).
        children_right: Right child id per node (-1 for leaves).
        cut_points: Split threshold per node (NaN for leaves); rows whose
            projected value is <= the cut go left.
        projections: Per node, the (features, weights) of the split
            projection, None for leaves.
        class_prob: Class distribution of the in-bag rows at each node.
        node_depth: Depth of each node.
        node_size: In-bag rows per node (kept when store_ns).
        oob_indices: Out-of-bag row indices (kept when store_oob).
        rotation: Rotation applied to X before growing (kept when rotate).
    """

    children_left: np.ndarray
    children_right: np.ndarray
    cut_points: np.ndarray
    projections: tuple[Optional[NodeProjection], ...]
    class_prob: np.ndarray
    node_depth: np.ndarray
    node_size: Optional[np.ndarray] = None
    oob_indices: Optional[np.ndarray] = None
    rotation: Optional[np.ndarray] = None

    @property
    def n_nodes(self) -> int:
        return len(self.children_left)

    @property
    def n_leaves(self) -> int:
        return int(np.sum(self.children_left == LEAF))

    @property
    def depth(self) -> int:
        return int(self.node_depth.max())


class TreeBuilder:
    """
    Grows one tree from in-bag rows.

    Attributes
    ----------
    n_classes : int
        Number of classes K
    min_parent : int
        Nodes with fewer rows become leaves
    max_depth : int
        Maximum depth (0 = unbounded)
    strategy : ProjectionStrategy
        Draws the projection matrix of each split
    options : ProjectionOptions
        Options passed to the strategy
    """

    def __init__(
        self,
        n_classes: int,
        min_parent: int,
        max_depth: int,
        strategy: ProjectionStrategy,
        options: ProjectionOptions,
    ) -> None:
        self.n_classes = n_classes
        self.min_parent = min_parent
        self.max_depth = max_depth
        self.strategy = strategy
        self.options = options

    def _is_leaf(self, counts: np.ndarray, depth: int) -> bool:
        n_rows = counts.sum()
        if n_rows < self.min_parent or np.count_nonzero(counts) <= 1:
            return True
        return self.max_depth > 0 and depth >= self.max_depth

    def _projection_weights(self, p: int, rng: np.random.Generator) -> np.ndarray:
        matrix = np.asarray(self.strategy(self.options, rng), dtype=np.float64)
        if matrix.ndim != 2 or matrix.shape[1] != TRIPLET_COLUMNS or len(matrix) == 0:
            raise ValueError(
                f"Projection strategy must return a non-empty (nnz, {TRIPLET_COLUMNS}) array, got shape {matrix.shape}"
            )
        features = matrix[:, 0].astype(np.int64)
        projections = matrix[:, 1].astype(np.int64)
        if features.min() < 0 or features.max() >= p or projections.min() < 0:
            raise ValueError("Projection strategy returned indices out of range")

        weights = np.zeros((p, projections.max() + 1))
        np.add.at(weights, (features, projections), matrix[:, 2])
        return weights

    def _best_split(
        self, X: np.ndarray, y: np.ndarray, rng: np.random.Generator
    ) -> Optional[tuple[NodeProjection, float, np.ndarray]]:
        """Find the best Gini split over one random projection.

        Returns:
            Tuple of (projection, cut point, left mask) or None when no split
            lowers the impurity.
        """
        n_rows = len(y)
        weights = self._projection_weights(X.shape[1], rng)
        projected = X @ weights

        onehot = np.eye(self.n_classes)[y]
        total = onehot.sum(axis=0)
        best_score = n_rows - (total**2).sum() / n_rows
        best: Optional[tuple[int, float]] = None

        n_left = np.arange(1, n_rows, dtype=np.float64)
        n_right = n_rows - n_left
        for j in range(weights.shape[1]):
            if not weights[:, j].any():
                continue
            order = np.argsort(projected[:, j], kind="stable")
            values = projected[order, j]
            valid = values[1:] > values[:-1]
            if not valid.any():
                continue

            left = np.cumsum(onehot[order], axis=0)[:-1]
            right = total - left
            score = (
                n_left - (left**2).sum(axis=1) / n_left
                + n_right - (right**2).sum(axis=1) / n_right
            )
            score[~valid] = np.inf
            i = int(np.argmin(score))
            if score[i] < best_score - 1e-12:
                best_score = float(score[i])
                cut = (values[i] + values[i + 1]) / 2.0
                # midpoint can round up to the right neighbour
                best = (j, cut if cut < values[i + 1] else values[i])

        if best is None:
            return None
        j, cut = best
        features = np.flatnonzero(weights[:, j])
        return (features, weights[features, j]), cut, projected[:, j] <= cut

    def build(self, X: np.ndarray, y: np.ndarray, rng: np.random.Generator) -> Tree:
        """
        Grow a tree on the given rows.

        Parameters
        ----------
        X : array-like, shape=(n_samples, n_features)
            In-bag rows
        y : array-like, shape=(n_samples,)
            0-based class codes of the rows
        rng : np.random.Generator
            Tree substream

        Returns
        -------
        Tree
            Tree with node_size filled in.
        """
        left: list[int] = []
        right: list[int] = []
        cuts: list[float] = []
        projections: list[Optional[NodeProjection]] = []
        class_prob: list[np.ndarray] = []
        depths: list[int] = []
        sizes: list[int] = []

        def new_node(depth: int) -> int:
            left.append(LEAF)
            right.append(LEAF)
            cuts.append(np.nan)
            projections.append(None)
            class_prob.append(np.zeros(self.n_classes))
            depths.append(depth)
            sizes.append(0)
            return len(left) - 1

        stack = [(new_node(0), np.arange(len(y)))]
        while stack:
            node, rows = stack.pop()
            counts = np.bincount(y[rows], minlength=self.n_classes)
            class_prob[node] = counts / len(rows)
            sizes[node] = len(rows)
            if self._is_leaf(counts, depths[node]):
                continue

            split = self._best_split(X[rows], y[rows], rng)
            if split is None:
                continue

            projection, cut, goes_left = split
            left_id = new_node(depths[node] + 1)
            right_id = new_node(depths[node] + 1)
            left[node], right[node] = left_id, right_id
            cuts[node] = cut
            projections[node] = projection
            stack.append((right_id, rows[~goes_left]))
            stack.append((left_id, rows[goes_left]))

        return Tree(
            children_left=np.asarray(left, dtype=np.int64),
            children_right=np.asarray(right, dtype=np.int64),
            cut_points=np.asarray(cuts, dtype=np.float64),
            projections=tuple(projections),
            class_prob=np.vstack(class_prob),
            node_depth=np.asarray(depths, dtype=np.int64),
            node_size=np.asarray(sizes, dtype=np.int64),
        )


def build_tree(
    X: np.ndarray,
    codes: np.ndarray,
    min_parent: int,
    max_depth: int,
    bagging: float,
    replacement: bool,
    stratify: bool,
    class_index: Optional[ClassIndex],
    class_counts: np.ndarray,
    strategy: ProjectionStrategy,
    options: ProjectionOptions,
    store_oob: bool,
    store_ns: bool,
    progress: bool,
    rotate: bool,
    rng: np.random.Generator,
) -> Tree:
    """Sample, optionally rotate, and grow one tree from its substream.

    Args:
        X: Training matrix (n, p), shared read-only.
        codes: Label codes in [1, K].
        min_parent: Minimum node size allowed to split.
        max_depth: Maximum depth (0 = unbounded).
        bagging: Out-of-bag fraction when sampling without replacement.
        replacement: Sample with replacement.
        stratify: Stratified sampling.
        class_index: Row indices per class (stratified only).
        class_counts: Cumulative class counts.
        strategy: Projection strategy.
        options: Projection options.
        store_oob: Keep out-of-bag indices.
        store_ns: Keep per-node sample counts.
        progress: Print a progress mark when done.
        rotate: Rotate X randomly before growing.
        rng: Substream owned by this tree.

    Returns:
        Grown Tree.
    """
    n_classes = len(class_counts)
    in_bag, oob = draw_sample(
        len(codes),
        rng,
        replacement=replacement,
        bagging=bagging,
        stratify=stratify,
        class_index=class_index,
        class_counts=class_counts,
    )

    X_bag = X[in_bag]
    rotation = None
    if rotate:
        rotation = random_rotation(X.shape[1], rng)
        X_bag = X_bag @ rotation

    builder = TreeBuilder(n_classes, min_parent, max_depth, strategy, options)
    grown = builder.build(X_bag, np.asarray(codes)[in_bag] - 1, rng)
    tree = replace(
        grown,
        node_size=grown.node_size if store_ns else None,
        oob_indices=oob if store_oob else None,
        rotation=rotation,
    )

    if progress:
        print(PROGRESS_MARK, end="", flush=True)
    return tree
