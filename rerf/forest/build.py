"""Forest construction driver.

Pipeline flow:
    labels -> projection strategy -> class index -> substreams -> dispatch -> Forest

Everything before dispatch runs once in the calling process; every tree is
then grown from its own substream, so the forest only depends on
(X, Y, seed, config) and never on the number of workers.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional

import numpy as np
import pandas as pd  # type: ignore[import-untyped]

from rerf.config_logging import get_logger
from rerf.forest.assembler import Forest, assemble_forest
from rerf.forest.config import (
    BuildConfig,
    ProjectionOptions,
    ProjectionStrategy,
    default_projection_options,
)
from rerf.forest.dispatch import dispatch, resolve_n_workers
from rerf.forest.labels import encode_labels
from rerf.forest.rng import RNGStreamManager
from rerf.forest.stratify import ClassIndex, build_class_index
from rerf.projection.resolver import resolve_projection
from rerf.tree.builder import Tree, build_tree
from rerf.utils.transforms import rank_matrix

logger = get_logger(__name__)


@dataclass(frozen=True, eq=False)
class TreeTask:
    """Read-only inputs shared by every tree; called once per substream."""

    X: np.ndarray
    codes: np.ndarray
    config: BuildConfig
    class_index: Optional[ClassIndex]
    class_counts: np.ndarray
    strategy: ProjectionStrategy
    options: ProjectionOptions

    def __call__(self, rng: np.random.Generator) -> Tree:
        cfg = self.config
        return build_tree(
            self.X,
            self.codes,
            cfg.min_parent,
            cfg.max_depth,
            cfg.bagging,
            cfg.replacement,
            cfg.stratify,
            self.class_index,
            self.class_counts,
            self.strategy,
            self.options,
            cfg.store_oob,
            cfg.store_ns,
            cfg.progress,
            cfg.rotate,
            rng,
        )


def _as_matrix(X: Any) -> np.ndarray:
    if isinstance(X, pd.DataFrame):
        X = X.to_numpy(dtype=np.float64)
    X = np.asarray(X, dtype=np.float64)
    if X.ndim != 2:
        raise ValueError(f"X must be 2-dimensional, got shape {X.shape}")
    if X.shape[0] == 0 or X.shape[1] == 0:
        raise ValueError(f"X must not be empty, got shape {X.shape}")
    return X


def build(X: Any, Y: Any, config: Optional[BuildConfig] = None, **overrides: Any) -> Forest:
    """Build a forest of randomized oblique trees.

    Args:
        X: Numeric matrix (n, p), ndarray or DataFrame.
        Y: Labels of length n, categorical or numeric.
        config: Build configuration (default: BuildConfig()).
        **overrides: BuildConfig fields overriding ``config``.

    Returns:
        Forest with ``config.trees`` trees.

    Raises:
        InvalidLabelType: If Y is neither categorical nor numeric.
        ValueError: If X, Y or the configuration are inconsistent.
    """
    if config is None:
        config = BuildConfig(**overrides)
    elif overrides:
        config = replace(config, **overrides)

    encoded = encode_labels(Y)
    X = _as_matrix(X)
    if X.shape[0] != len(encoded.codes):
        raise ValueError(
            f"X ({X.shape[0]} samples) and Y ({len(encoded.codes)} samples) have different numbers of samples"
        )
    if config.rank_transform:
        X = rank_matrix(X)

    options = config.projection_options or default_projection_options(X.shape[1])
    if config.projection is None and options.p != X.shape[1]:
        raise ValueError(f"projection_options.p is {options.p} but X has {X.shape[1]} columns")
    projection = resolve_projection(options, config.projection, config.cat_map_source)

    class_index = build_class_index(encoded.codes, encoded.n_classes, config.stratify)
    streams = RNGStreamManager(config.seed).spawn(config.trees)
    n_workers = resolve_n_workers(config.num_cores, config.trees)

    logger.info(
        "Building %d trees on %d worker(s): %d samples, %d features, %d classes, %s projections",
        config.trees,
        n_workers,
        X.shape[0],
        X.shape[1],
        encoded.n_classes,
        projection.kind,
    )

    task = TreeTask(
        X=X,
        codes=encoded.codes,
        config=replace(config, cat_map_source=None),
        class_index=class_index,
        class_counts=encoded.class_counts,
        strategy=projection.strategy,
        options=projection.options,
    )
    trees = dispatch(task, [(stream,) for stream in streams], n_workers)
    if config.progress:
        print()

    forest = assemble_forest(trees, encoded.labels, config, projection)
    logger.info("Built forest: %d trees, %d nodes", forest.n_trees, sum(t.n_nodes for t in trees))
    return forest
