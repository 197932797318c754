"""Configuration dataclasses for forest construction."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import IO, Any, Callable, Optional, Union

import numpy as np

from rerf.constants import (
    DEFAULT_BAGGING,
    DEFAULT_MAX_DEPTH,
    DEFAULT_MIN_PARENT,
    DEFAULT_NUM_CORES,
    DEFAULT_RANDOM_MATRIX,
    DEFAULT_REPLACEMENT,
    DEFAULT_SEED,
    DEFAULT_STRATIFY,
    DEFAULT_TREES,
    RANDOM_MATRIX_KINDS,
)

CategoricalMap = tuple[tuple[int, ...], ...]
CatMapSource = Union[str, Path, IO[str]]
ProjectionStrategy = Callable[["ProjectionOptions", np.random.Generator], np.ndarray]


@dataclass(frozen=True)
class ProjectionOptions:
    """Options consumed by a projection strategy.

    Attributes:
        p: Number of columns of the training matrix.
        d: Number of candidate projections drawn per split.
        random_matrix: Kind of random matrix ("binary", "continuous", "rf",
            "poisson" or "frc").
        rho: Density for "binary"/"continuous", Poisson rate for "poisson",
            number of mixed features for "frc".
        cat_map: 0-based one-of-K column groups, one per categorical feature.
    """

    p: int
    d: int
    random_matrix: str = DEFAULT_RANDOM_MATRIX
    rho: float = 0.0
    cat_map: Optional[CategoricalMap] = None

    def __post_init__(self) -> None:
        if self.p < 1:
            raise ValueError(f"p must be >= 1, got: {self.p}")
        if self.d < 1:
            raise ValueError(f"d must be >= 1, got: {self.d}")
        if self.random_matrix not in RANDOM_MATRIX_KINDS:
            raise ValueError(
                f"random_matrix must be one of {RANDOM_MATRIX_KINDS}, got: {self.random_matrix!r}"
            )
        if self.rho < 0:
            raise ValueError(f"rho must be >= 0, got: {self.rho}")

    def with_cat_map(self, cat_map: CategoricalMap) -> "ProjectionOptions":
        """Return a copy extended with a categorical grouping."""
        return replace(self, cat_map=cat_map)


def default_projection_options(p: int) -> ProjectionOptions:
    """Default projection options for a matrix with ``p`` columns."""
    return ProjectionOptions(
        p=p,
        d=math.ceil(math.sqrt(p)),
        random_matrix=DEFAULT_RANDOM_MATRIX,
        rho=1.0 / p,
    )


@dataclass(frozen=True)
class BuildConfig:
    """Snapshot of every tunable of a forest build.

    Attributes:
        min_parent: Minimum node size allowed to split.
        trees: Number of trees in the forest.
        max_depth: Maximum tree height (0 = unbounded).
        bagging: Out-of-bag fraction when sampling without replacement.
        replacement: Sample n rows with replacement for each tree.
        stratify: Keep class proportions when sampling with replacement.
        projection: Caller-supplied projection strategy (None = resolved).
            It is stored on the forest, so it must be a module-level function
            or class instance for ``Forest.save`` to pickle it; lambdas and
            closures can build a forest but cannot be saved.
        projection_options: Options for the strategy (None = defaults from X).
        rank_transform: Rank-transform each feature before training.
        store_oob: Keep out-of-bag row indices on each tree.
        store_ns: Keep per-node sample counts on each tree.
        progress: Print a progress mark per completed tree.
        rotate: Randomly rotate X for each tree.
        num_cores: Worker count (0 = all cores but one).
        seed: Seed of the per-tree random substreams.
        cat_map_source: Path or text handle of the categorical map.
    """

    min_parent: int = DEFAULT_MIN_PARENT
    trees: int = DEFAULT_TREES
    max_depth: int = DEFAULT_MAX_DEPTH
    bagging: float = DEFAULT_BAGGING
    replacement: bool = DEFAULT_REPLACEMENT
    stratify: bool = DEFAULT_STRATIFY
    projection: Optional[ProjectionStrategy] = field(default=None, compare=False)
    projection_options: Optional[ProjectionOptions] = None
    rank_transform: bool = False
    store_oob: bool = False
    store_ns: bool = False
    progress: bool = False
    rotate: bool = False
    num_cores: int = DEFAULT_NUM_CORES
    seed: int = DEFAULT_SEED
    cat_map_source: Optional[CatMapSource] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.min_parent < 1:
            raise ValueError(f"min_parent must be >= 1, got: {self.min_parent}")
        if self.trees < 1:
            raise ValueError(f"trees must be >= 1, got: {self.trees}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got: {self.max_depth}")
        if not 0 <= self.bagging < 1:
            raise ValueError(f"bagging must be in [0, 1), got: {self.bagging}")
        if self.num_cores < 0:
            raise ValueError(f"num_cores must be >= 0, got: {self.num_cores}")
        if self.seed < 0:
            raise ValueError(f"seed must be >= 0, got: {self.seed}")
        if self.projection is not None and not callable(self.projection):
            raise ValueError("projection must be callable")

    def to_dict(self) -> dict[str, Any]:
        """Return the scalar parameters (used for logging and reports)."""
        return {
            "min_parent": self.min_parent,
            "trees": self.trees,
            "max_depth": self.max_depth,
            "bagging": self.bagging,
            "replacement": self.replacement,
            "stratify": self.stratify,
            "rank_transform": self.rank_transform,
            "store_oob": self.store_oob,
            "store_ns": self.store_ns,
            "rotate": self.rotate,
            "num_cores": self.num_cores,
            "seed": self.seed,
        }
