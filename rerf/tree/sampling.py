"""Per-tree bootstrap sampling."""

from __future__ import annotations

import math
from typing import Optional

import numpy as np

from rerf.forest.stratify import ClassIndex


def draw_sample(
    n: int,
    rng: np.random.Generator,
    replacement: bool = True,
    bagging: float = 0.0,
    stratify: bool = False,
    class_index: Optional[ClassIndex] = None,
    class_counts: Optional[np.ndarray] = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Draw the in-bag rows of one tree.

    With replacement, n rows are drawn (per class when stratified, keeping each
    class's size). Without replacement, ceil(n * (1 - bagging)) distinct rows
    are drawn and stratification is ignored.

    Args:
        n: Number of training rows.
        rng: Tree substream.
        replacement: Sample with replacement.
        bagging: Out-of-bag fraction when sampling without replacement.
        stratify: Sample each class separately (replacement only).
        class_index: Row indices per class code, required when stratified.
        class_counts: Cumulative class counts, required when stratified.

    Returns:
        Tuple of (in-bag row indices, sorted out-of-bag row indices).
    """
    if replacement:
        if stratify:
            if class_index is None or class_counts is None:
                raise ValueError("Stratified sampling needs class_index and class_counts")
            sizes = np.diff(np.asarray(class_counts), prepend=0)
            in_bag = np.concatenate([
                rng.choice(class_index[code], size=int(size), replace=True)
                for code, size in zip(sorted(class_index), sizes)
                if size > 0
            ])
        else:
            in_bag = rng.integers(0, n, size=n)
    elif bagging > 0:
        in_bag = rng.choice(n, size=math.ceil(n * (1.0 - bagging)), replace=False)
    else:
        in_bag = np.arange(n)

    oob = np.setdiff1d(np.arange(n), in_bag)
    return in_bag.astype(np.int64), oob.astype(np.int64)
