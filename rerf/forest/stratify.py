"""Per-class row indices for stratified bootstrap sampling."""

from __future__ import annotations

from typing import Optional

import numpy as np

ClassIndex = dict[int, np.ndarray]


def build_class_index(codes: np.ndarray, n_classes: int, stratify: bool) -> Optional[ClassIndex]:
    """Build the ordered row indices of each class.

    Args:
        codes: Label codes in [1, n_classes].
        n_classes: Number of classes K.
        stratify: Whether stratified sampling was requested.

    Returns:
        Mapping code -> 0-based row indices in original row order, or None
        when stratification is off.
    """
    if not stratify:
        return None

    codes = np.asarray(codes)
    order = np.argsort(codes, kind="stable")
    bounds = np.searchsorted(codes[order], np.arange(1, n_classes + 2))
    return {
        code: order[bounds[code - 1] : bounds[code]]
        for code in range(1, n_classes + 1)
    }
