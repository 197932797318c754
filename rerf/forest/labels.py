"""Label normalization.

Class labels are reduced to dense integer codes 1..K before any tree is grown:
- Categorical labels (strings, pandas ``category``) are sorted lexicographically
- Numeric labels are sorted numerically
- Both domains are kept as an explicit variant so forests can decode codes
  back into the caller's original values
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence, Union

import numpy as np
import pandas as pd  # type: ignore[import-untyped]

from rerf.config_logging import get_logger
from rerf.exceptions import InvalidLabelType

logger = get_logger(__name__)


@dataclass(frozen=True)
class CategoricalLabels:
    """Sorted distinct labels of a categorical label vector."""

    values: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.values)


@dataclass(frozen=True, eq=False)
class NumericLabels:
    """Sorted distinct labels of a numeric label vector."""

    values: np.ndarray

    def __len__(self) -> int:
        return len(self.values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NumericLabels):
            return NotImplemented
        return np.array_equal(self.values, other.values)

    def __hash__(self) -> int:
        return hash(tuple(self.values.tolist()))


LabelDomain = Union[CategoricalLabels, NumericLabels]


@dataclass(frozen=True, eq=False)
class EncodedLabels:
    """Result of label encoding.

    Attributes:
        codes: Dense label codes in [1, K], one per row.
        domain: Sorted distinct original labels, in code order.
        class_counts: Cumulative per-class counts in code order.
    """

    codes: np.ndarray
    domain: LabelDomain
    class_counts: np.ndarray

    @property
    def n_classes(self) -> int:
        return len(self.domain)

    @property
    def labels(self) -> tuple[Any, ...]:
        """Original-domain labels in code order."""
        return tuple(self.domain.values)

    def decode(self, codes: Sequence[int] | np.ndarray | None = None) -> np.ndarray:
        """Map codes (default: the encoded training labels) back to labels."""
        codes = self.codes if codes is None else np.asarray(codes, dtype=np.int64)
        values = np.asarray(self.domain.values)
        return values[codes - 1]


def _as_series(y: Any) -> pd.Series:
    if isinstance(y, pd.Series):
        return y
    if isinstance(y, pd.DataFrame):
        if y.shape[1] != 1:
            raise InvalidLabelType(f"Labels must be one-dimensional, got shape {y.shape}")
        return y.iloc[:, 0]
    if isinstance(y, pd.Categorical):
        return pd.Series(y)
    array = np.asarray(y)
    if array.ndim != 1:
        raise InvalidLabelType(f"Labels must be one-dimensional, got shape {array.shape}")
    return pd.Series(array)


def resolve_label_domain(y: Any) -> tuple[LabelDomain, np.ndarray]:
    """Resolve the label vector into its categorical or numeric variant.

    Args:
        y: Label vector (sequence, ndarray, Series or Categorical).

    Returns:
        Tuple of (sorted label domain, labels as an ndarray of the domain's dtype).

    Raises:
        InvalidLabelType: If labels are neither categorical nor numeric.
    """
    series = _as_series(y)
    if series.empty:
        raise InvalidLabelType("Labels are empty")
    if series.isna().any():
        raise InvalidLabelType("Labels contain missing values")

    dtype = series.dtype
    if isinstance(dtype, pd.CategoricalDtype):
        series = series.astype(dtype.categories.dtype)
        dtype = series.dtype

    if pd.api.types.is_bool_dtype(dtype) or pd.api.types.is_complex_dtype(dtype):
        raise InvalidLabelType(f"Labels must be categorical or numeric, got dtype {dtype}")

    if pd.api.types.is_numeric_dtype(dtype):
        array = series.to_numpy()
        if array.dtype == object:
            array = array.astype(np.float64)
        return NumericLabels(np.unique(array)), array

    if pd.api.types.is_string_dtype(dtype) and all(isinstance(v, str) for v in series):
        values = np.asarray(sorted(series.unique()), dtype=str)
        return CategoricalLabels(tuple(values.tolist())), series.to_numpy(dtype=values.dtype)

    raise InvalidLabelType(f"Labels must be categorical or numeric, got dtype {dtype}")


def encode_labels(y: Any) -> EncodedLabels:
    """Encode labels into dense codes 1..K with cumulative class counts.

    Args:
        y: Label vector of length n.

    Returns:
        EncodedLabels with codes, sorted domain and cumulative counts.

    Raises:
        InvalidLabelType: If labels are neither categorical nor numeric.
    """
    domain, array = resolve_label_domain(y)
    codes = np.searchsorted(np.asarray(domain.values), array).astype(np.int64) + 1

    n_classes = len(domain)
    class_counts = np.cumsum(np.bincount(codes, minlength=n_classes + 1)[1:])

    logger.debug(
        "Encoded %d labels into %d %s classes",
        len(codes),
        n_classes,
        "categorical" if isinstance(domain, CategoricalLabels) else "numeric",
    )
    return EncodedLabels(codes=codes, domain=domain, class_counts=class_counts)
