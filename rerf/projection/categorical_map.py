"""Loading of categorical grouping maps.

A map source is a text file (or open text handle) where each non-blank line
lists the comma-separated 1-based column indices of the one-of-K encoded
columns that together represent one original categorical feature:

    5,6,7
    8,9

Numeric columns must come first; every listed column is categorical.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from rerf.config_logging import get_logger
from rerf.exceptions import CategoricalMapError
from rerf.forest.config import CategoricalMap, CatMapSource

logger = get_logger(__name__)


def _read_lines(source: CatMapSource) -> list[str]:
    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.is_file():
            raise CategoricalMapError(f"Categorical map file not found: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read().splitlines()
        except (OSError, UnicodeDecodeError) as exc:
            raise CategoricalMapError(f"Cannot read categorical map {path}: {exc}") from exc

    read = getattr(source, "read", None)
    if read is None:
        raise CategoricalMapError(f"Unsupported categorical map source: {type(source).__name__}")
    try:
        return str(read()).splitlines()
    except (OSError, ValueError) as exc:
        raise CategoricalMapError(f"Cannot read categorical map: {exc}") from exc


def parse_categorical_map(lines: Iterable[str]) -> CategoricalMap:
    """Parse map lines into 0-based column groups.

    Args:
        lines: Lines of the map source.

    Returns:
        One tuple of 0-based column indices per categorical feature.

    Raises:
        CategoricalMapError: If a line is malformed or columns repeat.
    """
    groups: list[tuple[int, ...]] = []
    seen: set[int] = set()
    for lineno, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            columns = [int(token) for token in line.split(",")]
        except ValueError as exc:
            raise CategoricalMapError(f"Line {lineno}: not a list of integers: {line!r}") from exc
        if any(col < 1 for col in columns):
            raise CategoricalMapError(f"Line {lineno}: column indices are 1-based")
        group = tuple(col - 1 for col in columns)
        if seen.intersection(group) or len(set(group)) != len(group):
            raise CategoricalMapError(f"Line {lineno}: column listed more than once")
        seen.update(group)
        groups.append(group)

    if not groups:
        raise CategoricalMapError("Categorical map is empty")
    return tuple(groups)


def load_categorical_map(source: CatMapSource) -> CategoricalMap:
    """Load a categorical grouping map from a path or text handle.

    Raises:
        CategoricalMapError: If the source cannot be read or parsed.
    """
    cat_map = parse_categorical_map(_read_lines(source))
    logger.debug("Loaded categorical map with %d groups", len(cat_map))
    return cat_map


def validate_categorical_map(cat_map: CategoricalMap, p: int) -> None:
    """Check a map against a matrix with ``p`` columns.

    Raises:
        CategoricalMapError: If a column is out of range or categorical
            columns do not follow every numeric column.
    """
    columns = sorted(col for group in cat_map for col in group)
    if columns[-1] >= p:
        raise CategoricalMapError(f"Column {columns[-1] + 1} exceeds the {p} columns of X")
    if columns != list(range(columns[0], p)):
        raise CategoricalMapError("Categorical columns must be the trailing columns of X")


def numeric_column_count(cat_map: CategoricalMap) -> int:
    """Number of leading numeric columns implied by a map."""
    return min(col for group in cat_map for col in group)
