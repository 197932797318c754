"""Random projection strategies and their resolution."""

from rerf.projection.categorical_map import load_categorical_map, parse_categorical_map
from rerf.projection.random_matrix import CategoricalProjection, NumericProjection, sample_projection
from rerf.projection.resolver import ResolvedProjection, resolve_projection

__all__ = [
    "CategoricalProjection",
    "NumericProjection",
    "ResolvedProjection",
    "load_categorical_map",
    "parse_categorical_map",
    "resolve_projection",
    "sample_projection",
]
