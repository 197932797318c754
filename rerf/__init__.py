"""Randomer Forest: ensembles of trees split on random sparse projections."""

from rerf.exceptions import CategoricalMapError, InvalidLabelType, RerfError
from rerf.forest import BuildConfig, Forest, ProjectionOptions, build

__version__ = "0.1.0"

__all__ = [
    "BuildConfig",
    "CategoricalMapError",
    "Forest",
    "InvalidLabelType",
    "ProjectionOptions",
    "RerfError",
    "build",
]
