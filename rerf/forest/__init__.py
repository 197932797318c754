"""Forest construction: labels, substreams, dispatch and assembly."""

from rerf.forest.assembler import Forest, assemble_forest
from rerf.forest.build import TreeTask, build
from rerf.forest.config import BuildConfig, ProjectionOptions, default_projection_options
from rerf.forest.dispatch import dispatch, resolve_n_workers
from rerf.forest.labels import (
    CategoricalLabels,
    EncodedLabels,
    NumericLabels,
    encode_labels,
    resolve_label_domain,
)
from rerf.forest.rng import RNGStreamManager
from rerf.forest.stratify import build_class_index

__all__ = [
    "BuildConfig",
    "CategoricalLabels",
    "EncodedLabels",
    "Forest",
    "NumericLabels",
    "ProjectionOptions",
    "RNGStreamManager",
    "TreeTask",
    "assemble_forest",
    "build",
    "build_class_index",
    "default_projection_options",
    "dispatch",
    "encode_labels",
    "resolve_label_domain",
    "resolve_n_workers",
]
