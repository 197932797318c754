"""Forest aggregate and its assembly from per-tree results."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional, Sequence

import joblib  # type: ignore[import-untyped]

from rerf.config_logging import get_logger
from rerf.forest.config import BuildConfig
from rerf.projection.resolver import ResolvedProjection
from rerf.tree.builder import Tree
from rerf.utils.io import ensure_output_dir

logger = get_logger(__name__)


@dataclass(frozen=True, eq=False)
class Forest:
    """Trained ensemble.

    Attributes:
        trees: Trees ordered by substream index.
        labels: Original-domain class labels in code order.
        config: Frozen build configuration, with the resolved projection
            strategy and options.
        projection_kind: "numeric", "categorical" or "custom".
    """

    trees: tuple[Tree, ...]
    labels: tuple[Any, ...]
    config: BuildConfig
    projection_kind: str

    @property
    def n_trees(self) -> int:
        return len(self.trees)

    @property
    def n_classes(self) -> int:
        return len(self.labels)

    def save(self, path: Path | str) -> None:
        """Save the forest to disk with joblib."""
        path = Path(path)
        ensure_output_dir(path)
        joblib.dump(self, path)
        logger.info("Forest saved to %s", path)

    @classmethod
    def load(cls, path: Path | str) -> "Forest":
        """Load a forest saved with :meth:`save`."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Forest file not found: {path}")
        forest = joblib.load(path)
        if not isinstance(forest, cls):
            raise TypeError(f"{path} does not contain a {cls.__name__}")
        return forest

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(trees={self.n_trees}, classes={self.n_classes}, "
            f"projection='{self.projection_kind}')"
        )


def _source_name(source: Any) -> Optional[str]:
    if source is None:
        return None
    if isinstance(source, (str, Path)):
        return str(source)
    return getattr(source, "name", None)


def assemble_forest(
    trees: Sequence[Tree],
    labels: Sequence[Any],
    config: BuildConfig,
    projection: ResolvedProjection,
) -> Forest:
    """Package ordered trees, labels and the frozen configuration.

    Args:
        trees: Trees ordered by task index.
        labels: Original-domain labels in code order.
        config: Build configuration.
        projection: Projection resolved for the build.

    Returns:
        Forest.
    """
    frozen = replace(
        config,
        projection=projection.strategy,
        projection_options=projection.options,
        cat_map_source=_source_name(config.cat_map_source),
    )
    return Forest(
        trees=tuple(trees),
        labels=tuple(labels),
        config=frozen,
        projection_kind=projection.kind,
    )
