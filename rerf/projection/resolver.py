"""Resolution of the projection strategy used by every tree of a build."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from rerf.config_logging import get_logger
from rerf.exceptions import CategoricalMapError
from rerf.forest.config import CatMapSource, ProjectionOptions, ProjectionStrategy
from rerf.projection.categorical_map import load_categorical_map, validate_categorical_map
from rerf.projection.random_matrix import CategoricalProjection, NumericProjection

logger = get_logger(__name__)

PROJECTION_KINDS: tuple[str, ...] = ("numeric", "categorical", "custom")


@dataclass(frozen=True)
class ResolvedProjection:
    """Projection strategy and options shared by all tree tasks.

    Attributes:
        kind: One of "numeric", "categorical" or "custom".
        strategy: Callable ``(options, rng) -> triplets``.
        options: Options passed to the strategy.
    """

    kind: str
    strategy: ProjectionStrategy
    options: ProjectionOptions

    def __post_init__(self) -> None:
        if self.kind not in PROJECTION_KINDS:
            raise ValueError(f"kind must be one of {PROJECTION_KINDS}, got: {self.kind!r}")


def resolve_projection(
    options: ProjectionOptions,
    strategy: Optional[ProjectionStrategy] = None,
    cat_map_source: Optional[CatMapSource] = None,
) -> ResolvedProjection:
    """Decide which projection strategy and options a build uses.

    - A caller strategy always wins, options unchanged
    - Otherwise a valid categorical map selects the categorical-aware
      strategy, with options extended by the parsed map
    - Otherwise the numeric strategy is used, options unchanged

    An unreadable or malformed map never fails the build: a warning is logged
    and the numeric strategy is used.

    Args:
        options: Projection options (defaults already filled in).
        strategy: Caller-supplied strategy, if any.
        cat_map_source: Path or text handle of the categorical map, if any.

    Returns:
        ResolvedProjection.
    """
    if strategy is not None:
        return ResolvedProjection(kind="custom", strategy=strategy, options=options)

    if cat_map_source is not None:
        try:
            cat_map = load_categorical_map(cat_map_source)
            validate_categorical_map(cat_map, options.p)
        except CategoricalMapError as exc:
            logger.warning("Ignoring categorical map, using numeric projections: %s", exc)
        else:
            logger.info("Using categorical projections (%d groups)", len(cat_map))
            return ResolvedProjection(
                kind="categorical",
                strategy=CategoricalProjection(),
                options=options.with_cat_map(cat_map),
            )

    return ResolvedProjection(kind="numeric", strategy=NumericProjection(), options=options)
