"""Train a forest from a CSV or Parquet file and save it with joblib.

Usage:
    python -m rerf.main data/iris.csv --label species --trees 100 --output forest.joblib
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from rerf.config_logging import get_logger, setup_logging
from rerf.constants import (
    DEFAULT_BAGGING,
    DEFAULT_MAX_DEPTH,
    DEFAULT_MIN_PARENT,
    DEFAULT_NUM_CORES,
    DEFAULT_SEED,
    DEFAULT_TREES,
)
from rerf.forest import BuildConfig, Forest, build
from rerf.utils.io import load_dataframe, split_features_and_labels

logger = get_logger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for forest training."""
    parser = argparse.ArgumentParser(description="Train a Randomer Forest on a tabular dataset")
    parser.add_argument("data", type=Path, help="Training data (.csv or .parquet)")
    parser.add_argument("--label", required=True, help="Name of the label column")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("forest.joblib"),
        help="Where to save the forest (default: forest.joblib)",
    )
    parser.add_argument("--trees", type=int, default=DEFAULT_TREES, help=f"Number of trees (default: {DEFAULT_TREES})")
    parser.add_argument(
        "--min-parent",
        type=int,
        default=DEFAULT_MIN_PARENT,
        help=f"Minimum splittable node size (default: {DEFAULT_MIN_PARENT})",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help="Maximum tree depth, 0 = unbounded (default: 0)",
    )
    parser.add_argument(
        "--bagging",
        type=float,
        default=DEFAULT_BAGGING,
        help=f"Out-of-bag fraction without replacement (default: {DEFAULT_BAGGING})",
    )
    parser.add_argument("--no-replacement", action="store_true", help="Sample rows without replacement")
    parser.add_argument("--stratify", action="store_true", help="Keep class proportions when sampling")
    parser.add_argument("--rank-transform", action="store_true", help="Rank-transform each feature")
    parser.add_argument("--rotate", action="store_true", help="Randomly rotate the data for each tree")
    parser.add_argument("--store-oob", action="store_true", help="Keep out-of-bag indices")
    parser.add_argument("--store-ns", action="store_true", help="Keep per-node sample counts")
    parser.add_argument("--progress", action="store_true", help="Print a mark per completed tree")
    parser.add_argument(
        "--num-cores",
        type=int,
        default=DEFAULT_NUM_CORES,
        help="Workers, 0 = all cores but one (default: 0)",
    )
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED, help=f"Random seed (default: {DEFAULT_SEED})")
    parser.add_argument("--cat-map", type=Path, default=None, help="Categorical map file")
    return parser.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> BuildConfig:
    """Build the forest configuration from parsed CLI arguments."""
    return BuildConfig(
        min_parent=args.min_parent,
        trees=args.trees,
        max_depth=args.max_depth,
        bagging=args.bagging,
        replacement=not args.no_replacement,
        stratify=args.stratify,
        rank_transform=args.rank_transform,
        store_oob=args.store_oob,
        store_ns=args.store_ns,
        progress=args.progress,
        rotate=args.rotate,
        num_cores=args.num_cores,
        seed=args.seed,
        cat_map_source=args.cat_map,
    )


def train(args: argparse.Namespace) -> Forest:
    """Train a forest on the dataset named by the CLI arguments and save it."""
    logger.info("=" * 60)
    logger.info("RERF TRAIN")
    logger.info("=" * 60)

    df = load_dataframe(args.data)
    X, y = split_features_and_labels(df, args.label)
    logger.info("Loaded %d rows, %d features from %s", len(X), X.shape[1], args.data)

    config = config_from_args(args)
    logger.info("Parameters: %s", config.to_dict())

    forest = build(X, y, config)
    forest.save(args.output)
    logger.info("Labels: %s", list(forest.labels))
    return forest


def main(argv: Sequence[str] | None = None) -> None:
    """Run forest training from the command line."""
    args = parse_args(argv)
    setup_logging()
    train(args)


if __name__ == "__main__":
    main()
