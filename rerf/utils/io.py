"""I/O utilities for training data and forest artifacts."""

from __future__ import annotations

from pathlib import Path

import pandas as pd  # type: ignore[import-untyped]


def ensure_output_dir(file_path: Path | str) -> None:
    """Ensure the output directory for a file exists."""
    Path(file_path).parent.mkdir(parents=True, exist_ok=True)


def load_dataframe(path: Path | str, validate_not_empty: bool = True) -> pd.DataFrame:
    """Load a DataFrame from CSV or Parquet.

    Args:
        path: Path to the file.
        validate_not_empty: If True, raise ValueError if DataFrame is empty.

    Returns:
        Loaded DataFrame.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Training data not found: {path}")

    if path.suffix == ".csv":
        df = pd.read_csv(path)
    elif path.suffix == ".parquet":
        df = pd.read_parquet(path)
    else:
        raise ValueError(f"Unsupported file format: {path.suffix}")

    if validate_not_empty and df.empty:
        raise ValueError(f"DataFrame loaded from {path} is empty")

    return df


def split_features_and_labels(
    df: pd.DataFrame, label_column: str
) -> tuple[pd.DataFrame, pd.Series]:
    """Split a DataFrame into the feature matrix and the label column.

    Args:
        df: Training data.
        label_column: Name of the label column.

    Returns:
        Tuple of (features, labels).
    """
    if label_column not in df.columns:
        raise ValueError(f"Missing label column: {label_column}")
    return df.drop(columns=[label_column]), df[label_column]
