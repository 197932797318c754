from __future__ import annotations

import sys
from pathlib import Path

# Add project root to Python path for direct execution.
_script_dir = Path(__file__).parent
# Find project root by looking for .git, pyproject.toml, or setup.py
_project_root = _script_dir.parent
while _project_root != _project_root.parent:
    if (_project_root / ".git").exists() or (_project_root / "pyproject.toml").exists() or (_project_root / "setup.py").exists():
        break
    _project_root = _project_root.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import pytest  # type: ignore
import numpy as np
import pandas as pd  # type: ignore

IRIS_LABELS = ("setosa", "versicolor", "virginica")


@pytest.fixture
def iris_like():
    """150 x 4 matrix with three well separated classes of 50 rows."""
    rng = np.random.default_rng(42)
    centers = np.array([
        [5.0, 3.4, 1.5, 0.2],
        [5.9, 2.8, 4.3, 1.3],
        [6.6, 3.0, 5.6, 2.0],
    ])
    X = np.vstack([center + rng.normal(0, 0.3, size=(50, 4)) for center in centers])
    y = np.repeat(np.array(IRIS_LABELS, dtype=object), 50)
    return X, y


@pytest.fixture
def small_numeric():
    """Small dataset with numeric labels."""
    rng = np.random.default_rng(7)
    X = rng.normal(size=(40, 3))
    y = np.where(X[:, 0] + X[:, 1] > 0, 2.0, 1.0)
    return X, y


@pytest.fixture
def iris_frame(iris_like):
    """Iris-like data as a DataFrame with a 'species' label column."""
    X, y = iris_like
    df = pd.DataFrame(X, columns=["sepal_length", "sepal_width", "petal_length", "petal_width"])
    df["species"] = y
    return df


@pytest.fixture
def cat_map_file(tmp_path):
    """Categorical map grouping the last 3 and last 2 columns of a 7-column matrix."""
    path = tmp_path / "cat_map.txt"
    path.write_text("3,4,5\n6,7\n", encoding="utf-8")
    return path


@pytest.fixture
def mixed_data():
    """Matrix with 2 numeric columns and two one-of-K encoded features (3 + 2 columns)."""
    rng = np.random.default_rng(3)
    n = 60
    numeric = rng.normal(size=(n, 2))
    first = np.eye(3)[rng.integers(0, 3, size=n)]
    second = np.eye(2)[rng.integers(0, 2, size=n)]
    X = np.hstack([numeric, first, second])
    y = np.where(numeric[:, 0] + first[:, 0] > 0.5, "yes", "no")
    return X, y
