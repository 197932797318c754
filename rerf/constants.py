"""Default parameters for forest construction."""

from __future__ import annotations

# ============================================================================
# FOREST DEFAULTS
# ============================================================================

DEFAULT_MIN_PARENT: int = 6
DEFAULT_TREES: int = 100
DEFAULT_MAX_DEPTH: int = 0  # 0 = unbounded
DEFAULT_BAGGING: float = 0.2
DEFAULT_REPLACEMENT: bool = True
DEFAULT_STRATIFY: bool = False
DEFAULT_NUM_CORES: int = 0  # 0 = all cores but one
DEFAULT_SEED: int = 1

# ============================================================================
# PROJECTION DEFAULTS
# ============================================================================

DEFAULT_RANDOM_MATRIX: str = "binary"
RANDOM_MATRIX_KINDS: tuple[str, ...] = ("binary", "continuous", "rf", "poisson", "frc")

# ============================================================================
# PARALLELIZATION SETTINGS
# ============================================================================

# Backend for joblib parallelization
JOBLIB_BACKEND: str = "loky"  # 'loky' (default), 'multiprocessing', 'threading'

# Verbosity level for joblib (0=silent, 10=verbose)
JOBLIB_VERBOSITY: int = 0

# Printed once per completed tree when progress is enabled
PROGRESS_MARK: str = "|"
