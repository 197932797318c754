"""Bounded-worker dispatch of independent tree-building tasks.

- joblib-based fan-out, 'loky' backend by default (process-based, avoids GIL)
- Sequential execution in the calling process when a single worker is used
- Results always come back in task order, never in completion order
"""

from __future__ import annotations

from typing import Any, Callable, Sequence, TypeVar

from joblib import Parallel, cpu_count, delayed

from rerf.config_logging import get_logger
from rerf.constants import JOBLIB_BACKEND, JOBLIB_VERBOSITY

logger = get_logger(__name__)

R = TypeVar("R")


def resolve_n_workers(num_cores: int, n_tasks: int) -> int:
    """Get the number of workers to use for ``n_tasks`` tasks.

    Args:
        num_cores: Requested workers.
            - 0: Use all detected cores but one
            - Positive int: Use that many workers

    Returns:
        Number of workers, clamped to [1, n_tasks].
    """
    if num_cores < 0:
        raise ValueError(f"num_cores must be >= 0, got: {num_cores}")
    if n_tasks < 1:
        raise ValueError(f"n_tasks must be >= 1, got: {n_tasks}")

    n_workers = num_cores
    if n_workers == 0:
        n_workers = (cpu_count() or 1) - 1
    return max(1, min(n_workers, n_tasks))


def dispatch(
    task: Callable[..., R],
    task_args: Sequence[tuple[Any, ...]],
    n_workers: int,
    backend: str | None = None,
    verbose: int | None = None,
) -> list[R]:
    """Run ``task(*args)`` for every argument tuple on a bounded pool.

    The first failing task aborts the whole dispatch and its exception is
    re-raised to the caller.

    Args:
        task: Picklable callable run once per argument tuple.
        task_args: One argument tuple per task, in task-index order.
        n_workers: Pool size (1 = run sequentially in the calling process).
        backend: Joblib backend ('loky', 'multiprocessing', 'threading').
        verbose: Joblib verbosity level (0-10).

    Returns:
        Task results ordered by task index.
    """
    backend = backend or JOBLIB_BACKEND
    verbose = verbose if verbose is not None else JOBLIB_VERBOSITY
    args_list = list(task_args)

    if n_workers <= 1:
        logger.debug("Running %d tasks sequentially", len(args_list))
        return [task(*args) for args in args_list]

    logger.debug(
        "Running %d tasks on %d workers (backend=%s)", len(args_list), n_workers, backend
    )
    results = Parallel(n_jobs=n_workers, backend=backend, verbose=verbose)(
        delayed(task)(*args) for args in args_list
    )
    return list(results)
