"""Reproducible per-tree random substreams.

One seed yields one independent generator per tree. The table is built once,
before any task is dispatched, so tree i always draws from the same stream
whatever the number of workers or the order in which trees complete.
"""

from __future__ import annotations

import numpy as np

from rerf.config_logging import get_logger

logger = get_logger(__name__)


class RNGStreamManager:
    """Owns the seed and the substream table of a single build.

    Example:
        >>> streams = RNGStreamManager(seed=1).spawn(3)
        >>> len(streams)
        3
    """

    def __init__(self, seed: int) -> None:
        self.seed = seed
        self._root: np.random.SeedSequence | None = None
        self._streams: list[np.random.Generator] = []

    def reset(self) -> None:
        """Reset the root sequence from the seed and drop spawned streams."""
        self._root = np.random.SeedSequence(self.seed)
        self._streams = []

    def spawn(self, n_streams: int) -> list[np.random.Generator]:
        """Derive ``n_streams`` independent generators from the seed.

        The root sequence is reset first, so calling spawn twice with the same
        arguments yields identical tables.

        Args:
            n_streams: Number of substreams (one per tree).

        Returns:
            Generators ordered by stream index.
        """
        if n_streams < 1:
            raise ValueError(f"n_streams must be >= 1, got: {n_streams}")
        self.reset()
        assert self._root is not None
        self._streams = [
            np.random.Generator(np.random.PCG64(child))
            for child in self._root.spawn(n_streams)
        ]
        logger.debug("Spawned %d substreams from seed %d", n_streams, self.seed)
        return list(self._streams)

    @property
    def streams(self) -> list[np.random.Generator]:
        return list(self._streams)

    def __len__(self) -> int:
        return len(self._streams)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(seed={self.seed}, streams={len(self._streams)})"
