"""Uniform random source shared by the exploration policies."""

from __future__ import annotations

from typing import Optional

import numpy as np


class RandomSource:
    """Thin wrapper over a numpy ``Generator``.

    Policies only need two things from randomness: a uniform draw in
    ``[0, 1)`` and, for bagging, a bootstrap replication count with mean 1.
    Subclass and override both to script draws in tests.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = np.random.default_rng(seed)

    def draw(self) -> float:
        return float(self._rng.random())

    def replication_count(self) -> int:
        """Online-bootstrap weight: how many times a replica sees this example."""
        return int(self._rng.poisson(1.0))
