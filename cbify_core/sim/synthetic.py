"""Synthetic multiclass stream for benchmarking exploration policies."""
from __future__ import annotations

from typing import List, Optional, Tuple

import numpy as np

from cbify_core.policies.base import BaseExplorationPolicy
from cbify_core.types import MulticlassExample


class MulticlassStream:
    """Gaussian clusters, one per class, with a hidden centroid for each.

    Parameters
    ----------
    num_actions : int
        Number of classes ``k``; labels are drawn uniformly from ``1..k``.
    num_features : int
        Dimension of the feature vectors.
    noise : float
        Standard deviation of the per-example noise around a centroid.
    seed : int or None
        RNG seed for reproducibility.
    """

    def __init__(
        self,
        num_actions: int,
        num_features: int = 5,
        *,
        noise: float = 0.5,
        seed: Optional[int] = None,
    ) -> None:
        self.num_actions = num_actions
        self.num_features = num_features
        self.noise = noise
        self._rng = np.random.default_rng(seed)
        self.centroids = self._rng.normal(0.0, 1.0, size=(num_actions, num_features))

    def sample(self) -> MulticlassExample:
        """Draw one fully labeled example."""
        label = int(self._rng.integers(1, self.num_actions + 1))
        features = self.centroids[label - 1] + self._rng.normal(0.0, self.noise, self.num_features)
        return MulticlassExample(features=features, label=label)


def run_simulation(
    policy: BaseExplorationPolicy,
    stream: MulticlassStream,
    n_rounds: int,
) -> Tuple[List[float], List[float]]:
    """Feed ``n_rounds`` examples to ``policy.learn``.

    Returns
    -------
    cumulative_losses : list[float]
        Cumulative zero-one loss of the reported actions after each round.
    average_losses : list[float]
        Running average loss after each round.
    """
    cumulative_loss = 0.0
    cumulative: List[float] = []
    averages: List[float] = []

    for t in range(1, n_rounds + 1):
        example = stream.sample()
        policy.learn(example)

        cumulative_loss += example.loss
        cumulative.append(cumulative_loss)
        averages.append(cumulative_loss / t)

    return cumulative, averages
