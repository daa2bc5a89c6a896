"""Per-offset banks of linear cost regressors."""

from __future__ import annotations

import numpy as np


class LinearRegressorBank:
    """One linear regressor per class, for every offset that has been touched.

    Weights include a bias term and are created lazily on first use, so the
    number of offsets never has to be declared up front.
    """

    def __init__(self, num_actions: int, num_features: int, learning_rate: float = 0.5) -> None:
        if num_actions < 1:
            raise ValueError(f"num_actions must be >= 1, got {num_actions}")
        if learning_rate <= 0.0:
            raise ValueError(f"learning_rate must be > 0, got {learning_rate}")
        self.num_actions = num_actions
        self.num_features = num_features
        self.learning_rate = learning_rate
        self._weights: dict[int, np.ndarray] = {}

    @property
    def offsets(self) -> list[int]:
        return sorted(self._weights)

    def _matrix(self, offset: int) -> np.ndarray:
        if offset not in self._weights:
            self._weights[offset] = np.zeros((self.num_actions, self.num_features + 1))
        return self._weights[offset]

    @staticmethod
    def _augment(features: np.ndarray) -> np.ndarray:
        return np.append(np.asarray(features, dtype=float), 1.0)

    def scores(self, features: np.ndarray, offset: int) -> np.ndarray:
        return self._matrix(offset) @ self._augment(features)

    def best_action(self, features: np.ndarray, offset: int) -> int:
        """1-based class with the lowest predicted cost (ties go to the lowest index)."""
        return int(np.argmin(self.scores(features, offset))) + 1

    def update(
        self,
        features: np.ndarray,
        offset: int,
        action: int,
        target: float,
        importance: float = 1.0,
    ) -> None:
        """Importance-weighted squared-loss step for one class.

        Uses the implicit (closed-form) update so that large importance
        weights shrink the step instead of overshooting the target.
        """
        x = self._augment(features)
        row = self._matrix(offset)[action - 1]
        error = float(row @ x) - target
        scaled = self.learning_rate * importance
        step = scaled / (1.0 + scaled * float(x @ x))
        row -= step * error * x
