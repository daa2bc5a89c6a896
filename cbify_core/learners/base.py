"""Abstract interface of the learners driven by the exploration policies."""

from __future__ import annotations

from abc import ABC, abstractmethod

from cbify_core.types import MulticlassExample


class BaseLearner(ABC):
    """Incremental learner addressed by an integer offset.

    Several independent model instances can be multiplexed behind one
    learner object; ``offset`` selects which one a call goes to. The
    training signal is read from ``example.label_override`` and a prediction
    is written to ``example.final_prediction``.
    """

    # ---- abstract API -------------------------------------------------------

    @abstractmethod
    def predict(self, example: MulticlassExample, offset: int = 0) -> int:
        """Write the predicted action to ``example.final_prediction`` and return it."""

    @abstractmethod
    def learn(self, example: MulticlassExample, offset: int = 0) -> None:
        """Update the model at ``offset`` from ``example.label_override``."""

    # ---- optional helpers ---------------------------------------------------

    def predict_cost(self, example: MulticlassExample, action: int, offset: int = 0) -> float:
        """Predicted cost of ``action`` for this example.

        Learners without a cost regressor return 0.0, which reduces the
        doubly-robust estimate to plain inverse propensity scoring.
        """
        return 0.0
