"""Contextual-bandit base learner built on per-action cost regression."""

from __future__ import annotations

from cbify_core.learners.base import BaseLearner
from cbify_core.learners.linear import LinearRegressorBank
from cbify_core.types import CBLabel, MulticlassExample


class CostRegressionLearner(BaseLearner):
    """Learns one cost regressor per action from bandit feedback.

    Only the realized action's regressor moves on each update, weighted by
    the inverse of the probability it was played with. Prediction picks the
    action with the lowest regressed cost.
    """

    def __init__(self, num_actions: int, num_features: int, *, learning_rate: float = 0.5) -> None:
        self.bank = LinearRegressorBank(num_actions, num_features, learning_rate)

    def predict(self, example: MulticlassExample, offset: int = 0) -> int:
        example.final_prediction = self.bank.best_action(example.features, offset)
        return example.final_prediction

    def predict_cost(self, example: MulticlassExample, action: int, offset: int = 0) -> float:
        return float(self.bank.scores(example.features, offset)[action - 1])

    def learn(self, example: MulticlassExample, offset: int = 0) -> None:
        label = example.label_override
        if not isinstance(label, CBLabel):
            raise TypeError(
                f"{type(self).__name__} needs a CBLabel override, got {type(label).__name__}"
            )
        for observed in label.costs:
            self.bank.update(
                example.features,
                offset,
                observed.action,
                observed.cost,
                importance=1.0 / observed.probability,
            )
