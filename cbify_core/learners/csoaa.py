"""Cost-sensitive one-against-all oracle."""

from __future__ import annotations

import math

from cbify_core.learners.base import BaseLearner
from cbify_core.learners.linear import LinearRegressorBank
from cbify_core.types import CSLabel, MulticlassExample


class CostSensitiveOneAgainstAll(BaseLearner):
    """Regresses the cost of every class and predicts the cheapest one.

    Classes whose cost is unknown (infinite) in the label are skipped on
    update.
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
        if not isinstance(label, CSLabel):
            raise TypeError(
                f"{type(self).__name__} needs a CSLabel override, got {type(label).__name__}"
            )
        for wc in label.costs:
            if math.isfinite(wc.cost):
                self.bank.update(example.features, offset, wc.class_index, wc.cost)
