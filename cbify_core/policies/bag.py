"""Bagging: randomize over an ensemble of bootstrapped learners."""

from __future__ import annotations

from typing import Any, Optional

import numpy as np

from cbify_core.exceptions import InvariantViolationError
from cbify_core.learners.base import BaseLearner
from cbify_core.policies.base import BaseExplorationPolicy, override_label
from cbify_core.rng import RandomSource
from cbify_core.sampling import choose_bag
from cbify_core.types import CBLabel, MulticlassExample, zero_one_loss


class BagPolicy(BaseExplorationPolicy):
    """Acts with one of ``bags`` learner replicas chosen uniformly.

    Every replica (offsets ``0..bags-1``) votes with its prediction; the
    realized action's propensity is estimated by the fraction of replicas
    that agree with it. Training follows the online bootstrap: replica ``i``
    sees the example ``Poisson(1)`` times.
    """

    name = "bag"

    def __init__(
        self,
        learner: BaseLearner,
        *,
        num_actions: int,
        bags: int,
        rng: Optional[RandomSource] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(learner, num_actions=num_actions, rng=rng, **kwargs)
        if bags < 1:
            raise ValueError(f"bags must be >= 1, got {bags}")
        self.bags = bags
        # votes[j] counts replicas predicting class j + 1 on the current example
        self.votes = np.zeros(num_actions, dtype=np.int64)

    def predict_or_learn(self, example: MulticlassExample, is_learn: bool) -> int:
        self.votes[:] = 0
        bag = choose_bag(self._rng.draw(), self.bags)

        label = CBLabel()
        with override_label(example, label):
            action = 0
            for i in range(self.bags):
                prediction = self.learner.predict(example, i)
                if not 1 <= prediction <= self.num_actions:
                    raise InvariantViolationError(
                        f"bag: replica {i} predicted {prediction} outside [1, {self.num_actions}]"
                    )
                self.votes[prediction - 1] += 1
                if i == bag:
                    action = prediction

            loss = zero_one_loss(example.label, action)
            if is_learn:
                probability = int(self.votes[action - 1]) / self.bags
                label.costs.append(self._record(loss, action, probability))
                for i in range(self.bags):
                    for _ in range(self._rng.replication_count()):
                        self.learner.learn(example, i)

        return self._report(example, action, loss)
