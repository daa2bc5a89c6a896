"""Cover: a diverse ensemble of cost-sensitive oracles defines the policy."""

from __future__ import annotations

import math
from typing import Any, Iterator, Optional, Sequence

import numpy as np

from cbify_core.estimation import estimate_costs
from cbify_core.exceptions import InvariantViolationError
from cbify_core.learners.base import BaseLearner
from cbify_core.policies.base import BaseExplorationPolicy, override_label
from cbify_core.rng import RandomSource
from cbify_core.sampling import choose_action
from cbify_core.types import CBLabel, CSLabel, MulticlassExample, zero_one_loss

ORACLE_OFFSET = 2
DIVERSITY_WEIGHT = 0.125


def oracle_pseudo_costs(
    costs: Sequence[float],
    choices: Sequence[int],
    base_prob: float,
    additive_probability: float,
) -> Iterator[np.ndarray]:
    """Yield the adjusted cost vector for each oracle, in ascending order.

    The fold carries the mixture mass accumulated from earlier oracles'
    choices. Oracle ``i`` is charged extra for classes that oracles
    ``0..i-1`` already cover, which pushes it towards the others:

        pseudo[j] = costs[j] - 0.125 * (base_prob / (mass[j] / norm) + 1)
    """
    estimated = np.asarray(costs, dtype=float)
    mass = np.full(estimated.shape[0], base_prob)
    norm = base_prob * estimated.shape[0]
    for choice in choices:
        yield estimated - DIVERSITY_WEIGHT * (base_prob / (mass / norm) + 1.0)
        mass[choice - 1] += additive_probability
        norm += additive_probability


class CoverPolicy(BaseExplorationPolicy):
    """Online cover exploration.

    ``bags`` cost-sensitive oracles (at offsets ``2..bags+1`` of ``oracle``)
    each nominate an action. The played distribution mixes a decaying
    uniform floor ``epsilon / sqrt(t)`` with equal mass on every
    nomination. After the bandit learner is updated, each oracle is trained
    on doubly-robust cost estimates shifted to reward diversity.
    """

    name = "cover"

    def __init__(
        self,
        learner: BaseLearner,
        oracle: BaseLearner,
        *,
        num_actions: int,
        bags: int,
        epsilon: float = 0.05,
        rng: Optional[RandomSource] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(learner, num_actions=num_actions, rng=rng, **kwargs)
        if bags < 1:
            raise ValueError(f"bags must be >= 1, got {bags}")
        if not 0.0 < epsilon <= 1.0:
            raise ValueError(f"epsilon must be in (0, 1], got {epsilon}")
        self.oracle = oracle
        self.bags = bags
        self.epsilon = epsilon
        self.counter = 0
        self.distribution = np.zeros(num_actions)
        self.predictions = np.zeros(bags, dtype=np.int64)

    def predict_or_learn(self, example: MulticlassExample, is_learn: bool) -> int:
        self.counter += 1
        round_epsilon = self.epsilon / math.sqrt(self.counter)
        base_prob = round_epsilon / self.num_actions
        additive_probability = (1.0 - round_epsilon) / self.bags

        self.distribution[:] = base_prob
        with override_label(example, CSLabel.unknown(self.num_actions)):
            for i in range(self.bags):
                choice = self.oracle.predict(example, i + ORACLE_OFFSET)
                if not 1 <= choice <= self.num_actions:
                    raise InvariantViolationError(
                        f"cover: oracle {i} chose {choice} outside [1, {self.num_actions}]"
                    )
                self.distribution[choice - 1] += additive_probability
                self.predictions[i] = choice

        action = choose_action(self._rng.draw(), self.distribution)
        loss = zero_one_loss(example.label, action)

        if is_learn:
            record = self._record(loss, action, float(self.distribution[action - 1]))
            with override_label(example, CBLabel([record])):
                self.learner.learn(example)
                costs = estimate_costs(self.learner, example, record, self.num_actions)

            pseudo_costs = oracle_pseudo_costs(
                costs, self.predictions.tolist(), base_prob, additive_probability
            )
            for i, pseudo in enumerate(pseudo_costs):
                with override_label(example, CSLabel.from_costs(pseudo.tolist())):
                    self.oracle.learn(example, i + ORACLE_OFFSET)

        return self._report(example, action, loss)
