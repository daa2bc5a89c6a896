"""Tau-first: explore uniformly for ``tau`` rounds, then exploit."""

from __future__ import annotations

from typing import Any, Optional

from cbify_core.learners.base import BaseLearner
from cbify_core.policies.base import BaseExplorationPolicy, override_label
from cbify_core.rng import RandomSource
from cbify_core.sampling import uniform_action
from cbify_core.types import CBLabel, MulticlassExample, zero_one_loss


class TauFirstPolicy(BaseExplorationPolicy):
    """Pure exploration for the first ``tau`` training calls.

    Each of those calls plays a uniformly random action and trains the
    learner with probability ``1/k``. Once the budget is spent (and on every
    prediction-only call) the learner's own prediction is reported and no
    training happens.
    """

    name = "first"

    def __init__(
        self,
        learner: BaseLearner,
        *,
        num_actions: int,
        tau: int,
        rng: Optional[RandomSource] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(learner, num_actions=num_actions, rng=rng, **kwargs)
        if tau < 0:
            raise ValueError(f"tau must be >= 0, got {tau}")
        self.tau = tau

    def predict_or_learn(self, example: MulticlassExample, is_learn: bool) -> int:
        if is_learn and self.tau > 0:
            action = uniform_action(self._rng.draw(), self.num_actions)
            loss = zero_one_loss(example.label, action)
            self.tau -= 1
            record = self._record(loss, action, 1.0 / self.num_actions)
            with override_label(example, CBLabel([record])):
                self.learner.learn(example)
            return self._report(example, action, loss)

        with override_label(example, CBLabel()):
            action = self.learner.predict(example)
        return self._report(example, action, zero_one_loss(example.label, action))
