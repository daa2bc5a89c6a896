"""Epsilon-greedy exploration with exact propensities."""

from __future__ import annotations

from typing import Any, Optional

from cbify_core.learners.base import BaseLearner
from cbify_core.policies.base import BaseExplorationPolicy, override_label
from cbify_core.rng import RandomSource
from cbify_core.sampling import uniform_action
from cbify_core.types import CBLabel, MulticlassExample, zero_one_loss


class EpsilonGreedyPolicy(BaseExplorationPolicy):
    """Classic epsilon-greedy.

    With probability ``1 - epsilon`` the learner's greedy action is played;
    otherwise a uniformly random action is. The greedy action can be reached
    through both branches, so its propensity is ``1 - epsilon + epsilon/k``;
    every other action has ``epsilon/k``.
    """

    name = "epsilon_greedy"

    def __init__(
        self,
        learner: BaseLearner,
        *,
        num_actions: int,
        epsilon: float = 0.05,
        rng: Optional[RandomSource] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(learner, num_actions=num_actions, rng=rng, **kwargs)
        if not 0.0 <= epsilon <= 1.0:
            raise ValueError(f"epsilon must be in [0, 1], got {epsilon}")
        self.epsilon = epsilon

    def greedy_probability(self) -> float:
        return 1.0 - self.epsilon + self.epsilon / self.num_actions

    def predict_or_learn(self, example: MulticlassExample, is_learn: bool) -> int:
        label = CBLabel()
        with override_label(example, label):
            greedy = self.learner.predict(example)

            base_prob = self.epsilon / self.num_actions
            if self._rng.draw() < 1.0 - self.epsilon:
                action, probability = greedy, self.greedy_probability()
            else:
                action = uniform_action(self._rng.draw(), self.num_actions)
                probability = self.greedy_probability() if action == greedy else base_prob

            loss = zero_one_loss(example.label, action)
            label.costs.append(self._record(loss, action, probability))
            if is_learn:
                self.learner.learn(example)

        return self._report(example, action, loss)
