"""Abstract base class shared by every exploration policy."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from cbify_core.exceptions import InvariantViolationError
from cbify_core.learners.base import BaseLearner
from cbify_core.rng import RandomSource
from cbify_core.types import CBClass, Label, MulticlassExample

logger = logging.getLogger(__name__)


@contextmanager
def override_label(example: MulticlassExample, label: Optional[Label]) -> Iterator[MulticlassExample]:
    """Substitute ``example.label_override`` for the duration of the block.

    Whatever was in the slot before is put back on every exit path.
    """
    saved = example.label_override
    example.label_override = label
    try:
        yield example
    finally:
        example.label_override = saved


class BaseExplorationPolicy(ABC):
    """Common interface for the exploration reductions.

    A policy turns a fully labeled multiclass example into bandit feedback
    for its ``learner``: it picks an action, reveals only that action's loss
    together with the probability it was picked with, and reports the
    action. ``predict`` never trains; ``learn`` trains according to the
    policy's rules. Both fill ``example.final_prediction`` and
    ``example.loss``.
    """

    name: str = "base"  # human-friendly label, overridden by subclasses

    def __init__(
        self,
        learner: BaseLearner,
        *,
        num_actions: int,
        rng: Optional[RandomSource] = None,
        **kwargs: Any,
    ) -> None:
        if num_actions < 2:
            raise ValueError(f"num_actions must be >= 2, got {num_actions}")
        self.learner = learner
        self.num_actions = num_actions
        self._rng = rng if rng is not None else RandomSource(kwargs.get("seed"))

    # ---- abstract API -------------------------------------------------------

    @abstractmethod
    def predict_or_learn(self, example: MulticlassExample, is_learn: bool) -> int:
        """Process one example and return the reported action."""

    # ---- entry points -------------------------------------------------------

    def predict(self, example: MulticlassExample) -> int:
        return self.predict_or_learn(example, is_learn=False)

    def learn(self, example: MulticlassExample) -> int:
        return self.predict_or_learn(example, is_learn=True)

    # ---- shared helpers -----------------------------------------------------

    def _record(self, loss: float, action: int, probability: float) -> CBClass:
        """Build a bandit cost record, refusing ones that would bias learning."""
        if not 1 <= action <= self.num_actions:
            raise InvariantViolationError(
                f"{self.name}: action {action} outside [1, {self.num_actions}]"
            )
        if probability <= 0.0:
            raise InvariantViolationError(
                f"{self.name}: action {action} realized with probability {probability}"
            )
        return CBClass(cost=loss, action=action, probability=probability)

    @staticmethod
    def _report(example: MulticlassExample, action: int, loss: float) -> int:
        example.final_prediction = action
        example.loss = loss
        logger.debug("label=%d action=%d loss=%.1f", example.label, action, loss)
        return action
