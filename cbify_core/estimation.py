"""Unbiased cost estimates from a single piece of bandit feedback."""

from __future__ import annotations

from cbify_core.learners.base import BaseLearner
from cbify_core.types import CBClass, MulticlassExample


def estimate_cost(base_cost: float, observed: CBClass, action: int) -> float:
    r"""Doubly-robust cost estimate for ``action``.

    For the observed action the regressor's ``base_cost`` is corrected by the
    inverse-propensity term:

    .. math::

        \hat{c}(a) = b(a) + \frac{\ell - b(a)}{p}

    Every other action keeps ``base_cost`` as is. The expectation over the
    randomized action equals the true cost whenever ``observed.probability``
    is the exact sampling probability.
    """
    if observed.action == action:
        return base_cost + (observed.cost - base_cost) / observed.probability
    return base_cost


def estimate_costs(
    learner: BaseLearner,
    example: MulticlassExample,
    observed: CBClass,
    num_actions: int,
    offset: int = 0,
) -> list[float]:
    """Return the estimated cost of every class ``1..num_actions``."""
    return [
        estimate_cost(learner.predict_cost(example, action, offset), observed, action)
        for action in range(1, num_actions + 1)
    ]
