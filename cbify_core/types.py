"""Label and example containers passed between policies and learners."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, Union

import numpy as np


@dataclass(frozen=True)
class CBClass:
    """One piece of bandit feedback: the realized action and its propensity."""

    cost: float
    action: int
    probability: float


@dataclass
class CBLabel:
    """Contextual-bandit label; empty when only a prediction is wanted."""

    costs: list[CBClass] = field(default_factory=list)


@dataclass(frozen=True)
class CSClass:
    cost: float
    class_index: int  # 1-based


@dataclass
class CSLabel:
    """Cost-sensitive label holding one cost per class."""

    costs: list[CSClass] = field(default_factory=list)

    @classmethod
    def unknown(cls, num_actions: int) -> "CSLabel":
        """Label with every cost unknown, used when querying an oracle."""
        return cls([CSClass(cost=math.inf, class_index=j) for j in range(1, num_actions + 1)])

    @classmethod
    def from_costs(cls, costs: list[float]) -> "CSLabel":
        return cls([CSClass(cost=c, class_index=j) for j, c in enumerate(costs, start=1)])


Label = Union[CBLabel, CSLabel]


@dataclass
class MulticlassExample:
    """A fully labeled multiclass example flowing through a policy.

    ``label`` is the true class in ``[1, k]`` and is never modified.
    ``label_override`` is the slot a policy fills while it delegates to a
    learner; learners read their training signal from it.
    ``final_prediction`` and ``loss`` are output slots.
    """

    features: np.ndarray
    label: int
    label_override: Optional[Label] = None
    final_prediction: int = 0
    loss: float = 0.0


def zero_one_loss(label: int, prediction: int) -> float:
    """1.0 for a wrong prediction, 0.0 for the right one."""
    return 0.0 if label == prediction else 1.0
