"""Exploration policy implementations."""

from cbify_core.policies.bag import BagPolicy
from cbify_core.policies.base import BaseExplorationPolicy, override_label
from cbify_core.policies.cover import CoverPolicy
from cbify_core.policies.epsilon_greedy import EpsilonGreedyPolicy
from cbify_core.policies.tau_first import TauFirstPolicy

__all__ = [
    "BagPolicy",
    "BaseExplorationPolicy",
    "CoverPolicy",
    "EpsilonGreedyPolicy",
    "TauFirstPolicy",
    "override_label",
]
