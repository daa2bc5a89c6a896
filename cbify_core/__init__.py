"""cbify_core – exploration reductions from multiclass to bandit feedback."""
from cbify_core.estimation import estimate_cost, estimate_costs
from cbify_core.exceptions import CbifyError, InvariantViolationError
from cbify_core.learners import BaseLearner, CostRegressionLearner, CostSensitiveOneAgainstAll
from cbify_core.policies import (
    BagPolicy,
    BaseExplorationPolicy,
    CoverPolicy,
    EpsilonGreedyPolicy,
    TauFirstPolicy,
)
from cbify_core.rng import RandomSource
from cbify_core.state import InMemoryOptionStore, OptionStore
from cbify_core.types import CBClass, CBLabel, CSClass, CSLabel, MulticlassExample

__all__ = [
    "BagPolicy",
    "BaseExplorationPolicy",
    "BaseLearner",
    "CBClass",
    "CBLabel",
    "CSClass",
    "CSLabel",
    "CbifyError",
    "CostRegressionLearner",
    "CostSensitiveOneAgainstAll",
    "CoverPolicy",
    "EpsilonGreedyPolicy",
    "InMemoryOptionStore",
    "InvariantViolationError",
    "MulticlassExample",
    "OptionStore",
    "RandomSource",
    "TauFirstPolicy",
    "estimate_cost",
    "estimate_costs",
]
