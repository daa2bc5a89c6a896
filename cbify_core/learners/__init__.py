"""Learner interface and reference learners."""

from cbify_core.learners.base import BaseLearner
from cbify_core.learners.cost_regression import CostRegressionLearner
from cbify_core.learners.csoaa import CostSensitiveOneAgainstAll

__all__ = ["BaseLearner", "CostRegressionLearner", "CostSensitiveOneAgainstAll"]
