"""Behavioral tests for the four exploration policies."""
from __future__ import annotations

import copy
import unittest
from typing import Iterable, Optional

import numpy as np

from cbify_core.exceptions import InvariantViolationError
from cbify_core.learners.base import BaseLearner
from cbify_core.policies.bag import BagPolicy
from cbify_core.policies.base import override_label
from cbify_core.policies.cover import CoverPolicy, oracle_pseudo_costs
from cbify_core.policies.epsilon_greedy import EpsilonGreedyPolicy
from cbify_core.policies.tau_first import TauFirstPolicy
from cbify_core.rng import RandomSource
from cbify_core.types import CBClass, CBLabel, CSLabel, Label, MulticlassExample


class ScriptedRandomSource(RandomSource):
    """Replays fixed uniform draws and replication counts."""

    def __init__(self, draws: Iterable[float], replications: Iterable[int] = ()) -> None:
        super().__init__(seed=0)
        self._draws = list(draws)
        self._replications = list(replications)

    def draw(self) -> float:
        return self._draws.pop(0)

    def replication_count(self) -> int:
        return self._replications.pop(0)


class RecordingLearner(BaseLearner):
    """Predicts a fixed action per offset and records every call."""

    def __init__(self, predictions: Optional[dict[int, int]] = None, default: int = 1) -> None:
        self.predictions = predictions or {}
        self.default = default
        self.predicted: list[tuple[int, Optional[Label]]] = []
        self.learned: list[tuple[int, Optional[Label]]] = []

    def predict(self, example: MulticlassExample, offset: int = 0) -> int:
        self.predicted.append((offset, copy.deepcopy(example.label_override)))
        example.final_prediction = self.predictions.get(offset, self.default)
        return example.final_prediction

    def learn(self, example: MulticlassExample, offset: int = 0) -> None:
        self.learned.append((offset, copy.deepcopy(example.label_override)))


class FailingLearner(RecordingLearner):
    def learn(self, example: MulticlassExample, offset: int = 0) -> None:
        raise RuntimeError("learner exploded")


def make_example(label: int) -> MulticlassExample:
    return MulticlassExample(features=np.zeros(3), label=label)


# ---- label override ---------------------------------------------------------


class TestOverrideLabel(unittest.TestCase):
    def test_restores_previous_label(self) -> None:
        example = make_example(1)
        original = CSLabel.unknown(2)
        example.label_override = original
        with override_label(example, CBLabel()):
            self.assertIsInstance(example.label_override, CBLabel)
        self.assertIs(example.label_override, original)

    def test_restores_on_exception(self) -> None:
        example = make_example(1)
        with self.assertRaises(RuntimeError):
            with override_label(example, CBLabel()):
                raise RuntimeError("boom")
        self.assertIsNone(example.label_override)

    def test_policy_restores_label_when_learner_fails(self) -> None:
        policy = TauFirstPolicy(
            FailingLearner(), num_actions=3, tau=1, rng=ScriptedRandomSource([0.5])
        )
        example = make_example(1)
        with self.assertRaises(RuntimeError):
            policy.learn(example)
        self.assertIsNone(example.label_override)


# ---- record validation ----------------------------------------------------------


class TestRecord(unittest.TestCase):
    def setUp(self) -> None:
        self.policy = EpsilonGreedyPolicy(RecordingLearner(), num_actions=3, epsilon=0.1, seed=0)

    def test_valid_record(self) -> None:
        self.assertEqual(self.policy._record(1.0, 3, 0.5), CBClass(cost=1.0, action=3, probability=0.5))

    def test_zero_probability_is_fatal(self) -> None:
        with self.assertRaises(InvariantViolationError):
            self.policy._record(1.0, 1, 0.0)

    def test_negative_probability_is_fatal(self) -> None:
        with self.assertRaises(InvariantViolationError):
            self.policy._record(0.0, 2, -0.25)

    def test_action_outside_range_is_fatal(self) -> None:
        with self.assertRaises(InvariantViolationError):
            self.policy._record(1.0, 0, 0.5)
        with self.assertRaises(InvariantViolationError):
            self.policy._record(1.0, 4, 0.5)


# ---- tau-first ---------------------------------------------------------------


class TestTauFirst(unittest.TestCase):
    def test_forced_draw_scenario(self) -> None:
        learner = RecordingLearner(default=2)
        policy = TauFirstPolicy(
            learner, num_actions=3, tau=1, rng=ScriptedRandomSource([0.9])
        )
        example = make_example(1)

        action = policy.learn(example)

        self.assertEqual(action, 3)
        self.assertEqual(example.final_prediction, 3)
        self.assertEqual(example.loss, 1.0)
        self.assertEqual(policy.tau, 0)
        self.assertEqual(len(learner.learned), 1)
        offset, label = learner.learned[0]
        self.assertEqual(offset, 0)
        self.assertEqual(label, CBLabel([CBClass(cost=1.0, action=3, probability=1.0 / 3)]))
        self.assertIsNone(example.label_override)

    def test_exhausted_budget_reports_learner_prediction_without_training(self) -> None:
        learner = RecordingLearner(default=2)
        policy = TauFirstPolicy(
            learner, num_actions=3, tau=1, rng=ScriptedRandomSource([0.1])
        )
        policy.learn(make_example(1))

        example = make_example(2)
        action = policy.learn(example)

        self.assertEqual(action, 2)
        self.assertEqual(example.loss, 0.0)
        self.assertEqual(policy.tau, 0)
        self.assertEqual(len(learner.learned), 1)
        # Predictions are made under an empty bandit label.
        self.assertEqual(learner.predicted[-1], (0, CBLabel()))

    def test_predict_does_not_spend_budget(self) -> None:
        learner = RecordingLearner(default=1)
        policy = TauFirstPolicy(learner, num_actions=3, tau=2, rng=ScriptedRandomSource([]))
        example = make_example(3)
        self.assertEqual(policy.predict(example), 1)
        self.assertEqual(example.loss, 1.0)
        self.assertEqual(policy.tau, 2)
        self.assertEqual(learner.learned, [])

    def test_first_tau_calls_explore_uniformly(self) -> None:
        learner = RecordingLearner(default=1)
        draws = [0.0, 0.4, 0.8, 0.99]
        policy = TauFirstPolicy(learner, num_actions=4, tau=4, rng=ScriptedRandomSource(draws))
        actions = [policy.learn(make_example(1)) for _ in draws]
        self.assertEqual(actions, [1, 2, 4, 4])
        self.assertTrue(all(lbl.costs[0].probability == 0.25 for _, lbl in learner.learned))
        self.assertEqual(policy.tau, 0)
        # Budget never goes negative.
        policy.learn(make_example(1))
        self.assertEqual(policy.tau, 0)

    def test_negative_tau_rejected(self) -> None:
        with self.assertRaises(ValueError):
            TauFirstPolicy(RecordingLearner(), num_actions=3, tau=-1)


# ---- epsilon-greedy -------------------------------------------------------------


class TestEpsilonGreedy(unittest.TestCase):
    def test_exploit_branch_scenario(self) -> None:
        learner = RecordingLearner(default=2)
        policy = EpsilonGreedyPolicy(
            learner, num_actions=4, epsilon=0.1, rng=ScriptedRandomSource([0.5])
        )
        example = make_example(2)

        action = policy.learn(example)

        self.assertEqual(action, 2)
        self.assertEqual(example.loss, 0.0)
        _, label = learner.learned[0]
        self.assertEqual(label.costs[0].action, 2)
        self.assertEqual(label.costs[0].cost, 0.0)
        self.assertAlmostEqual(label.costs[0].probability, 0.925)

    def test_explore_branch_other_action_gets_base_probability(self) -> None:
        learner = RecordingLearner(default=2)
        policy = EpsilonGreedyPolicy(
            learner, num_actions=4, epsilon=0.1, rng=ScriptedRandomSource([0.95, 0.1])
        )
        example = make_example(2)
        self.assertEqual(policy.learn(example), 1)
        self.assertEqual(example.loss, 1.0)
        self.assertAlmostEqual(learner.learned[0][1].costs[0].probability, 0.025)

    def test_explore_branch_hitting_greedy_gets_combined_probability(self) -> None:
        learner = RecordingLearner(default=2)
        policy = EpsilonGreedyPolicy(
            learner, num_actions=4, epsilon=0.1, rng=ScriptedRandomSource([0.95, 0.3])
        )
        self.assertEqual(policy.learn(make_example(2)), 2)
        self.assertAlmostEqual(learner.learned[0][1].costs[0].probability, 0.925)

    def test_predict_never_trains(self) -> None:
        learner = RecordingLearner(default=2)
        policy = EpsilonGreedyPolicy(learner, num_actions=4, epsilon=0.1, seed=3)
        for _ in range(20):
            policy.predict(make_example(1))
        self.assertEqual(learner.learned, [])

    def test_zero_epsilon_is_pure_greedy(self) -> None:
        learner = RecordingLearner(default=3)
        policy = EpsilonGreedyPolicy(learner, num_actions=3, epsilon=0.0, seed=1)
        for _ in range(20):
            self.assertEqual(policy.learn(make_example(3)), 3)
        self.assertTrue(all(lbl.costs[0].probability == 1.0 for _, lbl in learner.learned))

    def test_records_are_always_valid(self) -> None:
        learner = RecordingLearner(default=1)
        policy = EpsilonGreedyPolicy(learner, num_actions=5, epsilon=0.5, seed=11)
        for label in range(1, 6):
            for _ in range(40):
                policy.learn(make_example(label))
        for _, lbl in learner.learned:
            record = lbl.costs[0]
            self.assertGreater(record.probability, 0.0)
            self.assertTrue(1 <= record.action <= 5)

    def test_invalid_epsilon_raises(self) -> None:
        with self.assertRaises(ValueError):
            EpsilonGreedyPolicy(RecordingLearner(), num_actions=3, epsilon=1.5)
        with self.assertRaises(ValueError):
            EpsilonGreedyPolicy(RecordingLearner(), num_actions=1, epsilon=0.1)


# ---- bagging --------------------------------------------------------------------


class TestBag(unittest.TestCase):
    def test_vote_scenario(self) -> None:
        learner = RecordingLearner({0: 1, 1: 2, 2: 1})
        policy = BagPolicy(
            learner,
            num_actions=3,
            bags=3,
            rng=ScriptedRandomSource([0.1], replications=[1, 0, 2]),
        )
        example = make_example(1)

        action = policy.learn(example)

        self.assertEqual(action, 1)
        self.assertEqual(example.loss, 0.0)
        self.assertEqual(policy.votes.tolist(), [2, 1, 0])
        self.assertEqual(int(policy.votes.sum()), 3)
        self.assertEqual([offset for offset, _ in learner.learned], [0, 2, 2])
        for _, label in learner.learned:
            self.assertAlmostEqual(label.costs[0].probability, 2.0 / 3.0)
            self.assertEqual(label.costs[0].action, 1)

    def test_acting_bag_selects_realized_action(self) -> None:
        learner = RecordingLearner({0: 1, 1: 2, 2: 1})
        policy = BagPolicy(
            learner, num_actions=3, bags=3, rng=ScriptedRandomSource([0.5], replications=[1, 1, 1])
        )
        example = make_example(1)
        self.assertEqual(policy.learn(example), 2)
        self.assertEqual(example.loss, 1.0)
        self.assertAlmostEqual(learner.learned[0][1].costs[0].probability, 1.0 / 3.0)

    def test_predict_queries_every_replica_without_training(self) -> None:
        learner = RecordingLearner({0: 3, 1: 3, 2: 3, 3: 3})
        policy = BagPolicy(learner, num_actions=3, bags=4, rng=ScriptedRandomSource([0.99]))
        self.assertEqual(policy.predict(make_example(3)), 3)
        self.assertEqual([offset for offset, _ in learner.predicted], [0, 1, 2, 3])
        self.assertEqual(learner.learned, [])

    def test_votes_reset_between_examples(self) -> None:
        learner = RecordingLearner({0: 1, 1: 2})
        policy = BagPolicy(learner, num_actions=2, bags=2, seed=5)
        for _ in range(10):
            policy.predict(make_example(1))
            self.assertEqual(int(policy.votes.sum()), 2)

    def test_out_of_range_prediction_is_fatal(self) -> None:
        learner = RecordingLearner({0: 4})
        policy = BagPolicy(learner, num_actions=3, bags=1, rng=ScriptedRandomSource([0.0]))
        with self.assertRaises(InvariantViolationError):
            policy.learn(make_example(1))

    def test_invalid_bags_raises(self) -> None:
        with self.assertRaises(ValueError):
            BagPolicy(RecordingLearner(), num_actions=3, bags=0)


# ---- cover ------------------------------------------------------------------------


class TestOraclePseudoCosts(unittest.TestCase):
    def test_sequential_diversity_adjustment(self) -> None:
        adjusted = list(oracle_pseudo_costs([0.0, 10.0, 0.0], [1, 1], 0.1, 0.35))
        self.assertEqual(len(adjusted), 2)
        # First oracle sees the uniform floor only: penalty 0.125 * (3 * 0.1 + 1).
        np.testing.assert_allclose(adjusted[0], [-0.1625, 9.8375, -0.1625])
        # Second oracle sees the first oracle's mass on class 1.
        norm = 0.3 + 0.35
        expected = [
            0.0 - 0.125 * (0.1 / (0.45 / norm) + 1.0),
            10.0 - 0.125 * (0.1 / (0.1 / norm) + 1.0),
            0.0 - 0.125 * (0.1 / (0.1 / norm) + 1.0),
        ]
        np.testing.assert_allclose(adjusted[1], expected)

    def test_no_oracles_yields_nothing(self) -> None:
        self.assertEqual(list(oracle_pseudo_costs([0.0, 1.0], [], 0.1, 0.5)), [])


class TestCover(unittest.TestCase):
    def make_policy(self, draws: list[float], oracle_choices: dict[int, int]) -> tuple[
        CoverPolicy, RecordingLearner, RecordingLearner
    ]:
        learner = RecordingLearner(default=1)
        oracle = RecordingLearner(oracle_choices)
        policy = CoverPolicy(
            learner,
            oracle,
            num_actions=3,
            bags=2,
            epsilon=0.3,
            rng=ScriptedRandomSource(draws),
        )
        return policy, learner, oracle

    def test_mixture_and_sampling(self) -> None:
        policy, learner, oracle = self.make_policy([0.85], {2: 1, 3: 1})
        example = make_example(1)

        action = policy.learn(example)

        np.testing.assert_allclose(policy.distribution, [0.8, 0.1, 0.1])
        self.assertAlmostEqual(float(policy.distribution.sum()), 1.0)
        self.assertEqual(action, 2)
        self.assertEqual(example.loss, 1.0)
        self.assertEqual(policy.predictions.tolist(), [1, 1])

        # Oracles are queried at offsets 2..B+1 with unknown costs.
        self.assertEqual([offset for offset, _ in oracle.predicted], [2, 3])
        self.assertIsInstance(oracle.predicted[0][1], CSLabel)

        # Bandit learner trained once with the sampled action's mixture mass.
        self.assertEqual(len(learner.learned), 1)
        offset, label = learner.learned[0]
        self.assertEqual(offset, 0)
        self.assertEqual(label.costs[0].action, 2)
        self.assertAlmostEqual(label.costs[0].probability, 0.1)

    def test_oracles_trained_in_ascending_order_with_adjusted_costs(self) -> None:
        policy, _, oracle = self.make_policy([0.85], {2: 1, 3: 1})
        policy.learn(make_example(1))

        self.assertEqual([offset for offset, _ in oracle.learned], [2, 3])
        # Base learner predicts zero cost, so estimates are [0, 1/0.1, 0].
        expected = list(oracle_pseudo_costs([0.0, 10.0, 0.0], [1, 1], 0.1, 0.35))
        for (_, label), costs in zip(oracle.learned, expected):
            self.assertIsInstance(label, CSLabel)
            self.assertEqual([wc.class_index for wc in label.costs], [1, 2, 3])
            np.testing.assert_allclose([wc.cost for wc in label.costs], costs)

    def test_predict_advances_counter_without_training(self) -> None:
        policy, learner, oracle = self.make_policy([0.1, 0.1, 0.1, 0.1], {2: 2, 3: 3})
        for _ in range(4):
            policy.predict(make_example(1))
        self.assertEqual(policy.counter, 4)
        # epsilon / sqrt(4) spread over 3 classes
        self.assertAlmostEqual(float(policy.distribution[0]), 0.15 / 3)
        self.assertEqual(learner.learned, [])
        self.assertEqual(oracle.learned, [])

    def test_distribution_sums_to_one(self) -> None:
        rng = np.random.default_rng(0)
        choices = {i + 2: int(rng.integers(1, 6)) for i in range(7)}
        learner = RecordingLearner(default=1)
        policy = CoverPolicy(
            learner, RecordingLearner(choices), num_actions=5, bags=7, epsilon=0.2, seed=9
        )
        for label in range(1, 6):
            policy.learn(make_example(label))
            self.assertAlmostEqual(float(policy.distribution.sum()), 1.0)
        for _, lbl in learner.learned:
            self.assertGreater(lbl.costs[0].probability, 0.0)

    def test_invalid_epsilon_raises(self) -> None:
        with self.assertRaises(ValueError):
            CoverPolicy(RecordingLearner(), RecordingLearner(), num_actions=3, bags=2, epsilon=0.0)


if __name__ == "__main__":
    unittest.main()
