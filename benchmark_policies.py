#!/usr/bin/env python3
"""Benchmark the four exploration policies on the same synthetic stream.

Usage:
    python benchmark_policies.py          # defaults: 5000 rounds, 4 classes, seed=42
    python benchmark_policies.py -n 10000 -k 6 --seed 7

Produces ``benchmark_loss.png`` in the current directory.
"""

from __future__ import annotations

import argparse
import logging
from typing import Optional

import numpy as np

from cbify_core.learners.cost_regression import CostRegressionLearner
from cbify_core.learners.csoaa import CostSensitiveOneAgainstAll
from cbify_core.policies.base import BaseExplorationPolicy
from cbify_core.sim.synthetic import MulticlassStream, run_simulation
from cbify_core.state.memory import InMemoryOptionStore
from cbify_runtime.factory import PolicyFactory
from cbify_runtime.models import ExplorationOptions
from cbify_runtime.settings import Settings

logger = logging.getLogger(__name__)

# ---- default problem setup --------------------------------------------------

DEFAULT_NUM_ACTIONS = 4
DEFAULT_NUM_FEATURES = 5
DEFAULT_TAU = 500
DEFAULT_EPSILON = 0.1
DEFAULT_BAGS = 5


def build_policies(
    seed: int,
    num_actions: int = DEFAULT_NUM_ACTIONS,
    num_features: int = DEFAULT_NUM_FEATURES,
    factory: Optional[PolicyFactory] = None,
) -> list[tuple[str, BaseExplorationPolicy]]:
    """Build one of each policy through the factory, each with its own learners."""
    if factory is None:
        factory = PolicyFactory(InMemoryOptionStore(), seed=seed)

    def learner() -> CostRegressionLearner:
        return CostRegressionLearner(num_actions, num_features)

    setups = [
        (f"Tau-First (tau={DEFAULT_TAU})", ExplorationOptions(cbify=num_actions, first=DEFAULT_TAU)),
        (f"Epsilon-Greedy (eps={DEFAULT_EPSILON})", ExplorationOptions(cbify=num_actions, epsilon=DEFAULT_EPSILON)),
        (f"Bagging (B={DEFAULT_BAGS})", ExplorationOptions(cbify=num_actions, bag=DEFAULT_BAGS)),
        (
            f"Cover (B={DEFAULT_BAGS})",
            ExplorationOptions(cbify=num_actions, cover=DEFAULT_BAGS, epsilon=DEFAULT_EPSILON),
        ),
    ]
    return [
        (
            label,
            factory.build(
                f"bench_{options.mode}",
                options,
                learner(),
                oracle=CostSensitiveOneAgainstAll(num_actions, num_features),
            ),
        )
        for label, options in setups
    ]


def _plot_loss_curves(
    results: dict[str, list[float]],
    n_rounds: int,
    out_path: str,
) -> None:
    try:
        import matplotlib.pyplot as plt
    except ModuleNotFoundError as exc:
        raise ModuleNotFoundError(
            "matplotlib is required to generate plots. Install with: pip install -e '.[bench]'"
        ) from exc

    fig, ax = plt.subplots(figsize=(10, 6))
    rounds_axis = np.arange(1, n_rounds + 1)

    for label, averages in results.items():
        ax.plot(rounds_axis, averages, label=label, linewidth=1.5)

    ax.set_xlabel("Round", fontsize=12)
    ax.set_ylabel("Average Zero-One Loss", fontsize=12)
    ax.set_title("Exploration Policies - Progressive Loss Comparison", fontsize=14)
    ax.legend(fontsize=11)
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(out_path, dpi=150)


def main() -> None:
    settings = Settings()
    logging.basicConfig(level=settings.log_level.upper())

    parser = argparse.ArgumentParser(description="Benchmark exploration policies")
    parser.add_argument("-n", "--rounds", type=int, default=5_000, help="Number of rounds")
    parser.add_argument("-k", "--actions", type=int, default=DEFAULT_NUM_ACTIONS, help="Number of classes")
    parser.add_argument("--seed", type=int, default=settings.seed if settings.seed is not None else 42, help="RNG seed")
    parser.add_argument(
        "--skip-plot",
        action="store_true",
        help="Run benchmark and print final loss table without saving a plot.",
    )
    parser.add_argument(
        "--redis",
        action="store_true",
        help="Persist policy options in Redis at REDIS_URL instead of in memory.",
    )
    args = parser.parse_args()

    n_rounds: int = args.rounds
    seed: int = args.seed

    option_store = None if args.redis else InMemoryOptionStore()
    factory = PolicyFactory.from_settings(settings, option_store=option_store)
    factory.seed = seed
    policies = build_policies(seed, num_actions=args.actions, factory=factory)

    # Same stream seed for every policy so each sees an identical example sequence.
    results: dict[str, list[float]] = {}
    for label, policy in policies:
        stream = MulticlassStream(args.actions, DEFAULT_NUM_FEATURES, seed=seed)
        _cumulative, averages = run_simulation(policy, stream, n_rounds=n_rounds)
        results[label] = averages
        logger.info("%s finished %d rounds", label, n_rounds)

    out_path = "benchmark_loss.png"
    if args.skip_plot:
        print("[benchmark] Plot generation skipped (--skip-plot).")
    else:
        _plot_loss_curves(results, n_rounds, out_path)
        print(f"[benchmark] Saved loss chart -> {out_path}")

    print(f"\n{'Policy':<30} {'Average Loss':>14}")
    print("-" * 46)
    for label, averages in results.items():
        print(f"{label:<30} {averages[-1]:>14.4f}")


if __name__ == "__main__":
    main()
