"""Factory for selecting and constructing exploration policies."""

from __future__ import annotations

import logging
from typing import Optional

from cbify_core.learners.base import BaseLearner
from cbify_core.policies.bag import BagPolicy
from cbify_core.policies.base import BaseExplorationPolicy
from cbify_core.policies.cover import CoverPolicy
from cbify_core.policies.epsilon_greedy import EpsilonGreedyPolicy
from cbify_core.policies.tau_first import TauFirstPolicy
from cbify_core.rng import RandomSource
from cbify_core.state.base import OptionStore
from cbify_runtime.models import ExplorationOptions
from cbify_runtime.settings import Settings

logger = logging.getLogger(__name__)

NUM_ACTIONS_KEY = "cbify"


class PolicyFactory:
    """Resolve the exploration mode and build a matching policy object.

    The number of actions is persisted in ``option_store`` under the model
    id the first time a model is built, and the stored value wins on every
    later build.
    """

    SUPPORTED_MODES = {"first", "epsilon_greedy", "bag", "cover"}

    def __init__(
        self,
        option_store: OptionStore,
        default_mode: str = "EPSILON_GREEDY",
        seed: Optional[int] = None,
    ) -> None:
        self.option_store = option_store
        self.default_mode = default_mode
        self.seed = seed

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        option_store: Optional[OptionStore] = None,
    ) -> "PolicyFactory":
        """Build a factory from runtime settings.

        Without an explicit ``option_store`` options are persisted in Redis
        at ``settings.redis_url``.
        """
        if option_store is None:
            import redis

            from cbify_runtime.state.redis_store import RedisOptionStore

            option_store = RedisOptionStore(redis.from_url(settings.redis_url))
        return cls(option_store, default_mode=settings.default_mode, seed=settings.seed)

    @staticmethod
    def normalize_mode_name(name: str) -> str:
        val = name.strip().lower().replace("-", "_")
        aliases = {
            "tau_first": "first",
            "tau": "first",
            "epsilon": "epsilon_greedy",
            "eps_greedy": "epsilon_greedy",
            "greedy": "epsilon_greedy",
            "bagging": "bag",
            "bootstrap": "bag",
            "online_cover": "cover",
        }
        return aliases.get(val, val)

    @classmethod
    def validate_mode_name(cls, name: str) -> str:
        normalized = cls.normalize_mode_name(name)
        if normalized not in cls.SUPPORTED_MODES:
            raise ValueError(
                f"Unsupported exploration mode '{name}'. Valid values: FIRST, EPSILON_GREEDY, BAG, COVER."
            )
        return normalized

    def resolve_num_actions(self, model_id: str, supplied: Optional[int]) -> int:
        """Return the number of actions for ``model_id``, persisting it if new.

        A stored value always wins; a differing supplied value only logs a
        warning.
        """
        stored = self.option_store.get_option(model_id, NUM_ACTIONS_KEY)
        if stored is not None:
            num_actions = int(stored)
            if supplied is not None and supplied != num_actions:
                logger.warning(
                    "Model '%s': %d actions were requested but the stored model uses %d. "
                    "Pursuing with the stored value.",
                    model_id,
                    supplied,
                    num_actions,
                )
            return num_actions

        if supplied is None:
            raise ValueError(f"Model '{model_id}' has no stored number of actions; cbify is required.")
        self.option_store.set_option(model_id, NUM_ACTIONS_KEY, str(supplied))
        logger.info("Model '%s': stored %d actions.", model_id, supplied)
        return supplied

    def build(
        self,
        model_id: str,
        options: ExplorationOptions,
        learner: BaseLearner,
        oracle: Optional[BaseLearner] = None,
        rng: Optional[RandomSource] = None,
    ) -> BaseExplorationPolicy:
        num_actions = self.resolve_num_actions(model_id, options.cbify)
        mode = options.mode or self.validate_mode_name(self.default_mode)
        rng = rng if rng is not None else RandomSource(self.seed)

        if mode == "first":
            if options.first is None:
                raise ValueError("tau-first exploration needs a budget (first).")
            policy: BaseExplorationPolicy = TauFirstPolicy(
                learner, num_actions=num_actions, tau=options.first, rng=rng
            )
        elif mode == "bag":
            if options.bag is None:
                raise ValueError("bagging exploration needs an ensemble size (bag).")
            policy = BagPolicy(learner, num_actions=num_actions, bags=options.bag, rng=rng)
        elif mode == "cover":
            if options.cover is None:
                raise ValueError("cover exploration needs an ensemble size (cover).")
            if oracle is None:
                raise ValueError("cover exploration needs a cost-sensitive oracle learner.")
            policy = CoverPolicy(
                learner,
                oracle,
                num_actions=num_actions,
                bags=options.cover,
                epsilon=options.resolved_epsilon,
                rng=rng,
            )
        else:
            policy = EpsilonGreedyPolicy(
                learner, num_actions=num_actions, epsilon=options.resolved_epsilon, rng=rng
            )

        logger.info("Model '%s': built %s policy over %d actions.", model_id, policy.name, num_actions)
        return policy
