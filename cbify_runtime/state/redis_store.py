"""Redis-backed store for persisted reduction options."""
from __future__ import annotations

from typing import Dict

import redis

from cbify_core.state.base import OptionStore
from cbify_runtime.state.keys import model_options_key, models_index_key


class RedisOptionStore(OptionStore):
    """OptionStore implementation using one Redis hash per model."""

    def __init__(self, redis_client: redis.Redis) -> None:
        self.redis = redis_client

    def get_options(self, model_id: str) -> Dict[str, str]:
        raw = self.redis.hgetall(model_options_key(model_id))
        if not raw:
            return {}
        return {k.decode("utf-8"): v.decode("utf-8") for k, v in raw.items()}

    def set_option(self, model_id: str, key: str, value: str) -> None:
        self.redis.hset(model_options_key(model_id), key, str(value))
        self.redis.sadd(models_index_key(), model_id)

    def reset_model(self, model_id: str) -> None:
        self.redis.delete(model_options_key(model_id))
        self.redis.srem(models_index_key(), model_id)
