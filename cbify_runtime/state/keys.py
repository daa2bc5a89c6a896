"""Redis key naming helpers."""

from __future__ import annotations


def models_index_key() -> str:
    return "cbify:models"


def model_options_key(model_id: str) -> str:
    return f"cbify:model:{model_id}:options"
