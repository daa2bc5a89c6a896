"""Dict-backed option store for tests and local simulation."""

from __future__ import annotations

from collections import defaultdict

from cbify_core.state.base import OptionStore


class InMemoryOptionStore(OptionStore):
    """Thread-unsafe, zero-dependency in-memory store."""

    def __init__(self) -> None:
        # {model_id: {key: value}}
        self._data: dict[str, dict[str, str]] = defaultdict(dict)

    def get_options(self, model_id: str) -> dict[str, str]:
        return dict(self._data.get(model_id, {}))

    def set_option(self, model_id: str, key: str, value: str) -> None:
        self._data[model_id][key] = str(value)

    def reset_model(self, model_id: str) -> None:
        self._data.pop(model_id, None)
