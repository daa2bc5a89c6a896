"""Abstract interface for persisted reduction options."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict


class OptionStore(ABC):
    """Keeps the options a model was trained with, keyed by model id.

    Options that must survive a save/reload (such as the number of actions)
    are written here the first time a model is set up and read back on
    every later setup.
    """

    # ---- read ---------------------------------------------------------------

    @abstractmethod
    def get_options(self, model_id: str) -> Dict[str, str]:
        """Return all stored options for a model.

        Must return an empty dict (not raise) when nothing is stored yet.
        """

    # ---- write --------------------------------------------------------------

    @abstractmethod
    def set_option(self, model_id: str, key: str, value: str) -> None:
        """Store a single option, overwriting any previous value."""

    # ---- lifecycle ----------------------------------------------------------

    @abstractmethod
    def reset_model(self, model_id: str) -> None:
        """Delete every stored option for the given model."""

    # ---- optional helpers ---------------------------------------------------

    def get_option(self, model_id: str, key: str) -> str | None:
        return self.get_options(model_id).get(key)
