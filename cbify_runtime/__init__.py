"""Configuration, persistence and wiring around cbify_core."""

from cbify_runtime.factory import PolicyFactory
from cbify_runtime.models import ExplorationOptions
from cbify_runtime.settings import Settings

__all__ = ["ExplorationOptions", "PolicyFactory", "Settings"]
