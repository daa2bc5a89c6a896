"""Option store backends."""
from cbify_core.state.base import OptionStore
from cbify_core.state.memory import InMemoryOptionStore

__all__ = ["OptionStore", "InMemoryOptionStore"]
