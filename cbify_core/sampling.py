"""Action sampling helpers.

All functions take the uniform draw ``u`` explicitly so the caller owns the
random source and the mapping stays deterministic under test.
"""

from __future__ import annotations

import math
from typing import Sequence


def uniform_action(u: float, num_actions: int) -> int:
    """Map ``u`` in ``[0, 1)`` to an action in ``[1, num_actions]``."""
    action = int(math.floor(u * num_actions)) + 1
    return min(max(action, 1), num_actions)


def choose_bag(u: float, bags: int) -> int:
    """Map ``u`` in ``[0, 1)`` to an ensemble index in ``[0, bags - 1]``."""
    bag = int(math.floor(u * bags))
    return min(max(bag, 0), bags - 1)


def choose_action(u: float, distribution: Sequence[float]) -> int:
    """Draw a 1-based action from ``distribution`` using the uniform value ``u``.

    If floating-point rounding leaves ``u`` uncovered after the last entry,
    the first action is returned.
    """
    value = u
    for index, weight in enumerate(distribution):
        if value <= weight:
            return index + 1
        value -= weight
    return 1
