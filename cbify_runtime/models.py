"""Pydantic models for the reduction's option surface."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, model_validator

DEFAULT_EPSILON = 0.05


class ExplorationOptions(BaseModel):
    """Options recognized by the exploration reduction.

    ``cbify`` is the number of actions. At most one of ``first``, ``bag``
    and ``cover`` selects the mode; ``epsilon`` sets the exploration rate
    of epsilon-greedy (the default mode) or of cover.
    """

    cbify: Optional[int] = Field(default=None, ge=2, description="number of actions k")
    first: Optional[int] = Field(default=None, ge=0, description="tau-first exploration budget")
    epsilon: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    bag: Optional[int] = Field(default=None, ge=1, description="bagging ensemble size")
    cover: Optional[int] = Field(default=None, ge=1, description="cover ensemble size")

    @model_validator(mode="after")
    def validate_modes(self) -> "ExplorationOptions":
        chosen = [name for name in ("first", "bag", "cover") if getattr(self, name) is not None]
        if len(chosen) > 1:
            raise ValueError(f"options {', '.join(chosen)} are mutually exclusive")
        if self.epsilon is not None and chosen and chosen[0] != "cover":
            raise ValueError(f"epsilon cannot be combined with {chosen[0]}")
        if self.cover is not None and self.epsilon == 0.0:
            raise ValueError("cover needs epsilon > 0")
        return self

    @property
    def mode(self) -> Optional[str]:
        """Mode selected by the options, or None when nothing was chosen."""
        if self.first is not None:
            return "first"
        if self.bag is not None:
            return "bag"
        if self.cover is not None:
            return "cover"
        if self.epsilon is not None:
            return "epsilon_greedy"
        return None

    @property
    def resolved_epsilon(self) -> float:
        return DEFAULT_EPSILON if self.epsilon is None else self.epsilon
