"""
Item parameter representation for the compensatory multidimensional 4PL.

    P(correct | θ) = c + (γ - c) / (1 + exp(-(Σ_k a_k θ_k + d)))

1PL, 2PL and 3PL are restrictions of the same parameter set: 1PL and 2PL
have c = 0 and γ = 1, 3PL frees c, 4PL frees c and γ.
"""

from typing import Self

from pydantic import BaseModel, Field, model_validator

from mirt_engine.irt.estimation.config import (
    DEFAULT_GUESSING,
    DEFAULT_UPPER_ASYMPTOTE,
)
from mirt_engine.irt.estimation.enums import ModelType


class Item(BaseModel):
    """
    Parameters for one binary item.

    Items are mutated in place by the M-step while a fit is running; once a
    fit returns, treat them as read-only.

    Attributes:
        a: Discrimination weights, one per latent dimension.
        d: Intercept. Higher values make the item easier.
        c: Lower asymptote (guessing floor), 0 <= c < 1.
        gamma: Upper asymptote, 0 < gamma <= 1, gamma >= c.
    """

    a: list[float] = Field(min_length=1)
    d: float = 0.0
    c: float = Field(default=0.0, ge=0.0, lt=1.0)
    gamma: float = Field(default=1.0, gt=0.0, le=1.0)

    @model_validator(mode="after")
    def _validate_asymptotes_ordered(self) -> "Item":
        if self.c > self.gamma:
            raise ValueError(
                f"Lower asymptote c must not exceed gamma, "
                f"got c={self.c}, gamma={self.gamma}"
            )
        return self

    @property
    def n_dimensions(self) -> int:
        """Number of latent dimensions."""
        return len(self.a)

    @classmethod
    def create_default(cls, n_dimensions: int, model_type: ModelType) -> Self:
        """
        Create starting parameters for a fit.

        All discriminations are 1 and the intercept is 0. 3PL and 4PL items
        start with a guessing floor of 0.2; 4PL items start with an upper
        asymptote of 0.95.
        """
        c = DEFAULT_GUESSING if model_type.has_guessing else 0.0
        gamma = (
            DEFAULT_UPPER_ASYMPTOTE if model_type.has_upper_asymptote else 1.0
        )
        return cls(a=[1.0] * n_dimensions, d=0.0, c=c, gamma=gamma)
