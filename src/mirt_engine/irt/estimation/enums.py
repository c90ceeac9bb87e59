from enum import Enum, StrEnum


class ConvergenceStatus(str, Enum):
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"


class ModelType(StrEnum):
    ONE_PL = "1PL"
    TWO_PL = "2PL"
    THREE_PL = "3PL"
    FOUR_PL = "4PL"

    @property
    def fixed_discrimination(self) -> bool:
        """Whether discriminations stay at their initial value."""
        return self is ModelType.ONE_PL

    @property
    def has_guessing(self) -> bool:
        return self in (ModelType.THREE_PL, ModelType.FOUR_PL)

    @property
    def has_upper_asymptote(self) -> bool:
        return self is ModelType.FOUR_PL


class QuadratureRule(StrEnum):
    UNIFORM = "uniform"
    GAUSS_HERMITE = "gauss_hermite"
