"""
Exceptions raised at the boundary of the estimation engine.

Numerical degeneracy (e.g. all-zero likelihoods) is absorbed internally
and never raised.
"""


class MIRTError(ValueError):
    """Base class for engine errors."""


class InvalidConfigurationError(MIRTError):
    """A model, grid or option setting violates a constraint."""


class MalformedInputError(MIRTError):
    """Response data or a response vector has the wrong shape or values."""
