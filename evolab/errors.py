"""Error taxonomy shared by the evolution core."""

from __future__ import annotations


class EvolabError(Exception):
    """Base class for all errors raised by evolab."""


class InvalidArgumentError(EvolabError, ValueError):
    """Raised when a call receives arguments violating its contract."""


class DimensionMismatchError(EvolabError, ValueError):
    """Raised when an input vector does not match a layer's neuron count."""


class InvalidStateError(EvolabError, RuntimeError):
    """Raised when an operation is attempted in the wrong lifecycle state."""


__all__ = [
    "DimensionMismatchError",
    "EvolabError",
    "InvalidArgumentError",
    "InvalidStateError",
]
