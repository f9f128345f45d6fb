"""Exception hierarchy shared by the parser and both engines."""

from __future__ import annotations


class StochcalcError(ValueError):
    """Base class for recoverable input errors.

    Subclasses ``ValueError`` so callers that only guard against bad values
    keep working unchanged.
    """


class ParseError(StochcalcError):
    """Raised when free-form text cannot be turned into a matrix or vector."""


class ValidationError(StochcalcError):
    """Raised when parsed or numeric inputs violate a model precondition."""
