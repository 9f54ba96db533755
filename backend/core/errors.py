"""
core/errors.py
──────────────
Exception types raised by the selection core and translated at the HTTP boundary.

A destination that cannot be found is *not* an error: lookups and selections
return ``None`` for that case.
"""


class RandomTripError(Exception):
    """Base error for destination selection failures."""


class StoreUnavailableError(RandomTripError):
    """Raised when the backing store cannot be reached or a query fails."""


class MalformedRequestError(RandomTripError):
    """Raised when a request lacks a field required for the requested mode."""
