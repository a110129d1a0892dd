"""
Typed failures raised when a transaction is rejected.

Every error carries the identifier of the offending entity and, where one
applies, its current state so the caller can report why nothing changed.
"""

from enum import Enum


class NetworkError(Exception):
    """Base class for all rejected transactions."""

    def __init__(self, message: str, entity_id: str | None = None, state: Enum | str | None = None):
        super().__init__(message)
        self.entity_id = entity_id
        self.state = state.value if isinstance(state, Enum) else state

    def to_dict(self) -> dict[str, str | None]:
        return {
            "error": type(self).__name__,
            "message": str(self),
            "entity_id": self.entity_id,
            "state": self.state,
        }


class InvalidState(NetworkError):
    """The entity is not in the state the operation requires."""


class InvalidBid(NetworkError, ValueError):
    """An offer or bid price violates the listing or contract constraints."""


class InvalidRange(NetworkError, ValueError):
    """Payload bounds are inverted or a count is not positive."""


class ProductNotSold(NetworkError):
    """A contract was requested for a product that has not been sold."""


class NotFound(NetworkError, LookupError):
    """A referenced identifier does not resolve on the ledger."""
