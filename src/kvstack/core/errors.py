"""Exception hierarchy for the entity store.

Every error raised by kvstack derives from StoreError so callers can catch
the whole family in one place.

Consistency drift between a primary record and the identifier index is not
an exception: see kvstack.storage.reconcile for detection.
"""

from __future__ import annotations


class StoreError(Exception):
    """Base class for all entity store errors."""

    pass


class ConnectionFailure(StoreError):
    """Raised when the backend is unreachable or a command timed out."""

    pass


class MissingIdentifierError(StoreError, LookupError):
    """Raised when an entity has no readable identifier and none was supplied."""

    def __init__(self, type_name: str, entity: object) -> None:
        self.type_name = type_name
        self.entity = entity
        super().__init__(f"Entity of type '{type_name}' has no identifier: {entity!r}")


class EncodingError(StoreError, ValueError):
    """Raised when an entity cannot be serialized for storage."""

    pass


class DeserializationError(StoreError, ValueError):
    """Raised when a stored payload cannot be decoded into the requested model.

    Attributes:
        key: Backend key the payload was read from, if known.
    """

    def __init__(self, message: str, key: str | None = None) -> None:
        self.key = key
        if key is not None:
            message = f"{message} (key={key})"
        super().__init__(message)


class TypeConflictError(StoreError, ValueError):
    """Raised when two different models claim the same type name."""

    pass
