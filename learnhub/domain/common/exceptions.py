"""
Domain layer exceptions.

These exceptions represent the error categories the collection engine
surfaces. Engine operations return them inside a ``Failure`` rather than
raising; repositories and gateways raise them and the infrastructure layer
translates them to HTTP responses (and back).
"""


class DomainError(Exception):
    """
    Base exception for all domain errors.

    All domain exceptions should inherit from this class
    so they can be caught and handled uniformly.
    """

    def __init__(self, message: str, details: dict[str, object] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class ValidationError(DomainError):
    """
    Raised when input is malformed and is caught before any remote call.

    Example: renaming a collection to an empty label.
    """

    def __init__(self, message: str, field: str | None = None, value: object = None) -> None:
        details: dict[str, object] = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = value
        super().__init__(message, details)
        self.field = field
        self.value = value


class EntityNotFoundError(DomainError):
    """
    Raised when an entity cannot be found.

    Example: removing an item from a collection id that doesn't exist.
    """

    def __init__(self, entity_type: str, entity_id: object) -> None:
        message = f"{entity_type} with id {entity_id} not found"
        super().__init__(message, {"entity_type": entity_type, "entity_id": entity_id})
        self.entity_type = entity_type
        self.entity_id = entity_id


class StoreNotProvisionedError(EntityNotFoundError):
    """
    Raised when a backing table has not been created yet.

    Read paths treat this as an empty result, never as a failure.
    """

    def __init__(self, table: str) -> None:
        super().__init__("Table", table)
        self.table = table


class InvariantViolationError(DomainError):
    """
    Raised when an aggregate invariant is violated.

    Example: a system alias that resolves to two collections.
    """

    def __init__(self, aggregate: str, invariant: str) -> None:
        message = f"Invariant violation in {aggregate}: {invariant}"
        super().__init__(message, {"aggregate": aggregate, "invariant": invariant})
        self.aggregate = aggregate
        self.invariant = invariant


class AuthenticationError(DomainError):
    """Raised when the caller is not authenticated."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class AuthorizationError(DomainError):
    """
    Raised when an operation is not authorized.

    Example: deleting a system collection, or renaming another user's collection.
    """

    def __init__(self, message: str = "Not authorized to perform this action") -> None:
        super().__init__(message)


class TransientError(DomainError):
    """
    Raised when a remote call fails for infrastructure reasons.

    The engine never retries; retry policy belongs to the caller.
    """

    def __init__(self, message: str, operation: str | None = None) -> None:
        super().__init__(message, {"operation": operation} if operation else None)
        self.operation = operation
