"""
Domain common module.

Contains base classes for domain modeling:
- ValueObject: Immutable objects defined by their attributes
- Entity: Objects with identity and lifecycle
- DomainError and its subclasses: the engine's error taxonomy
"""

from .entity import Entity, EntityId
from .exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    EntityNotFoundError,
    InvariantViolationError,
    StoreNotProvisionedError,
    TransientError,
    ValidationError,
)
from .value_object import ValueObject

__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "DomainError",
    "Entity",
    "EntityId",
    "EntityNotFoundError",
    "InvariantViolationError",
    "StoreNotProvisionedError",
    "TransientError",
    "ValidationError",
    "ValueObject",
]
