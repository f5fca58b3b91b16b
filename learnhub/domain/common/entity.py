"""
Base classes for entities and their identifiers.

An entity keeps its identity while its attributes change: two collections
with the same id are the same collection, whatever their labels say.
"""

from abc import ABC
from dataclasses import dataclass
from typing import Generic, TypeVar

from .value_object import ValueObject


@dataclass(frozen=True)
class EntityId(ValueObject):
    """Typed wrapper around a positive integer or a non-blank string id."""

    value: int | str

    def __post_init__(self) -> None:
        if isinstance(self.value, int) and self.value <= 0:
            raise ValueError(f"{self.__class__.__name__} must be positive")
        if isinstance(self.value, str) and not self.value.strip():
            raise ValueError(f"{self.__class__.__name__} cannot be blank")

    def __str__(self) -> str:
        return str(self.value)

    def to_primitive(self) -> int | str:
        return self.value


IdType = TypeVar("IdType", bound=EntityId)


class Entity(ABC, Generic[IdType]):
    """
    Base class for mutable domain objects compared by ``id``.

    Dataclass subclasses that keep the generated ``__eq__`` must not be put
    in sets; ``Collection`` is looked up by id in dicts instead.
    """

    id: IdType

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, self.__class__):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.id})"
