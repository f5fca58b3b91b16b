from dataclasses import dataclass

from ..entity import EntityId


@dataclass(frozen=True)
class UserId(EntityId):
    """Strongly-typed user identifier."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("UserId must be non-negative")


@dataclass(frozen=True)
class CollectionId(EntityId):
    """
    Strongly-typed collection identifier.

    Holds either a storage id or, before aliases are resolved, a reserved
    alias such as ``favorites``.
    """

    value: str
