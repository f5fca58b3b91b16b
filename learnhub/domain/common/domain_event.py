"""
Base class for domain events.

An event records a change that already happened, named in the past tense
(``CollectionDeleted``). Events are frozen and keyword-only so subclasses can
add required fields after the defaulted id and timestamp.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

from .value_object import ValueObject


@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    """Immutable, timestamped record of a change."""

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def event_type(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> dict[str, object]:
        """Flatten the event into log-friendly primitives."""
        result: dict[str, object] = {"event_type": self.event_type}
        for key, value in self.__dict__.items():
            if isinstance(value, datetime):
                value = value.isoformat()
            elif isinstance(value, UUID):
                value = str(value)
            elif isinstance(value, ValueObject):
                value = value.to_primitive()
            result[key] = value
        return result
