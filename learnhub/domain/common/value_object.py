"""
Base class for value objects.

Subclasses are frozen dataclasses, so equality, hashing and repr all come
from their fields. ``MembershipKey`` and the typed ids build on it.
"""

from dataclasses import asdict, fields


class ValueObject:
    """Immutable object compared by its fields; validation goes in ``__post_init__``."""

    def to_primitive(self) -> object:
        """The value of a single-field object, otherwise a dict of all fields."""
        own_fields = fields(self)
        if len(own_fields) == 1:
            return getattr(self, own_fields[0].name)
        return asdict(self)
