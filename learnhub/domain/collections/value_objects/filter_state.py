"""Filter state for the course catalog."""

import re
from dataclasses import dataclass, field, replace
from enum import StrEnum

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class DateFilterType(StrEnum):
    ALL = "ALL"
    SINCE_LOGIN = "SINCE_LOGIN"
    THIS_MONTH = "THIS_MONTH"
    LAST_X_DAYS = "LAST_X_DAYS"


class RatingFilter(StrEnum):
    ALL = "ALL"
    FOUR_PLUS = "4_PLUS"
    THREE_PLUS = "3_PLUS"
    TWO_PLUS = "2_PLUS"
    ONE_PLUS = "1_PLUS"
    NOT_RATED = "NOT_RATED"

    @property
    def minimum(self) -> int | None:
        """Minimum rating for the ``<N>_PLUS`` buckets."""
        if self in (RatingFilter.ALL, RatingFilter.NOT_RATED):
            return None
        return int(self.value.split("_", 1)[0])


class StatusFilter(StrEnum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class Designation(StrEnum):
    REQUIRED = "REQUIRED"
    RECOMMENDED = "RECOMMENDED"


ALL_CATEGORIES = "All"


@dataclass(frozen=True)
class FilterState:
    """
    Compound filter predicate over courses.

    A value object: filters are replaced, never mutated. ``custom_days`` is
    kept as the raw user input so an empty or garbled field is representable.
    """

    search_query: str = ""
    category: str = ALL_CATEGORIES
    credits: frozenset[str] = field(default_factory=frozenset)
    designations: frozenset[Designation] = field(default_factory=frozenset)
    status: frozenset[StatusFilter] = field(default_factory=frozenset)
    rating_filter: RatingFilter = RatingFilter.ALL
    date_filter_type: DateFilterType = DateFilterType.ALL
    custom_days: str = "30"
    include_lessons: bool = False

    def __post_init__(self) -> None:
        # Accept raw strings and plain iterables from callers
        object.__setattr__(self, "credits", frozenset(self.credits))
        object.__setattr__(
            self, "designations", frozenset(Designation(v) for v in self.designations)
        )
        object.__setattr__(self, "status", frozenset(StatusFilter(v) for v in self.status))
        object.__setattr__(self, "rating_filter", RatingFilter(self.rating_filter))
        object.__setattr__(self, "date_filter_type", DateFilterType(self.date_filter_type))

    @property
    def parsed_custom_days(self) -> int:
        """Leading integer of the user-entered day count, 0 when there is none."""
        match = _LEADING_INT.match(self.custom_days)
        return int(match.group(1)) if match else 0

    def with_category(self, category: str) -> "FilterState":
        """Selecting a category from the sidebar clears every other filter."""
        return replace(INITIAL_FILTERS, category=category)

    def toggle(self, field_name: str, value: str) -> "FilterState":
        """Add or remove one value of a set-valued filter."""
        current = getattr(self, field_name)
        if not isinstance(current, frozenset):
            raise TypeError(f"{field_name} is not a set-valued filter")
        updated = current - {value} if value in current else current | {value}
        return replace(self, **{field_name: updated})


INITIAL_FILTERS = FilterState()
