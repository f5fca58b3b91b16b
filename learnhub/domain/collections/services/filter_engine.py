"""
Course filtering domain service.

Evaluates a FilterState over the course catalog. Pure: no I/O and no clock
reads beyond the ``now`` argument's default. Predicates run cheapest first and
an item is dropped at the first one it fails; selected values inside one
category are OR'd, categories are AND'ed.
"""

from collections.abc import Callable, Iterable
from datetime import UTC, datetime, timedelta

from learnhub.domain.collections.entities.content_item import Course
from learnhub.domain.collections.system_collections import CATALOG_SCOPES
from learnhub.domain.collections.value_objects.filter_state import (
    ALL_CATEGORIES,
    DateFilterType,
    Designation,
    FilterState,
    RatingFilter,
    StatusFilter,
)

# Approximation of "since last login"; no real login timestamp is tracked
SINCE_LOGIN_DAYS = 3

CoursePredicate = Callable[[Course], bool]


def _matches_scope(active_collection_id: str) -> CoursePredicate | None:
    if active_collection_id in CATALOG_SCOPES:
        return None
    return lambda course: active_collection_id in course.collections


def _matches_search(filters: FilterState) -> CoursePredicate | None:
    if not filters.search_query:
        return None
    query = filters.search_query.lower()

    def predicate(course: Course) -> bool:
        fields = [course.title, course.author, course.description]
        if filters.include_lessons:
            fields.extend(course.lesson_titles)
        return any(query in (value or "").lower() for value in fields)

    return predicate


def _matches_category(filters: FilterState) -> CoursePredicate | None:
    if filters.category == ALL_CATEGORIES:
        return None
    return lambda course: course.category == filters.category


def _matches_credits(filters: FilterState) -> CoursePredicate | None:
    if not filters.credits:
        return None
    return lambda course: not course.badges.isdisjoint(filters.credits)


def _matches_designation(filters: FilterState) -> CoursePredicate | None:
    if not filters.designations:
        return None

    def predicate(course: Course) -> bool:
        if Designation.REQUIRED in filters.designations and Designation.REQUIRED in course.badges:
            return True
        return Designation.RECOMMENDED in filters.designations and course.is_saved

    return predicate


def _status_of(course: Course) -> StatusFilter:
    if course.progress == 0:
        return StatusFilter.NOT_STARTED
    if course.progress == 100:
        return StatusFilter.COMPLETED
    return StatusFilter.IN_PROGRESS


def _matches_status(filters: FilterState) -> CoursePredicate | None:
    if not filters.status:
        return None
    return lambda course: _status_of(course) in filters.status


def _matches_rating(filters: FilterState) -> CoursePredicate | None:
    if filters.rating_filter is RatingFilter.ALL:
        return None
    if filters.rating_filter is RatingFilter.NOT_RATED:
        return lambda course: course.rating == 0
    minimum = filters.rating_filter.minimum or 0
    return lambda course: course.rating >= minimum


def _matches_date(filters: FilterState, now: datetime) -> CoursePredicate | None:
    match filters.date_filter_type:
        case DateFilterType.ALL:
            return None
        case DateFilterType.SINCE_LOGIN:
            cutoff = now - timedelta(days=SINCE_LOGIN_DAYS)
            return lambda course: course.added_at >= cutoff
        case DateFilterType.THIS_MONTH:
            return lambda course: (
                course.added_at.month == now.month and course.added_at.year == now.year
            )
        case DateFilterType.LAST_X_DAYS:
            cutoff = now - timedelta(days=filters.parsed_custom_days)
            return lambda course: course.added_at >= cutoff
    return None


def build_predicates(
    filters: FilterState, active_collection_id: str, now: datetime
) -> list[CoursePredicate]:
    """Active predicates in evaluation order; inactive categories are skipped."""
    candidates = [
        _matches_scope(active_collection_id),
        _matches_search(filters),
        _matches_category(filters),
        _matches_credits(filters),
        _matches_designation(filters),
        _matches_status(filters),
        _matches_rating(filters),
        _matches_date(filters, now),
    ]
    return [predicate for predicate in candidates if predicate is not None]


def apply_filters(
    filters: FilterState,
    courses: Iterable[Course],
    active_collection_id: str,
    now: datetime | None = None,
) -> list[Course]:
    """
    Return the courses visible under ``filters`` in the given scope.

    Args:
        filters: The filter state to evaluate
        courses: The course catalog, in display order
        active_collection_id: Current scope; ``academy`` and ``dashboard``
            mean the whole catalog
        now: Reference time for date filters (defaults to current UTC time)

    Returns:
        Matching courses, order preserved
    """
    reference = now or datetime.now(UTC)
    if reference.tzinfo is None:
        reference = reference.replace(tzinfo=UTC)
    predicates = build_predicates(filters, active_collection_id, reference)
    return [course for course in courses if all(check(course) for check in predicates)]


def count_active_filters(filters: FilterState) -> int:
    """Number of filter categories that currently narrow the catalog."""
    active = [
        filters.category != ALL_CATEGORIES,
        bool(filters.credits),
        bool(filters.designations),
        bool(filters.status),
        filters.rating_filter is not RatingFilter.ALL,
        filters.date_filter_type is not DateFilterType.ALL,
    ]
    return sum(active)
