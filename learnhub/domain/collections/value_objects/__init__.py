from .filter_state import (
    INITIAL_FILTERS,
    DateFilterType,
    Designation,
    FilterState,
    RatingFilter,
    StatusFilter,
)
from .membership_key import MembershipKey, MembershipOp

__all__ = [
    "INITIAL_FILTERS",
    "DateFilterType",
    "Designation",
    "FilterState",
    "MembershipKey",
    "MembershipOp",
    "RatingFilter",
    "StatusFilter",
]
