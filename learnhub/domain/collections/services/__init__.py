from .alias_resolver import AliasResolver
from .filter_engine import apply_filters, count_active_filters
from .profile_singleton import enforce_profile_singleton

__all__ = [
    "AliasResolver",
    "apply_filters",
    "count_active_filters",
    "enforce_profile_singleton",
]
