"""Enforcement of the one-profile-per-user invariant."""

from learnhub.domain.collections.entities.content_item import ContentItem
from learnhub.domain.collections.item_kind import ItemKind


def enforce_profile_singleton(
    items: list[ContentItem], *, synthesize_placeholder: bool = True
) -> list[ContentItem]:
    """
    Keep exactly one profile in a personal-context listing.

    Duplicates left over from old migrations collapse to the earliest-created
    profile (ties broken by id so the choice is deterministic). With no
    profile at all a virtual placeholder is put first; it is never persisted.

    Args:
        items: Items of the personal-context collection, in display order
        synthesize_placeholder: Add the placeholder when no profile exists

    Returns:
        Items with at most one profile, other items untouched and in order
    """
    profiles = [item for item in items if item.kind is ItemKind.CONTEXT_PROFILE]
    if not profiles:
        if synthesize_placeholder:
            return [ContentItem.virtual_profile(), *items]
        return list(items)

    keeper = min(profiles, key=lambda item: (item.created_at, item.id))
    return [
        item for item in items if item.kind is not ItemKind.CONTEXT_PROFILE or item is keeper
    ]
