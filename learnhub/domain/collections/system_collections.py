"""
Reserved collection aliases and pseudo-collections.

System collections are seeded per account and addressed by a stable alias
even though their storage id is assigned at creation time. Pseudo-collections
are scope ids that are not backed by membership rows at all.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SystemCollectionSpec:
    """One row of the alias table."""

    alias: str
    label: str
    color: str


FAVORITES = "favorites"
WORKSPACE = "research"
WATCHLIST = "to_learn"
PERSONAL_CONTEXT = "personal-context"

SYSTEM_COLLECTIONS: tuple[SystemCollectionSpec, ...] = (
    SystemCollectionSpec(alias=FAVORITES, label="Favorites", color="#FF2600"),
    SystemCollectionSpec(alias=WORKSPACE, label="Workspace", color="#FF9300"),
    SystemCollectionSpec(alias=WATCHLIST, label="Watchlist", color="#78C0F0"),
    SystemCollectionSpec(alias=PERSONAL_CONTEXT, label="Personal Context", color="#64748B"),
)

SYSTEM_ALIASES = frozenset(spec.alias for spec in SYSTEM_COLLECTIONS)
LABEL_TO_ALIAS = {spec.label: spec.alias for spec in SYSTEM_COLLECTIONS}
ALIAS_TO_SPEC = {spec.alias: spec for spec in SYSTEM_COLLECTIONS}

DEFAULT_CUSTOM_COLOR = "#3B82F6"

# Pseudo-collections
ALL_COURSES = "academy"
DASHBOARD = "dashboard"
ALL_CONVERSATIONS = "conversations"
PROMETHEUS = "prometheus"
CERTIFICATIONS = "certifications"

CATALOG_SCOPES = frozenset({ALL_COURSES, DASHBOARD})
CONVERSATION_SCOPES = frozenset({ALL_CONVERSATIONS, PROMETHEUS})
PSEUDO_COLLECTIONS = CATALOG_SCOPES | CONVERSATION_SCOPES | {CERTIFICATIONS}


def is_alias(name: str) -> bool:
    return name in SYSTEM_ALIASES


def is_reserved_label(label: str) -> bool:
    """Whether a label belongs to a system collection (case-insensitive)."""
    normalized = label.strip().casefold()
    return any(spec.label.casefold() == normalized for spec in SYSTEM_COLLECTIONS)
