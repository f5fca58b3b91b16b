"""
Alias resolution domain service.

Maps reserved aliases (``favorites``, ``research``, ``to_learn``,
``personal-context``) to the storage id of the system collection seeded for
them. Only system-defined collections take part; a custom collection can
never shadow an alias.
"""

from collections.abc import Iterable

from learnhub.domain.collections.entities.collection import Collection
from learnhub.domain.collections.system_collections import (
    LABEL_TO_ALIAS,
    SYSTEM_COLLECTIONS,
    is_alias,
)
from learnhub.domain.common.exceptions import InvariantViolationError


class AliasResolver:
    """Pure, synchronous alias lookup over a snapshot of collections."""

    def __init__(self, collections: Iterable[Collection] = ()) -> None:
        self._by_alias: dict[str, list[str]] = {}
        self.load(collections)

    def load(self, collections: Iterable[Collection]) -> None:
        """Replace the snapshot the resolver looks aliases up in."""
        by_alias: dict[str, list[str]] = {}
        for collection in collections:
            alias = self._alias_of(collection)
            if alias is not None:
                by_alias.setdefault(alias, []).append(str(collection.id))
        self._by_alias = by_alias

    @staticmethod
    def _alias_of(collection: Collection) -> str | None:
        if not collection.is_system_defined:
            return None
        if collection.system_alias:
            return collection.system_alias
        # Rows seeded before system_alias existed are matched by label
        return LABEL_TO_ALIAS.get(collection.label)

    def resolve(self, name: str) -> str:
        """
        Resolve an alias to a collection id.

        Returns ``name`` unchanged when it is not an alias, or when the alias
        has no collection yet, so that lookups degrade to an empty result.
        """
        if not is_alias(name):
            return name
        ids = self._by_alias.get(name)
        if not ids:
            return name
        return ids[0]

    def alias_for(self, collection_id: str) -> str | None:
        """Reverse lookup: the alias a storage id was seeded for, if any."""
        if is_alias(collection_id):
            return collection_id
        for alias, ids in self._by_alias.items():
            if collection_id in ids:
                return alias
        return None

    def is_bootstrapped(self) -> bool:
        return all(self._by_alias.get(spec.alias) for spec in SYSTEM_COLLECTIONS)

    def validate(self) -> None:
        """
        Assert every alias resolves to exactly one collection.

        Raises:
            InvariantViolationError: If an alias is missing or ambiguous
        """
        for spec in SYSTEM_COLLECTIONS:
            ids = self._by_alias.get(spec.alias, [])
            if len(ids) != 1:
                raise InvariantViolationError(
                    "AliasResolver",
                    f"alias '{spec.alias}' resolves to {len(ids)} collections, expected 1",
                )
