"""
Per-scope version counters for discarding stale fetches.

Every committed mutation bumps the version of the scope it touched. A fetch
captures the version when it is issued; if the version moved on by the time
the fetch resolves, its result predates a mutation and must not be trusted.
"""

from collections import defaultdict
from dataclasses import dataclass


@dataclass(frozen=True)
class FetchTicket:
    """Identity of a fetch: the scope it was issued for and when."""

    scope: str
    version: int


class ScopeVersions:
    """Monotonic version per scope plus the suppress-next-refresh token."""

    def __init__(self) -> None:
        self._versions: defaultdict[str, int] = defaultdict(int)
        self._suppressed: set[str] = set()

    def current(self, scope: str) -> int:
        return self._versions[scope]

    def bump(self, scope: str) -> int:
        self._versions[scope] += 1
        return self._versions[scope]

    def capture(self, scope: str) -> FetchTicket:
        return FetchTicket(scope=scope, version=self._versions[scope])

    def is_stale(self, ticket: FetchTicket) -> bool:
        return ticket.version < self._versions[ticket.scope]

    def suppress_next_refresh(self, scope: str) -> None:
        """The next refresh of ``scope`` becomes a no-op."""
        self._suppressed.add(scope)

    def consume_suppression(self, scope: str) -> bool:
        """True (once) if the next refresh of ``scope`` was suppressed."""
        if scope in self._suppressed:
            self._suppressed.discard(scope)
            return True
        return False
