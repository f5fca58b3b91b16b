from typing import Protocol


class SessionProtocol(Protocol):
    """Who the engine is acting for."""

    def current_user_id(self) -> int | None:
        """ID of the signed-in user, or None when signed out."""
        ...
