from learnhub.infrastructure.identity.dependencies import CurrentUserId, get_current_user_id

__all__ = ["CurrentUserId", "get_current_user_id"]
