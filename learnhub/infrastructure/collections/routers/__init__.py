from learnhub.infrastructure.collections.routers import collections, conversations, notes

__all__ = ["collections", "conversations", "notes"]
