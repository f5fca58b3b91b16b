from .collection import Collection
from .content_item import ContentItem, Course

__all__ = ["Collection", "ContentItem", "Course"]
