from .collection_mapper import CollectionMapper
from .content_item_mapper import ContentItemMapper

__all__ = ["CollectionMapper", "ContentItemMapper"]
