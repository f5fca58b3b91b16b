from .http_collection_gateway import HttpCollectionGateway, HttpConversationSource, TokenSession

__all__ = ["HttpCollectionGateway", "HttpConversationSource", "TokenSession"]
