"""URL routing, query decoding, permessage-deflate streams and WebSocket route settings for HTTP and WebSocket servers."""

__version__ = "0.1.0"
__all__ = ["behavior", "deflate", "query", "router", "useragent"]