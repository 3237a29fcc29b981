from .proxy import proxy_router
from .extractor import extractor_router

__all__ = ["proxy_router", "extractor_router"]
