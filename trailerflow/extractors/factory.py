from typing import Dict, Optional, Type

import httpx

from trailerflow.extractors.base import BaseExtractor, ExtractorError
from trailerflow.extractors.imdb import ImdbTrailerExtractor


class ExtractorFactory:
    """Factory for creating URL extractors."""

    _extractors: Dict[str, Type[BaseExtractor]] = {
        "IMDb": ImdbTrailerExtractor,
    }

    @classmethod
    def get_extractor(
        cls, host: str, request_headers: dict, client: Optional[httpx.AsyncClient] = None
    ) -> BaseExtractor:
        """Get appropriate extractor instance for the given host."""
        extractor_class = cls._extractors.get(host)
        if not extractor_class:
            raise ExtractorError(f"Unsupported host: {host}")
        return extractor_class(request_headers, client=client)
