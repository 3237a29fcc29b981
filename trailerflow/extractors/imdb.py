import logging
import re
from typing import Any, Dict, List, Optional

import httpx

from trailerflow.const import IMDB_EMBED_URL, IMDB_TITLE_URL, PREFERRED_DEFINITIONS
from trailerflow.extractors.base import BaseExtractor, ExtractorError
from trailerflow.schemas import VideoEncoding
from trailerflow.utils.http_utils import DownloadError
from trailerflow.utils.state_extractor import extract_state, find_video_encodings

logger = logging.getLogger(__name__)

VIDEO_ID_PATTERN = re.compile(r"/video/(vi\d+)")


def select_encoding(encodings: List[VideoEncoding]) -> VideoEncoding:
    """Pick the first encoding of the most preferred definition, falling back to the first encoding."""
    for definition in PREFERRED_DEFINITIONS:
        for encoding in encodings:
            if encoding.definition == definition:
                return encoding
    return encodings[0]


class ImdbTrailerExtractor(BaseExtractor):
    """IMDb trailer extractor.

    Resolves a title id (``tt...``) to a direct trailer video URL in two steps: the
    title page links the trailer's video id, and the embed page for that video
    carries the player state with the available encodings.
    """

    async def _fetch_page(self, url: str, label: str) -> str:
        response = await self._make_request(url, raise_on_status=False)
        if not response.is_success:
            logger.error(f"Failed to fetch IMDb {label} {url}: {response.status_code} {response.reason_phrase}")
            raise DownloadError(response.status_code, f"Failed to fetch IMDb {label}: {response.reason_phrase}")
        return response.text

    async def fetch_title_page(self, imdb_id: str) -> str:
        return await self._fetch_page(IMDB_TITLE_URL.format(imdb_id=imdb_id), "title page")

    @staticmethod
    def find_video_id(title_page: str) -> str:
        match = VIDEO_ID_PATTERN.search(title_page)
        if not match:
            raise ExtractorError("IMDb: no trailer video id on title page")
        return match.group(1)

    async def fetch_embed_page(self, video_id: str) -> str:
        return await self._fetch_page(IMDB_EMBED_URL.format(video_id=video_id), "embed page")

    @staticmethod
    def find_video_url(embed_page: str) -> str:
        state = extract_state(embed_page)
        if state is None:
            raise ExtractorError("IMDb: no player state on embed page")

        encodings = find_video_encodings(state)
        if not encodings:
            raise ExtractorError("IMDb: no video encodings in player state")

        encoding = select_encoding(encodings)
        if not encoding.video_url:
            raise ExtractorError(f"IMDb: {encoding.definition or 'selected'} encoding has no video URL")
        return encoding.video_url

    async def extract(self, url: str, **kwargs) -> Dict[str, Any]:
        """Extract the trailer URL for the IMDb title id ``url``."""
        imdb_id = url
        if not imdb_id:
            raise ExtractorError("IMDb: empty title id")

        title_page = await self.fetch_title_page(imdb_id)
        video_id = self.find_video_id(title_page)
        embed_page = await self.fetch_embed_page(video_id)
        video_url = self.find_video_url(embed_page)

        return {
            "destination_url": video_url,
            "request_headers": self.base_headers,
            "proxy_endpoint": self.proxy_endpoint,
        }

    async def resolve(self, imdb_id: str) -> Optional[str]:
        """Return the trailer URL for ``imdb_id``, or None when it cannot be resolved."""
        if not imdb_id:
            return None

        try:
            result = await self.extract(imdb_id)
        except DownloadError:
            return None
        except ExtractorError as e:
            logger.warning(f"No trailer for {imdb_id}: {e}")
            return None
        except httpx.HTTPError as e:
            logger.error(f"An error occurred while scraping IMDb trailer for {imdb_id}: {e}")
            return None
        return result["destination_url"]


async def scrape_imdb_trailer(imdb_id: str, client: Optional[httpx.AsyncClient] = None) -> Optional[str]:
    return await ImdbTrailerExtractor({}, client=client).resolve(imdb_id)
