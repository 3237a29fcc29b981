import logging
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query

from trailerflow.extractors.base import ExtractorError
from trailerflow.extractors.factory import ExtractorFactory
from trailerflow.utils.http_utils import DownloadError
from trailerflow.utils.proxy_utils import create_m3u8_proxy_url

extractor_router = APIRouter()
logger = logging.getLogger(__name__)


@extractor_router.get("/trailer")
async def extract_trailer(
    imdb_id: Annotated[str, Query(min_length=1, description="IMDb title id, e.g. tt0111161.")],
    proxy: Annotated[bool, Query(description="Also return the URL routed through the M3U8 proxy.")] = False,
):
    """Resolve the trailer of an IMDb title to a playable video URL."""
    try:
        extractor = ExtractorFactory.get_extractor("IMDb", {})
        response = await extractor.extract(imdb_id)
    except DownloadError as e:
        logger.error(f"Trailer extraction failed: {str(e)}")
        raise HTTPException(status_code=404, detail="No trailer available")
    except ExtractorError as e:
        logger.warning(f"Trailer extraction failed: {str(e)}")
        raise HTTPException(status_code=404, detail="No trailer available")

    response.pop("proxy_endpoint", None)
    if proxy:
        response["proxy_url"] = create_m3u8_proxy_url(response["destination_url"])
    return response
