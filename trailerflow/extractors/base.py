from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

import asyncio
import httpx
import logging

from trailerflow.configs import settings
from trailerflow.utils.http_utils import create_httpx_client, DownloadError

logger = logging.getLogger(__name__)


class ExtractorError(Exception):
    """Base exception for all extractors."""
    pass


class BaseExtractor(ABC):
    """Base class for all URL extractors.

    Requests go through ``client`` when one is given, otherwise through a fresh
    client from :func:`create_httpx_client` per request. Transient network errors
    are retried with exponential backoff.
    """

    def __init__(self, request_headers: Optional[dict] = None, client: Optional[httpx.AsyncClient] = None):
        self.base_headers = {
            "user-agent": settings.user_agent,
        }
        self.proxy_endpoint = "m3u8_proxy"
        self.client = client
        self.base_headers.update(request_headers or {})

    @asynccontextmanager
    async def _client(self, timeout: httpx.Timeout) -> AsyncIterator[httpx.AsyncClient]:
        if self.client is not None:
            yield self.client
        else:
            async with create_httpx_client(timeout=timeout) as client:
                yield client

    async def _make_request(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[Dict] = None,
        timeout: Optional[float] = None,
        retries: Optional[int] = None,
        backoff_factor: Optional[float] = None,
        raise_on_status: bool = True,
        **kwargs,
    ) -> httpx.Response:
        """
        Make HTTP request with retry and timeout support.

        Parameters
        ----------
        timeout : float | None
            Seconds to wait for the request. Defaults to ``transport_config.timeout``.
        retries : int | None
            Number of attempts for transient errors. Defaults to ``transport_config.retries``.
        backoff_factor : float | None
            Base for exponential backoff between retries. Defaults to ``transport_config.backoff_factor``.
        raise_on_status : bool
            If True, HTTP non-2xx raises DownloadError (preserves status code).
        """
        transport_config = settings.transport_config
        retries = retries if retries is not None else transport_config.retries
        backoff_factor = backoff_factor if backoff_factor is not None else transport_config.backoff_factor
        attempt = 0
        last_exc = None

        request_headers = self.base_headers.copy()
        if headers:
            request_headers.update(headers)

        timeout_cfg = httpx.Timeout(timeout or transport_config.timeout)

        while attempt < max(retries, 1):
            try:
                async with self._client(timeout_cfg) as client:
                    response = await client.request(
                        method,
                        url,
                        headers=request_headers,
                        **kwargs,
                    )

                    if raise_on_status and not response.is_success:
                        logger.debug(
                            "HTTP status %s for %s -- body preview: %s",
                            response.status_code,
                            url,
                            response.text[:500],
                        )
                        raise DownloadError(
                            response.status_code, f"HTTP error {response.status_code} while requesting {url}"
                        )
                    return response

            except DownloadError:
                raise
            except httpx.TransportError as e:
                last_exc = e
                attempt += 1
                if attempt >= retries:
                    break
                sleep_for = backoff_factor * (2 ** (attempt - 1))
                logger.warning(
                    "Transient network error (attempt %s/%s) for %s: %s, retrying in %.1fs",
                    attempt,
                    retries,
                    url,
                    e,
                    sleep_for,
                )
                await asyncio.sleep(sleep_for)
            except Exception as e:
                logger.exception("Unhandled exception while requesting %s: %s", url, e)
                raise ExtractorError(f"Request failed for URL {url}: {str(e)}")

        logger.error("All retries failed for %s: %s", url, last_exc)
        raise ExtractorError(f"Request failed for URL {url}: {str(last_exc)}")

    @abstractmethod
    async def extract(self, url: str, **kwargs) -> Dict[str, Any]:
        """Extract final URL and required headers."""
        pass
