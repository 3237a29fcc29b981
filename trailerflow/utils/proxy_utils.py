import json
import logging
import re
import typing
from urllib import parse

from trailerflow.configs import settings
from trailerflow.schemas import FeatureMap, ProxyTarget, StreamFlag
from trailerflow.utils.base64_utils import decode_query_value, encode_query_value

logger = logging.getLogger(__name__)

LEGACY_PROXY_MARKER = "/m3u8-proxy?url="
LEGACY_PROXY_PREFIX = re.compile(r"https?://[^/]+/m3u8-proxy")


class ProxyConfig:
    """
    Holds the base URL of the M3U8 proxy.

    Changing the base affects URLs created afterwards; URLs already handed out are left alone.
    """

    def __init__(self, base_url: str):
        self._base_url = ""
        self.set_base(base_url)

    @classmethod
    def from_settings(cls) -> "ProxyConfig":
        return cls(settings.m3u8_proxy_url)

    def get_base(self) -> str:
        return self._base_url

    def set_base(self, base_url: str) -> None:
        if not base_url:
            raise ValueError("M3U8 proxy URL must not be empty")
        self._base_url = base_url

    def __repr__(self) -> str:
        return f"ProxyConfig({self._base_url!r})"


proxy_config = ProxyConfig.from_settings()


def set_m3u8_proxy_url(proxy_url: str) -> None:
    """Set the M3U8 proxy base used by every subsequent proxy URL."""
    proxy_config.set_base(proxy_url)
    logger.info(f"M3U8 proxy URL set to {proxy_url}")


def get_m3u8_proxy_url() -> str:
    return proxy_config.get_base()


def create_m3u8_proxy_url(
    url: str,
    features: typing.Optional[FeatureMap] = None,
    headers: typing.Optional[typing.Dict[str, str]] = None,
    config: typing.Optional[ProxyConfig] = None,
) -> str:
    """
    Build the proxy URL for ``url``: ``<base>?url=<b64 url>[&h=<b64 json headers>]``.

    Args:
        url (str): The URL to route through the proxy.
        features (FeatureMap, optional): Target capabilities. A target that does not require
            CORS-allowed streams proxies locally, so the original URL is returned.
        headers (dict, optional): Headers the proxy must send upstream. Omitted from the URL when empty.
        config (ProxyConfig, optional): Proxy configuration. Defaults to the process-wide one.

    Returns:
        str: The proxy URL.
    """
    if features is not None and StreamFlag.CORS_ALLOWED not in features.requires:
        return url

    base_url = (config or proxy_config).get_base()
    proxy_url = f"{base_url}?url={encode_query_value(url)}"
    if headers:
        proxy_url += f"&h={encode_query_value(json.dumps(headers, separators=(',', ':'), ensure_ascii=False))}"
    return proxy_url


def decode_m3u8_proxy_url(proxy_url: str) -> typing.Optional[ProxyTarget]:
    """
    Recover the destination URL and headers from a proxy URL.

    Returns:
        Optional[ProxyTarget]: None when the URL carries no decodable ``url`` parameter.
    """
    query = parse.parse_qs(parse.urlsplit(proxy_url).query)
    encoded_url = query.get("url", [None])[0]
    if not encoded_url:
        return None

    url = decode_query_value(encoded_url)
    if url is None:
        return None

    headers = {}
    encoded_headers = query.get("h", [None])[0]
    if encoded_headers:
        decoded_headers = decode_query_value(encoded_headers)
        if decoded_headers is not None:
            headers = json.loads(decoded_headers)

    return ProxyTarget(url=url, headers=headers)


def update_m3u8_proxy_url(url: str, config: typing.Optional[ProxyConfig] = None) -> str:
    """
    Point a legacy ``http(s)://<host>/m3u8-proxy?url=...`` URL at the configured proxy base.

    Only the scheme, host and ``/m3u8-proxy`` path are replaced; the query is kept as-is.
    Any other URL is returned unchanged.
    """
    if LEGACY_PROXY_MARKER not in url:
        return url
    base_url = (config or proxy_config).get_base()
    return LEGACY_PROXY_PREFIX.sub(lambda _: base_url, url, count=1)
