import logging
import typing

from trailerflow.schemas import FileStream, HlsStream, ProxyOptions, ProxyPayload, StreamFlag
from trailerflow.utils.proxy_utils import ProxyConfig, create_m3u8_proxy_url

logger = logging.getLogger(__name__)

AnyStream = typing.Union[HlsStream, FileStream]


def requires_proxy(stream: AnyStream) -> bool:
    """A stream needs the proxy unless it is CORS-allowed and sends no custom headers."""
    return StreamFlag.CORS_ALLOWED not in stream.flags or bool(stream.headers)


def setup_proxy(stream: AnyStream, config: typing.Optional[ProxyConfig] = None) -> AnyStream:
    """
    Rewrite the URLs of ``stream`` in place so they go through the M3U8 proxy.

    The proxy takes over the stream's headers and CORS handling, so afterwards the stream
    has no headers and is flagged CORS-allowed only.

    Args:
        stream: The stream to rewrite.
        config (ProxyConfig, optional): Proxy configuration. Defaults to the process-wide one.

    Returns:
        The same stream object.
    """
    headers = dict(stream.headers) if stream.headers else None

    payload = ProxyPayload(headers=headers)
    if isinstance(stream, HlsStream):
        # The proxy infers nesting from the stream type; depth is not sent yet.
        payload.options = ProxyOptions(depth=stream.proxy_depth if stream.proxy_depth is not None else 0)
        payload.type = "hls"
        payload.url = stream.playlist
        stream.playlist = create_m3u8_proxy_url(stream.playlist, headers=headers, config=config)

    elif isinstance(stream, FileStream):
        payload.type = "mp4"
        for quality, file in stream.qualities.items():
            payload.url = file.url
            file.url = create_m3u8_proxy_url(file.url, headers=headers, config=config)
            logger.debug(f"Proxied {quality} file of stream {stream.id!r}")

    logger.debug(f"Proxy payload for stream {stream.id!r}: {payload.model_dump(exclude_none=True)}")

    stream.headers = {}
    stream.flags = [StreamFlag.CORS_ALLOWED]
    return stream
