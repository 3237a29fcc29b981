import base64
import binascii
import logging
from typing import Optional
from urllib.parse import quote, unquote

logger = logging.getLogger(__name__)


def encode_query_value(value: str) -> str:
    """
    Encode text as standard base64 of its UTF-8 bytes, then percent-encode it for a query string.

    Args:
        value (str): The text to encode.

    Returns:
        str: The encoded value. ``+``, ``/`` and ``=`` are escaped.
    """
    encoded = base64.b64encode(value.encode("utf-8")).decode("ascii")
    return quote(encoded, safe="")


def decode_query_value(value: str) -> Optional[str]:
    """
    Reverse :func:`encode_query_value`.

    Accepts the value either still percent-encoded or already unquoted, and tolerates
    URL-safe alphabet and missing padding.

    Returns:
        Optional[str]: The decoded text, or None if it is not valid base64 of UTF-8 text.
    """
    try:
        encoded = unquote(value).replace("-", "+").replace("_", "/")

        missing_padding = len(encoded) % 4
        if missing_padding:
            encoded += "=" * (4 - missing_padding)

        return base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        logger.debug(f"Failed to decode base64 query value '{value[:50]}...': {e}")
        return None
