import logging
from typing import Optional

logger = logging.getLogger(__name__)


def match_braces(text: str, start: int = 0, string_aware: bool = True) -> Optional[str]:
    """
    Return the balanced ``{...}`` object beginning at the first opening brace at or after ``start``.

    Depth goes up on ``{`` and down on ``}``; the span ends where depth returns to zero.

    Args:
        text (str): The text to scan.
        start (int): Index to start scanning from.
        string_aware (bool): Skip braces inside double-quoted string literals (backslash escapes honoured).

    Returns:
        Optional[str]: The balanced span, or None if there is no opening brace or it is never closed.
    """
    begin = text.find("{", max(start, 0))
    if begin == -1:
        return None

    depth = 0
    in_string = False
    escape = False

    for i in range(begin, len(text)):
        ch = text[i]

        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"' and string_aware:
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[begin : i + 1]

    return None


def find_object_around(text: str, anchor: str, window: int = 200, string_aware: bool = True) -> Optional[str]:
    """
    Find the object that contains ``anchor`` and return it as a balanced span.

    The nearest ``{`` before the anchor is used. When there is none, the first ``{`` found
    from ``window`` characters before the anchor onwards is used instead.
    """
    anchor_idx = text.find(anchor)
    if anchor_idx == -1:
        return None

    start = text.rfind("{", 0, anchor_idx)
    if start == -1:
        start = text.find("{", max(0, anchor_idx - window))
    if start == -1:
        logger.debug(f"No opening brace near '{anchor}'")
        return None

    return match_braces(text, start, string_aware=string_aware)
