"""
Extraction of the JSON state that player pages embed in their HTML.

Markup changes often, so extraction is an ordered cascade of strategies. Each
strategy returns the parsed JSON value or None, and the first non-None result wins.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Union

from pydantic import ValidationError

from trailerflow.const import ENCODINGS_ANCHOR, STATE_PATTERNS
from trailerflow.schemas import VideoEncoding
from trailerflow.utils.brace_matcher import find_object_around

logger = logging.getLogger(__name__)


def _loads(candidate: str) -> Optional[Any]:
    try:
        return json.loads(candidate)
    except (ValueError, RecursionError) as e:
        logger.debug(f"Candidate state is not usable JSON: {type(e).__name__}")
        return None


@dataclass(frozen=True)
class PatternStrategy:
    """Parses the first capture group of ``pattern``."""

    pattern: re.Pattern

    @property
    def name(self) -> str:
        return f"pattern:{self.pattern.pattern}"

    def extract(self, html: str) -> Optional[Any]:
        match = self.pattern.search(html)
        if not match or not match.group(1):
            return None
        return _loads(match.group(1))


@dataclass(frozen=True)
class AnchorStrategy:
    """Brace-matches the object surrounding a distinguishing field name."""

    anchor: str
    window: int = 200

    @property
    def name(self) -> str:
        return f"anchor:{self.anchor}"

    def extract(self, html: str) -> Optional[Any]:
        candidate = find_object_around(html, self.anchor, window=self.window)
        if candidate is None:
            return None
        return _loads(candidate)


Strategy = Union[PatternStrategy, AnchorStrategy]


@dataclass
class StateExtractor:
    patterns: Sequence[str] = field(default_factory=lambda: list(STATE_PATTERNS))
    anchor: Optional[str] = ENCODINGS_ANCHOR
    window: int = 200

    def __post_init__(self):
        self.strategies: List[Strategy] = [PatternStrategy(re.compile(p)) for p in self.patterns]
        if self.anchor:
            self.strategies.append(AnchorStrategy(self.anchor, self.window))

    def extract(self, html: str) -> Optional[Any]:
        """Return the state parsed by the first strategy that succeeds, or None."""
        for strategy in self.strategies:
            state = strategy.extract(html)
            if state is not None:
                logger.debug(f"Embedded state found using {strategy.name}")
                return state
            logger.debug(f"No usable state from {strategy.name}")
        return None


_default_extractor = StateExtractor()


def extract_state(html: str) -> Optional[Any]:
    return _default_extractor.extract(html)


def _locate_encodings(state: dict) -> Any:
    videos = state.get("videos")
    if isinstance(videos, dict) and videos.get(ENCODINGS_ANCHOR) is not None:
        return videos[ENCODINGS_ANCHOR]
    return state.get(ENCODINGS_ANCHOR)


def find_video_encodings(state: Any) -> Optional[List[VideoEncoding]]:
    """
    Return the encodings of a player state.

    ``videos.videoLegacyEncodings`` is used whenever it is present, even if empty; the
    top-level ``videoLegacyEncodings`` only when it is not. Entries that are not valid
    encodings are skipped and the rest keep their source order. None if no list or no
    valid entry is found.
    """
    if not isinstance(state, dict):
        return None

    raw = _locate_encodings(state)
    if not isinstance(raw, list) or not raw:
        return None

    encodings = []
    for entry in raw:
        try:
            encodings.append(VideoEncoding.model_validate(entry))
        except ValidationError as e:
            logger.debug(f"Skipping malformed encoding {entry!r}: {e.error_count()} error(s)")
    return encodings or None
