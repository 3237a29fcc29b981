DEFAULT_M3U8_PROXY_URL = "/api/proxy"

DESKTOP_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/91.0.4472.124 Safari/537.36"
)

IMDB_TITLE_URL = "https://www.imdb.com/title/{imdb_id}/"
IMDB_EMBED_URL = "https://www.imdb.com/videoembed/{video_id}"

# Checked in order; the first encoding of the source is used when none match.
PREFERRED_DEFINITIONS = ["720p", "1080p"]

# Field name that only appears inside the embedded player state.
ENCODINGS_ANCHOR = "videoLegacyEncodings"

STATE_PATTERNS = [
    r"IMDbReactInitialState\.push\(({[\s\S]*?})\)",
    r"window\.__INITIAL_STATE__\s*=\s*({[\s\S]*?})\s*;",
    r"IMDbReactInitialState\s*=\s*({[\s\S]*?})\s*;",
]
