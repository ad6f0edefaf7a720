"""
YouTube URL helpers.

Accepted shapes:
- https://www.youtube.com/watch?v=VIDEO_ID (extra query parameters allowed)
- https://youtu.be/VIDEO_ID
- https://www.youtube.com/embed/VIDEO_ID
"""

import re

_VIDEO_ID = r"([A-Za-z0-9_-]+)"

# The id must be followed by the end of the URL, a query string or a fragment
_ID_END = r"/?(?:[?#]|$)"

YOUTUBE_URL_PATTERNS = (
    re.compile(rf"^https?://(?:www\.|m\.)?youtube\.com/watch\?(?:[^#]*&)?v={_VIDEO_ID}(?:[&#]|$)"),
    re.compile(rf"^https?://youtu\.be/{_VIDEO_ID}{_ID_END}"),
    re.compile(rf"^https?://(?:www\.)?youtube(?:-nocookie)?\.com/embed/{_VIDEO_ID}{_ID_END}"),
)

EMBED_BASE_URL = "https://www.youtube.com/embed/"


def extract_video_id(url: str | None) -> str | None:
    """
    Extract the video id from a YouTube URL.

    Examples:
        >>> extract_video_id("https://youtu.be/abc123")
        'abc123'
        >>> extract_video_id("https://example.com/x") is None
        True
    """
    if not url:
        return None
    for pattern in YOUTUBE_URL_PATTERNS:
        match = pattern.match(url.strip())
        if match:
            return match.group(1)
    return None


def embed_url(video_id: str) -> str:
    """Canonical embeddable URL for a video id."""
    return f"{EMBED_BASE_URL}{video_id}"


def is_valid_youtube_url(url: str) -> bool:
    return extract_video_id(url) is not None
