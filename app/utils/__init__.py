"""
Utility functions
"""

from app.utils.locale import has_locale, resolve
from app.utils.slug import next_available_slug, slugify
from app.utils.youtube import embed_url, extract_video_id, is_valid_youtube_url

__all__ = [
    "embed_url",
    "extract_video_id",
    "has_locale",
    "is_valid_youtube_url",
    "next_available_slug",
    "resolve",
    "slugify",
]
