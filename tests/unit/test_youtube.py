"""Tests for YouTube URL helpers."""

import pytest

from app.utils.youtube import embed_url, extract_video_id, is_valid_youtube_url


@pytest.mark.unit
class TestExtractVideoId:
    """Tests for extract_video_id()."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
            "https://youtube.com/watch?v=dQw4w9WgXcQ&t=42s",
            "https://www.youtube.com/watch?feature=share&v=dQw4w9WgXcQ",
            "https://youtu.be/dQw4w9WgXcQ",
            "https://youtu.be/dQw4w9WgXcQ?si=abc",
            "https://youtu.be/dQw4w9WgXcQ/",
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ#t=10",
            "https://www.youtube.com/embed/dQw4w9WgXcQ",
            "http://www.youtube-nocookie.com/embed/dQw4w9WgXcQ",
        ],
    )
    def test_accepted_shapes(self, url: str) -> None:
        assert extract_video_id(url) == "dQw4w9WgXcQ"

    @pytest.mark.parametrize(
        "url",
        [
            "https://vimeo.com/12345",
            "https://www.youtube.com/channel/UC123",
            "https://example.com/watch?v=dQw4w9WgXcQ",
            "https://youtu.be/dQw4w9WgXcQ/../anything",
            "https://www.youtube.com/embed/dQw4w9WgXcQ/extra",
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ/x",
            "https://youtu.be/abc.def",
            "not a url",
            "",
            None,
        ],
    )
    def test_rejected_shapes(self, url: str | None) -> None:
        assert extract_video_id(url) is None


@pytest.mark.unit
def test_embed_url() -> None:
    assert embed_url("dQw4w9WgXcQ") == "https://www.youtube.com/embed/dQw4w9WgXcQ"


@pytest.mark.unit
def test_is_valid_youtube_url() -> None:
    assert is_valid_youtube_url("https://youtu.be/abc_-123")
    assert not is_valid_youtube_url("https://example.com/video")
