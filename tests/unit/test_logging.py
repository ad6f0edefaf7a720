"""Tests for request-scoped logging context."""

import pytest
import structlog

from app.core.logging import clear_request_context, set_request_context


@pytest.mark.unit
class TestRequestContext:
    """Tests for binding and clearing request fields."""

    def test_binds_request_and_user(self) -> None:
        set_request_context("req-1", user_id="user-1")
        try:
            assert structlog.contextvars.get_contextvars() == {
                "request_id": "req-1",
                "user_id": "user-1",
            }
        finally:
            clear_request_context()

    def test_anonymous_request_has_no_user(self) -> None:
        set_request_context("req-1", user_id="user-1")
        set_request_context("req-2")
        try:
            assert structlog.contextvars.get_contextvars() == {"request_id": "req-2"}
        finally:
            clear_request_context()

    def test_clear(self) -> None:
        set_request_context("req-1")
        clear_request_context()
        assert structlog.contextvars.get_contextvars() == {}
