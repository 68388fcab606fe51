"""Tests for the rate limit exceeded handler."""

import json
from unittest.mock import MagicMock

import pytest
from starlette.requests import Request

from core.ratelimit import rate_limit_exceeded_handler


def _request() -> Request:
    return Request(
        {
            "type": "http",
            "method": "POST",
            "path": "/artists",
            "headers": [],
            "query_string": b"",
            "client": ("10.0.0.1", 1234),
        }
    )


@pytest.mark.unit
class TestRateLimitExceededHandler:
    def test_renders_envelope(self):
        exc = MagicMock(spec=Exception)
        exc.retry_after = 30

        response = rate_limit_exceeded_handler(_request(), exc)

        assert response.status_code == 429
        assert response.headers["retry-after"] == "30"
        assert json.loads(response.body) == {
            "statusCode": 429,
            "status": "TOO_MANY_REQUESTS",
            "message": "Rate limit exceeded. Please slow down.",
        }

    def test_defaults_retry_after(self):
        response = rate_limit_exceeded_handler(_request(), RuntimeError("limit"))

        assert response.headers["retry-after"] == "60"
