"""Tests for the Numbers API client.

WHY: The client is the only place that talks to numbersapi.com. It must
build the right path, turn every failure into a TriviaResult instead of
an exception, and retry only what is worth retrying.

HOW: httpx.MockTransport stands in for the network; handlers record the
requests they see. Backoff is set to 0 so retries do not sleep.
"""

from __future__ import annotations

from typing import List

import httpx

from numbers_trivia_bot.api.models import LookupErrorKind, TriviaRequest
from numbers_trivia_bot.api.numbers import NumbersClient


def _client(handler, retries: int = 1) -> NumbersClient:
    return NumbersClient(
        base_url="http://numbers.test",
        retries=retries,
        backoff_s=0.0,
        transport=httpx.MockTransport(handler),
    )


class TestLookupSuccess:

    def test_returns_stripped_fact(self):
        def handler(request):
            return httpx.Response(200, text="42 is the answer.\n")

        result = _client(handler).lookup(TriviaRequest("42"))

        assert result.ok is True
        assert result.text == "42 is the answer."
        assert result.error is None

    def test_general_path_has_trailing_slash(self):
        seen: List[str] = []

        def handler(request):
            seen.append(request.url.path)
            return httpx.Response(200, text="fact")

        _client(handler).lookup(TriviaRequest("42", ""))
        assert seen == ["/42/"]

    def test_category_in_path(self):
        seen: List[str] = []

        def handler(request):
            seen.append(request.url.path)
            return httpx.Response(200, text="fact")

        _client(handler).fetch(7, "math")
        assert seen == ["/7/math"]

    def test_fetch_normalizes_general(self):
        seen: List[str] = []

        def handler(request):
            seen.append(request.url.path)
            return httpx.Response(200, text="fact")

        _client(handler).fetch("12", "general")
        assert seen == ["/12/"]

    def test_date_subject(self):
        seen: List[str] = []

        def handler(request):
            seen.append(request.url.path)
            return httpx.Response(200, text="fact")

        _client(handler).fetch("10/19", "date")
        assert seen == ["/10/19/date"]


class TestLookupFailure:

    def test_client_error_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(404, text="not found")

        result = _client(handler).lookup(TriviaRequest("abc"))

        assert result.ok is False
        assert result.error == LookupErrorKind.HTTP_STATUS
        assert result.status_code == 404
        assert len(calls) == 1

    def test_server_error_retried_once(self):
        responses = [httpx.Response(503), httpx.Response(200, text="fact")]
        calls = []

        def handler(request):
            calls.append(request)
            return responses.pop(0)

        result = _client(handler).lookup(TriviaRequest("1"))

        assert result.ok is True
        assert result.text == "fact"
        assert len(calls) == 2

    def test_transport_error_after_retries(self):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        result = _client(handler).lookup(TriviaRequest("1"))

        assert result.ok is False
        assert result.error == LookupErrorKind.TRANSPORT
        assert len(calls) == 2

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        result = _client(handler).lookup(TriviaRequest("1"))

        assert result.error == LookupErrorKind.TIMEOUT

    def test_no_retries_configured(self):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("down", request=request)

        _client(handler, retries=0).lookup(TriviaRequest("1"))
        assert len(calls) == 1
