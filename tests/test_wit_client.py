"""Tests for the Wit.ai client and response normalization."""

from __future__ import annotations

import httpx
import pytest

from numbers_trivia_bot.api.wit import WitAPIError, WitClient, normalize_response


def _client(handler, token: str = "wit-test-token") -> WitClient:
    return WitClient(
        access_token=token,
        base_url="https://wit.test",
        api_version="20240304",
        transport=httpx.MockTransport(handler),
    )


# ---------------------------------------------------------------------------
# normalize_response
# ---------------------------------------------------------------------------


class TestNormalizeResponse:

    def test_current_format(self):
        data = {
            "text": "math trivia about 7",
            "intents": [{"id": "1", "name": "trivia", "confidence": 0.98}],
            "entities": {
                "wit$number:number": [{"body": "7", "value": 7, "confidence": 1}],
                "type:type": [{"body": "math", "value": "math", "confidence": 0.9}],
            },
            "traits": {},
        }
        entities = normalize_response(data)
        assert entities["intent"][0]["value"] == "trivia"
        assert entities["number"] == [{"value": 7}]
        assert entities["type"] == [{"value": "math"}]

    def test_traits_merged(self):
        data = {"intents": [], "entities": {}, "traits": {"random": [{"value": "true"}]}}
        assert normalize_response(data) == {"random": [{"value": "true"}]}

    def test_legacy_flat_format(self):
        data = {
            "entities": {
                "intent": [{"value": "trivia", "confidence": 0.9}],
                "number": [{"value": 42}],
            }
        }
        entities = normalize_response(data)
        assert entities["intent"] == [{"value": "trivia"}]
        assert entities["number"] == [{"value": 42}]

    def test_empty_answer(self):
        assert normalize_response({"text": "hi", "intents": [], "entities": {}, "traits": {}}) == {}

    def test_candidates_without_value_dropped(self):
        data = {"entities": {"number:number": [{"body": "?"}]}}
        assert normalize_response(data) == {}

    def test_intents_keep_order(self):
        data = {"intents": [{"name": "trivia"}, {"name": "greeting"}]}
        values = [c["value"] for c in normalize_response(data)["intent"]]
        assert values == ["trivia", "greeting"]


# ---------------------------------------------------------------------------
# WitClient
# ---------------------------------------------------------------------------


class TestWitClient:

    def test_sends_query_and_token(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers["Authorization"]
            seen["q"] = request.url.params["q"]
            seen["v"] = request.url.params["v"]
            seen["path"] = request.url.path
            return httpx.Response(200, json={"intents": [{"name": "trivia"}]})

        entities = _client(handler).extract_entities("trivia please")

        assert seen == {
            "auth": "Bearer wit-test-token",
            "q": "trivia please",
            "v": "20240304",
            "path": "/message",
        }
        assert entities == {"intent": [{"value": "trivia", "confidence": None}]}

    def test_truncates_long_queries(self):
        seen = {}

        def handler(request):
            seen["q"] = request.url.params["q"]
            return httpx.Response(200, json={})

        _client(handler).message("x" * 500)
        assert len(seen["q"]) == 280

    def test_error_status_raises(self):
        def handler(request):
            return httpx.Response(400, text="bad token")

        with pytest.raises(WitAPIError) as excinfo:
            _client(handler).extract_entities("hi")

        assert excinfo.value.status_code == 400
        assert "bad token" in str(excinfo.value)

    def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("no route", request=request)

        with pytest.raises(WitAPIError) as excinfo:
            _client(handler).extract_entities("hi")

        assert excinfo.value.status_code == 0

    def test_missing_token_raises_value_error(self, monkeypatch):
        monkeypatch.delenv("WIT_TOKEN", raising=False)
        monkeypatch.delenv("wit_token", raising=False)

        client = WitClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json={})))

        with pytest.raises(ValueError):
            client.message("hi")
