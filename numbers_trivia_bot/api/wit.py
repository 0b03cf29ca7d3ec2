"""HTTP client for the Wit.ai natural-language understanding API.

WHY: The conversational flow needs intent and entity extraction ("tell me
a math fact about 7" → intent=trivia, number=7, type=math). Wit.ai does
that extraction; this module asks it and reshapes the answer into the
entity-set form the resolver consumes.

HOW: GET /message?v=...&q=... with a Bearer token via httpx. The response
(either the current format with "intents", "name:role" entity keys and
"traits", or the legacy flat entity map) is normalized into
{name: [{"value": ...}, ...]}.

RULES:
- Raises WitAPIError on transport failures and non-200 responses
- Queries are truncated to Wit's 280 character limit
- Entity names drop their ":role" suffix and any "wit$" prefix
- Entities with no candidates are omitted from the result
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from numbers_trivia_bot.config import (
    WIT_API_URL,
    WIT_API_VERSION,
    WIT_TIMEOUT_S,
    load_wit_token,
)

logger = logging.getLogger(__name__)

_MAX_QUERY_CHARS = 280


class WitAPIError(Exception):
    """Raised when Wit.ai cannot be reached or returns an error response.

    RULES:
    - status_code is 0 when no HTTP response was received
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"Wit.ai error {status_code}: {message}")


class WitClient:
    """Client for Wit.ai's /message endpoint.

    RULES:
    - access_token defaults to load_wit_token(), resolved on first request
    - transport is only passed in tests (httpx.MockTransport)
    """

    def __init__(
        self,
        access_token: Optional[str] = None,
        base_url: Optional[str] = None,
        api_version: Optional[str] = None,
        timeout_s: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._access_token = access_token
        self._base_url = (base_url or WIT_API_URL).rstrip("/")
        self._api_version = api_version or WIT_API_VERSION
        self._timeout_s = WIT_TIMEOUT_S if timeout_s is None else timeout_s
        self._transport = transport

    def message(self, text: str) -> Dict[str, Any]:
        """Send text to Wit.ai and return the raw JSON answer."""
        token = self._access_token or load_wit_token()
        params = {"v": self._api_version, "q": text[:_MAX_QUERY_CHARS]}

        try:
            with httpx.Client(
                base_url=self._base_url,
                timeout=self._timeout_s,
                transport=self._transport,
            ) as http:
                resp = http.get(
                    "/message",
                    params=params,
                    headers={"Authorization": f"Bearer {token}"},
                )
        except httpx.HTTPError as exc:
            raise WitAPIError(0, str(exc) or exc.__class__.__name__) from exc

        if resp.status_code != 200:
            raise WitAPIError(resp.status_code, resp.text)

        return resp.json()

    def extract_entities(self, text: str) -> Dict[str, List[Dict[str, Any]]]:
        """Return the normalized entity set for a piece of free text."""
        data = self.message(text)
        entities = normalize_response(data)
        logger.debug("Wit.ai entities for %r: %s", text, entities)
        return entities


def normalize_response(data: Dict[str, Any]) -> Dict[str, List[Dict[str, Any]]]:
    """Reshape a Wit.ai /message answer into {name: [{"value": ...}, ...]}.

    WHY: Wit's current API reports intents, entities and traits in three
    separate structures with "name:role" keys, while the resolver only
    cares about named candidate lists.

    RULES:
    - "intents" become the "intent" entity, ordered as Wit returned them
    - Entity keys "wit$number:number" and "number:number" both become "number"
    - Traits are merged in under their own names
    - The legacy flat format (entities carrying "intent") passes through
    """
    entities: Dict[str, List[Dict[str, Any]]] = {}

    intents = data.get("intents") or []
    intent_values = [
        {"value": intent["name"], "confidence": intent.get("confidence")}
        for intent in intents
        if isinstance(intent, dict) and intent.get("name")
    ]
    if intent_values:
        entities["intent"] = intent_values

    for section in ("entities", "traits"):
        for key, candidates in (data.get(section) or {}).items():
            name = _entity_name(key)
            entities.setdefault(name, []).extend(_candidate_values(candidates))

    return {name: values for name, values in entities.items() if values}


def _entity_name(key: str) -> str:
    name = key.split(":", 1)[0]
    if name.startswith("wit$"):
        name = name[len("wit$"):]
    return name


def _candidate_values(candidates: Any) -> List[Dict[str, Any]]:
    if not isinstance(candidates, list):
        return []
    return [
        {"value": candidate.get("value")}
        for candidate in candidates
        if isinstance(candidate, dict) and "value" in candidate
    ]
