"""HTTP client for the public Numbers API (numbersapi.com).

WHY: Every trivia answer the bot gives, whether from the slash command, the
category buttons, the conversational flow, or the daily broadcast, is one
GET against the Numbers API. This module wraps that call behind a single
client so callers never deal with httpx or transport errors directly.

HOW: Uses a short-lived httpx.Client per lookup with an explicit timeout.
Transport errors and 5xx responses are retried once after a short backoff.
The outcome is returned as a TriviaResult (ok fact or error kind).

RULES:
- lookup() never raises for network or HTTP failures
- Retries only on timeouts, transport errors and 5xx; 4xx fails immediately
- Default timeout 5s, one retry, 0.5s backoff (all configurable)
- The response body is the fact text, stripped of surrounding whitespace
"""

from __future__ import annotations

import logging
import time
from typing import Optional

import httpx

from numbers_trivia_bot.api.models import LookupErrorKind, TriviaRequest, TriviaResult
from numbers_trivia_bot.config import (
    NUMBERS_API_URL,
    NUMBERS_RETRIES,
    NUMBERS_RETRY_BACKOFF_S,
    NUMBERS_TIMEOUT_S,
)

logger = logging.getLogger(__name__)


class NumbersClient:
    """Synchronous client for fetching trivia facts.

    RULES:
    - base_url defaults to NUMBERS_API_URL from config
    - transport is only passed in tests (httpx.MockTransport)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout_s: Optional[float] = None,
        retries: Optional[int] = None,
        backoff_s: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._base_url = (base_url or NUMBERS_API_URL).rstrip("/")
        self._timeout_s = NUMBERS_TIMEOUT_S if timeout_s is None else timeout_s
        self._retries = NUMBERS_RETRIES if retries is None else retries
        self._backoff_s = NUMBERS_RETRY_BACKOFF_S if backoff_s is None else backoff_s
        self._transport = transport

    def lookup(self, request: TriviaRequest) -> TriviaResult:
        """Fetch the fact for a request, retrying transient failures.

        Args:
            request: Subject and category to look up.

        Returns:
            TriviaResult.success(fact) or TriviaResult.failure(kind).
        """
        result = TriviaResult.failure(LookupErrorKind.TRANSPORT)
        attempts = self._retries + 1

        with httpx.Client(
            base_url=self._base_url,
            timeout=self._timeout_s,
            transport=self._transport,
        ) as http:
            for attempt in range(1, attempts + 1):
                result = self._attempt(http, request)
                if result.ok or not _is_retryable(result):
                    return result
                if attempt < attempts:
                    logger.warning(
                        "Numbers API lookup %s failed (%s), retrying in %.1fs",
                        request.path, result.error.value, self._backoff_s,
                    )
                    time.sleep(self._backoff_s)

        logger.error("Numbers API lookup %s failed: %s", request.path, result.error.value)
        return result

    def fetch(self, subject: object, category: Optional[str] = None) -> TriviaResult:
        """Shorthand for lookup(TriviaRequest.build(subject, category))."""
        return self.lookup(TriviaRequest.build(subject, category))

    @staticmethod
    def _attempt(http: httpx.Client, request: TriviaRequest) -> TriviaResult:
        try:
            resp = http.get("/" + request.path)
        except httpx.TimeoutException:
            return TriviaResult.failure(LookupErrorKind.TIMEOUT)
        except httpx.HTTPError:
            return TriviaResult.failure(LookupErrorKind.TRANSPORT)

        if resp.status_code != 200:
            return TriviaResult.failure(LookupErrorKind.HTTP_STATUS, resp.status_code)

        return TriviaResult.success(resp.text.strip())


def _is_retryable(result: TriviaResult) -> bool:
    if result.error in (LookupErrorKind.TIMEOUT, LookupErrorKind.TRANSPORT):
        return True
    return result.status_code is not None and result.status_code >= 500
