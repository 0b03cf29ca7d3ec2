"""Shared test fixtures for the numbers_trivia_bot test suite.

WHY: Most test modules need a stand-in Numbers API client and a quick way
to write Wit.ai-style entity sets. Centralizing them keeps the tests
short and consistent.

HOW: fake_numbers is a MagicMock with NumbersClient's interface whose
lookup()/fetch() succeed with the fact_text fixture. make_entities is a
factory fixture that builds {name: [{"value": ...}]} dicts from keyword
arguments.

RULES:
- No test talks to the real Numbers API, Wit.ai, or Slack
- HTTP clients are exercised through httpx.MockTransport
"""

from typing import Any, Dict, List
from unittest.mock import MagicMock

import pytest

from numbers_trivia_bot.api.models import LookupErrorKind, TriviaResult
from numbers_trivia_bot.api.numbers import NumbersClient

_FACT_TEXT = "42 is the number of laws of cricket."


@pytest.fixture
def fact_text():
    """The fact every fake_numbers lookup returns."""
    return _FACT_TEXT


@pytest.fixture
def make_entities():
    """Factory that builds an entity set with one candidate per keyword."""

    def _make(**values: Any) -> Dict[str, List[Dict[str, Any]]]:
        return {name: [{"value": value}] for name, value in values.items()}

    return _make


@pytest.fixture
def fake_numbers(fact_text):
    """NumbersClient stand-in whose lookups all succeed with fact_text."""
    client = MagicMock(spec=NumbersClient)
    client.lookup.return_value = TriviaResult.success(fact_text)
    client.fetch.return_value = TriviaResult.success(fact_text)
    return client


@pytest.fixture
def failing_numbers():
    """NumbersClient stand-in whose lookups all fail with a timeout."""
    client = MagicMock(spec=NumbersClient)
    client.lookup.return_value = TriviaResult.failure(LookupErrorKind.TIMEOUT)
    client.fetch.return_value = TriviaResult.failure(LookupErrorKind.TIMEOUT)
    return client
