"""External service clients: the Numbers API and Wit.ai.

WHY: The bot depends on two outside services, one for trivia content and
one for understanding free text. This package keeps every outbound HTTP
call behind a client class so handlers never touch httpx directly.

HOW: Both clients use short-lived httpx.Client instances with explicit
timeouts. NumbersClient returns TriviaResult values; WitClient raises
WitAPIError and normalizes answers into entity sets.

RULES:
- All HTTP calls go through NumbersClient or WitClient
- Numbers lookups never raise; NLU failures raise WitAPIError
"""

from numbers_trivia_bot.api.models import TriviaRequest, TriviaResult
from numbers_trivia_bot.api.numbers import NumbersClient
from numbers_trivia_bot.api.wit import WitAPIError, WitClient

__all__ = ["NumbersClient", "TriviaRequest", "TriviaResult", "WitAPIError", "WitClient"]
