"""Numbers API request and result dataclasses.

WHY: Callers of the Numbers API need to know whether a lookup produced a
fact or failed, and why, without catching transport exceptions at every
call site. Typed value objects make the request shape and the outcome
explicit.

HOW: TriviaRequest builds the request path. TriviaResult is an explicit
ok/err value: ok carries the fact text, err carries a LookupErrorKind.

RULES:
- category is "" (general), "math" or "date"; "general" normalizes to ""
- The request path is always "{subject}/{category}"
- TriviaResult.ok is True exactly when text is set
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

CATEGORY_GENERAL = "general"
CATEGORY_MATH = "math"
CATEGORY_DATE = "date"

CATEGORIES = (CATEGORY_GENERAL, CATEGORY_MATH, CATEGORY_DATE)

SUBJECT_RANDOM = "random"


def normalize_category(category: Optional[str]) -> str:
    """Map a category name to the value used in the request path.

    RULES:
    - None, "" and "general" all mean the general category → ""
    """
    if not category or category == CATEGORY_GENERAL:
        return ""
    return category


class LookupErrorKind(str, enum.Enum):
    """Why a Numbers API lookup failed."""

    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    HTTP_STATUS = "http_status"


@dataclass(frozen=True)
class TriviaRequest:
    """A single trivia lookup: a subject plus an optional category."""

    subject: str
    category: str = ""

    @classmethod
    def build(cls, subject: object, category: Optional[str] = None) -> TriviaRequest:
        return cls(subject=str(subject), category=normalize_category(category))

    @property
    def path(self) -> str:
        return "{}/{}".format(self.subject, self.category)


@dataclass(frozen=True)
class TriviaResult:
    """Outcome of a lookup: either a fact or an error kind."""

    text: Optional[str] = None
    error: Optional[LookupErrorKind] = None
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.text is not None

    @classmethod
    def success(cls, text: str) -> TriviaResult:
        return cls(text=text)

    @classmethod
    def failure(cls, kind: LookupErrorKind, status_code: Optional[int] = None) -> TriviaResult:
        return cls(error=kind, status_code=status_code)
