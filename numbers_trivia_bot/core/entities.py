"""Typed extraction of single values from an NLU entity set.

WHY: An entity set maps names to ordered candidate lists, and the
resolver only ever wants the best candidate of a few known entities.
Centralizing the "first value or absent" rule keeps the resolver readable
and pins down what counts as absent.

HOW: first_entity_value() takes element 0 of a non-empty candidate list,
unwraps one level of {"value": ...} nesting, and returns the value as a
string, or None when the entity is absent.

RULES:
- Missing key, non-list, or empty list → None
- None, "" and False → None; 0 is a real value ("0")
- Whole-number floats are rendered without the fractional part (42.0 → "42")
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

Entities = Dict[str, List[Dict[str, Any]]]

ENTITY_INTENT = "intent"
ENTITY_NUMBER = "number"
ENTITY_RANDOM = "random"
ENTITY_TYPE = "type"


def first_entity_value(entities: Optional[Entities], name: str) -> Optional[str]:
    """Return the first candidate value of an entity, or None if absent."""
    if not entities:
        return None

    candidates = entities.get(name)
    if not isinstance(candidates, list) or not candidates:
        return None

    first = candidates[0]
    value = first.get("value") if isinstance(first, dict) else first
    if isinstance(value, dict):
        value = value.get("value")

    return _as_text(value)


def _as_text(value: Any) -> Optional[str]:
    if value is None or value is False:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None
