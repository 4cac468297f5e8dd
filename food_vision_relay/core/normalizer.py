"""Turns the vision model's raw answer into a short, ranked list of foods.

The upstream text is untrusted: it is parsed, checked against the expected
shape, then every item is cleaned, vague labels are dropped, canonical names
are resolved and the survivors are ranked by confidence.
"""

import json
import math
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from food_vision_relay.core.errors import ParseError, SchemaError
from food_vision_relay.core.nutrition_map import DEFAULT_CANONICAL_RULES, CanonicalRule, to_canonical_food
from food_vision_relay.core.types import RecognizedItem
from food_vision_relay.schemas import UpstreamItemIn, UpstreamPayloadIn

BANNED_TERMS = frozenset({'snack', 'food', 'meal', 'dish', 'appetizer', 'plate', 'junk food'})


@dataclass(frozen=True)
class NormalizerConfig:
    banned_terms: frozenset[str] = BANNED_TERMS
    rules: tuple[CanonicalRule, ...] = DEFAULT_CANONICAL_RULES
    max_items: int = 5
    excerpt_chars: int = 400

    def with_extra_banned_terms(self, terms: set[str]) -> 'NormalizerConfig':
        cleaned = {_clean_text(term) for term in terms}
        cleaned.discard('')
        return NormalizerConfig(
            banned_terms=self.banned_terms | frozenset(cleaned),
            rules=self.rules,
            max_items=self.max_items,
            excerpt_chars=self.excerpt_chars,
        )


DEFAULT_CONFIG = NormalizerConfig()


@dataclass
class _Candidate:
    label: str
    canonical: str
    confidence: float


def _reject_constant(value: str) -> Any:
    raise ValueError(f'non-standard JSON constant {value}')


def _clean_text(value: Any) -> str:
    # Lone surrogates are valid JSON escapes but cannot be encoded as UTF-8.
    text = str(value or '').encode('utf-8', 'ignore').decode('utf-8')
    return text.strip().lower()


def _clamp_confidence(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return max(0.0, min(1.0, number))


def parse_payload(raw_text: str, excerpt_chars: int = 400) -> Any:
    try:
        # Integers are read as floats so an oversized one overflows to inf.
        return json.loads(raw_text, parse_int=float, parse_constant=_reject_constant)
    except (TypeError, ValueError, RecursionError) as exc:
        excerpt = raw_text[:excerpt_chars] if isinstance(raw_text, str) else ''
        raise ParseError(excerpt) from exc


def validate_payload(data: Any) -> UpstreamPayloadIn:
    try:
        return UpstreamPayloadIn.model_validate(data)
    except ValidationError as exc:
        raise SchemaError() from exc


def sanitize_item(item: UpstreamItemIn) -> _Candidate:
    return _Candidate(
        label=_clean_text(item.label),
        canonical=_clean_text(item.canonical),
        confidence=_clamp_confidence(item.confidence),
    )


def is_allowed(candidate: _Candidate, banned_terms: frozenset[str]) -> bool:
    return bool(candidate.label) and candidate.label not in banned_terms


def rank_items(items: list[RecognizedItem], max_items: int) -> list[RecognizedItem]:
    # sorted() keeps equal confidences in input order, reverse=True included.
    ranked = sorted(items, key=lambda item: item.confidence, reverse=True)
    return ranked[: max(0, max_items)]


def normalize(raw_text: str, config: NormalizerConfig = DEFAULT_CONFIG) -> list[RecognizedItem]:
    """Parse, validate and normalize the upstream answer.

    Raises ParseError when the text is not JSON and SchemaError when the JSON
    has the wrong shape. Everything after validation is total.
    """
    payload = validate_payload(parse_payload(raw_text, config.excerpt_chars))

    items: list[RecognizedItem] = []
    for raw_item in payload.items:
        candidate = sanitize_item(raw_item)
        if not is_allowed(candidate, config.banned_terms):
            continue
        items.append(
            RecognizedItem(
                label=candidate.label,
                canonical=to_canonical_food(candidate.label, candidate.canonical, config.rules),
                confidence=candidate.confidence,
            )
        )
    return rank_items(items, config.max_items)
