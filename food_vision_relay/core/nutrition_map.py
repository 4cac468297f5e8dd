import re
from dataclasses import dataclass


@dataclass(frozen=True)
class CanonicalRule:
    pattern: re.Pattern
    canonical: str

    def matches(self, label: str) -> bool:
        return self.pattern.search(label) is not None


def _rule(pattern: str, canonical: str) -> CanonicalRule:
    return CanonicalRule(pattern=re.compile(pattern), canonical=canonical)


# Order matters: every matching rule overwrites the previous result.
DEFAULT_CANONICAL_RULES: tuple[CanonicalRule, ...] = (
    _rule(
        r'(spaghetti|penne|fusilli|farfalle|macaroni|rigatoni|tagliatelle|linguine|fettuccine|pasta|noodle)',
        'pasta',
    ),
    _rule(r'(fries|french\s*fries)', 'french fries'),
    _rule(r'(orange|mandarin|tangerine)', 'orange'),
)


def to_canonical_food(label: str, canonical: str, rules: tuple[CanonicalRule, ...] = DEFAULT_CANONICAL_RULES) -> str:
    """Resolve the lookup name for an already sanitized label.

    Falls back to the label when no canonical name was supplied, then lets each
    matching rule override it in table order.
    """
    resolved = canonical or label
    for rule in rules:
        if rule.matches(label):
            resolved = rule.canonical
    return resolved
