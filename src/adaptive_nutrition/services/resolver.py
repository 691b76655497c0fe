"""Food name resolution against a nutrition source."""

from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum

from adaptive_nutrition.domain.nutrition import GENERIC_FOOD_NAMES, normalize_food_name

_MIN_TOKEN_LENGTH = 4


class MatchKind(StrEnum):
    """How a raw name was matched to a key."""

    EXACT = "exact"
    SUBSTRING = "substring"
    TOKEN = "token"


@dataclass(frozen=True)
class Resolved:
    """A raw name resolved to a canonical key."""

    key: str
    match: MatchKind


@dataclass(frozen=True)
class NotFound:
    """No key matched the raw name."""

    query: str


Resolution = Resolved | NotFound


@dataclass
class FoodResolver:
    """Resolve free-text food names to keys of an ordered source.

    Matching is exact, then bidirectional substring, then per-token substring.
    Ties go to the first key in the source's iteration order. Keys in
    `exact_only` never match fuzzily.
    """

    source: Mapping[str, object]
    exact_only: Collection[str] = GENERIC_FOOD_NAMES

    def resolve(self, raw_name: str) -> Resolution:
        """Return the matching key, or NotFound."""
        normalized = normalize_food_name(raw_name)
        if not normalized:
            return NotFound(query=raw_name)
        if normalized in self.source:
            return Resolved(key=normalized, match=MatchKind.EXACT)

        key = _first_overlap(normalized, self._fuzzy_keys())
        if key is not None:
            return Resolved(key=key, match=MatchKind.SUBSTRING)

        for token in normalized.split():
            if len(token) < _MIN_TOKEN_LENGTH:
                continue
            key = _first_overlap(token, self._fuzzy_keys())
            if key is not None:
                return Resolved(key=key, match=MatchKind.TOKEN)
        return NotFound(query=raw_name)

    def _fuzzy_keys(self) -> Iterable[str]:
        return (key for key in self.source if key not in self.exact_only)


def _first_overlap(text: str, keys: Iterable[str]) -> str | None:
    for key in keys:
        if key in text or text in key:
            return key
    return None
