"""Quantity text parsing into grams."""

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum

_NUMBER_PATTERN = re.compile(r"(\d*\.?\d+)(?:\s*/\s*(\d*\.?\d+))?")
_WORD_PATTERN = re.compile(r"[a-z]+")

DEFAULT_UNIT_GRAMS = 100.0
# a thousand tonnes; larger parsed amounts are clamped
MAX_GRAMS = 1_000_000_000.0


class UnitKind(StrEnum):
    """Classification of a quantity unit."""

    MASS = "mass"
    VOLUME = "volume"
    COUNT = "count"
    NONE = "none"


_UNITS: dict[str, tuple[UnitKind, float]] = {
    "g": (UnitKind.MASS, 1.0),
    "gm": (UnitKind.MASS, 1.0),
    "gms": (UnitKind.MASS, 1.0),
    "gr": (UnitKind.MASS, 1.0),
    "gram": (UnitKind.MASS, 1.0),
    "grams": (UnitKind.MASS, 1.0),
    "kg": (UnitKind.MASS, 1000.0),
    "kgs": (UnitKind.MASS, 1000.0),
    "kilogram": (UnitKind.MASS, 1000.0),
    "kilograms": (UnitKind.MASS, 1000.0),
    "oz": (UnitKind.MASS, 28.35),
    "ounce": (UnitKind.MASS, 28.35),
    "ounces": (UnitKind.MASS, 28.35),
    "lb": (UnitKind.MASS, 453.6),
    "lbs": (UnitKind.MASS, 453.6),
    "pound": (UnitKind.MASS, 453.6),
    "pounds": (UnitKind.MASS, 453.6),
    # volumes are approximated as mass regardless of the food
    "cup": (UnitKind.VOLUME, 240.0),
    "cups": (UnitKind.VOLUME, 240.0),
    "tbsp": (UnitKind.VOLUME, 15.0),
    "tablespoon": (UnitKind.VOLUME, 15.0),
    "tablespoons": (UnitKind.VOLUME, 15.0),
    "tsp": (UnitKind.VOLUME, 5.0),
    "teaspoon": (UnitKind.VOLUME, 5.0),
    "teaspoons": (UnitKind.VOLUME, 5.0),
    "ml": (UnitKind.VOLUME, 1.0),
    "l": (UnitKind.VOLUME, 1000.0),
    "litre": (UnitKind.VOLUME, 1000.0),
    "liter": (UnitKind.VOLUME, 1000.0),
    "piece": (UnitKind.COUNT, DEFAULT_UNIT_GRAMS),
    "pieces": (UnitKind.COUNT, DEFAULT_UNIT_GRAMS),
    "pc": (UnitKind.COUNT, DEFAULT_UNIT_GRAMS),
    "pcs": (UnitKind.COUNT, DEFAULT_UNIT_GRAMS),
    "item": (UnitKind.COUNT, DEFAULT_UNIT_GRAMS),
    "items": (UnitKind.COUNT, DEFAULT_UNIT_GRAMS),
    "serving": (UnitKind.COUNT, DEFAULT_UNIT_GRAMS),
    "servings": (UnitKind.COUNT, DEFAULT_UNIT_GRAMS),
    "slice": (UnitKind.COUNT, DEFAULT_UNIT_GRAMS),
    "slices": (UnitKind.COUNT, DEFAULT_UNIT_GRAMS),
}

DEFAULT_PIECE_WEIGHTS: dict[str, float] = {
    "apple": 182.0,
    "banana": 118.0,
    "orange": 131.0,
    "egg": 50.0,
    "bread": 25.0,
    "roti": 40.0,
    "naan": 90.0,
    "idli": 40.0,
    "dosa": 100.0,
    "samosa": 60.0,
    "cookie": 15.0,
    "pizza": 107.0,
}


@dataclass(frozen=True)
class ParsedQuantity:
    """Result of parsing a quantity string."""

    amount: float
    unit: str | None
    kind: UnitKind
    grams: float


@dataclass
class QuantityParser:
    """Convert free-text quantities to grams.

    Count units use `piece_weights`, matched by substring against the food
    name, before falling back to 100 g per unit. Results are capped at
    `MAX_GRAMS`.
    """

    piece_weights: Mapping[str, float] = field(
        default_factory=lambda: dict(DEFAULT_PIECE_WEIGHTS)
    )

    def parse(self, quantity_text: str | None, food_name: str = "") -> ParsedQuantity:
        """Parse quantity text, degrading to 100 g per unit."""
        text = (quantity_text or "").lower()
        amount = _parse_amount(text)
        unit, kind, unit_grams = _classify_unit(text)
        if kind is UnitKind.COUNT:
            unit_grams = self._piece_weight(food_name) or DEFAULT_UNIT_GRAMS
        return ParsedQuantity(
            amount=amount,
            unit=unit,
            kind=kind,
            grams=min(amount * unit_grams, MAX_GRAMS),
        )

    def parse_grams(self, quantity_text: str | None, food_name: str = "") -> float:
        """Return grams for the quantity text; always positive."""
        return self.parse(quantity_text, food_name).grams

    def _piece_weight(self, food_name: str) -> float | None:
        name = food_name.lower()
        for food, weight in self.piece_weights.items():
            if food in name and weight > 0:
                return weight
        return None


def _parse_amount(text: str) -> float:
    match = _NUMBER_PATTERN.search(text)
    if match is None:
        return 1.0
    amount = float(match.group(1))
    if match.group(2) is not None:
        denominator = float(match.group(2))
        if denominator > 0:
            amount /= denominator
    return amount if math.isfinite(amount) and amount > 0 else 1.0


def _classify_unit(text: str) -> tuple[str | None, UnitKind, float]:
    for word in _WORD_PATTERN.findall(text):
        if word in _UNITS:
            kind, grams = _UNITS[word]
            return word, kind, grams
    return None, UnitKind.NONE, DEFAULT_UNIT_GRAMS
