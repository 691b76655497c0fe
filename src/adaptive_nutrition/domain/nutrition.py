"""Nutrition domain models."""

from dataclasses import dataclass
from enum import StrEnum


@dataclass(frozen=True)
class NutrientDensity:
    """Nutrient content per 100 grams of a food."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float

    @classmethod
    def of(
        cls, calories: float, protein_g: float, carbs_g: float, fat_g: float
    ) -> "NutrientDensity":
        """Build a density, clamping negative values to zero."""
        return cls(
            calories=max(0.0, float(calories)),
            protein_g=max(0.0, float(protein_g)),
            carbs_g=max(0.0, float(carbs_g)),
            fat_g=max(0.0, float(fat_g)),
        )


@dataclass(frozen=True)
class RawDetection:
    """Food name and quantity text as reported by the vision stage."""

    name: str
    quantity: str = ""


@dataclass(frozen=True)
class FoodItem:
    """Estimated nutrition for a single detected food."""

    name: str
    quantity: str
    calories: int
    protein_g: float
    carbs_g: float
    fat_g: float


class DensityOrigin(StrEnum):
    """Where the density used for an estimate came from."""

    REFERENCE = "reference"
    LEARNED = "learned"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class SourcedDensity:
    """Density tagged with its origin."""

    density: NutrientDensity
    origin: DensityOrigin


@dataclass(frozen=True)
class Estimate:
    """FoodItem plus the intermediate values used to compute it."""

    item: FoodItem
    grams: float
    density: NutrientDensity
    origin: DensityOrigin
    matched_key: str | None


# container words kept in the reference table as exact-match placeholders
GENERIC_FOOD_NAMES = frozenset({"plate", "food", "meal", "dish", "bowl"})

GENERIC_DENSITY = NutrientDensity(calories=150, protein_g=10, carbs_g=20, fat_g=6)


def normalize_food_name(name: str) -> str:
    """Return the canonical key form of a food name."""
    return name.lower().strip()
