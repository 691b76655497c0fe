"""Domain models for user corrections and learned baselines."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from adaptive_nutrition.domain.nutrition import NutrientDensity


@dataclass(frozen=True)
class Correction:
    """User edit of a displayed estimate."""

    food_name: str
    original_quantity: str | None
    corrected_quantity: str | None
    original_calories: float | None
    corrected_calories: float
    original_protein_g: float | None = None
    corrected_protein_g: float | None = None
    original_carbs_g: float | None = None
    corrected_carbs_g: float | None = None
    original_fat_g: float | None = None
    corrected_fat_g: float | None = None
    user_id: UUID | None = None


@dataclass(frozen=True)
class LearnedFood:
    """Per-food density aggregated from corrections."""

    food_name: str
    food_name_normalized: str
    avg_calories_per_100g: float
    avg_protein_per_100g: float
    avg_carbs_per_100g: float
    avg_fat_per_100g: float
    sample_count: int
    confidence_score: float
    last_updated: datetime | None = None

    @property
    def density(self) -> NutrientDensity:
        """Averages as a nutrient density."""
        return NutrientDensity.of(
            self.avg_calories_per_100g,
            self.avg_protein_per_100g,
            self.avg_carbs_per_100g,
            self.avg_fat_per_100g,
        )


@dataclass(frozen=True)
class CorrectionReceipt:
    """Outcome of a correction submission."""

    recorded: bool
    learned: LearnedFood | None
    error: str | None = None
