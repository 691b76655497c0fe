"""Nutrition estimation for detected foods."""

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from adaptive_nutrition.domain.corrections import LearnedFood
from adaptive_nutrition.domain.nutrition import (
    GENERIC_DENSITY,
    DensityOrigin,
    Estimate,
    FoodItem,
    NutrientDensity,
    RawDetection,
    SourcedDensity,
)
from adaptive_nutrition.services.learned import LearnedBaselineService
from adaptive_nutrition.services.quantity import QuantityParser
from adaptive_nutrition.services.reference import ReferenceTable
from adaptive_nutrition.services.resolver import FoodResolver, NotFound

_DEFAULT_QUANTITY = "1 serving"

_logger = logging.getLogger(__name__)


def build_source(
    reference: Mapping[str, NutrientDensity],
    learned: Iterable[LearnedFood],
    threshold: float,
) -> dict[str, SourcedDensity]:
    """Merge confident learned foods over the reference table.

    Learned keys already in the reference table keep their position; new
    learned keys are appended in snapshot order.
    """
    source = {
        key: SourcedDensity(density=density, origin=DensityOrigin.REFERENCE)
        for key, density in reference.items()
    }
    for food in learned:
        if food.confidence_score < threshold or not food.food_name_normalized:
            continue
        source[food.food_name_normalized] = SourcedDensity(
            density=food.density, origin=DensityOrigin.LEARNED
        )
    return source


@dataclass
class NutritionEstimator:
    """Scale a resolved density by parsed grams."""

    parser: QuantityParser = field(default_factory=QuantityParser)
    fallback: NutrientDensity = GENERIC_DENSITY

    def estimate(
        self, detection: RawDetection, source: Mapping[str, SourcedDensity]
    ) -> Estimate:
        """Estimate one detection; unknown foods use the fallback density."""
        resolution = FoodResolver(source).resolve(detection.name)
        if isinstance(resolution, NotFound):
            _logger.debug("No nutrition match for %r, using fallback", detection.name)
            density, origin, matched_key = self.fallback, DensityOrigin.FALLBACK, None
        else:
            sourced = source[resolution.key]
            density, origin, matched_key = (
                sourced.density,
                sourced.origin,
                resolution.key,
            )

        grams = self.parser.parse_grams(detection.quantity, detection.name)
        multiplier = grams / 100.0
        item = FoodItem(
            name=detection.name,
            quantity=detection.quantity or _DEFAULT_QUANTITY,
            calories=int(_round_half_up(density.calories * multiplier)),
            protein_g=_round_half_up(density.protein_g * multiplier, 1),
            carbs_g=_round_half_up(density.carbs_g * multiplier, 1),
            fat_g=_round_half_up(density.fat_g * multiplier, 1),
        )
        return Estimate(
            item=item,
            grams=grams,
            density=density,
            origin=origin,
            matched_key=matched_key,
        )


@dataclass
class NutritionService:
    """Estimate detections against reference data and learned baselines."""

    reference: ReferenceTable
    learned_service: LearnedBaselineService
    estimator: NutritionEstimator = field(default_factory=NutritionEstimator)

    def current_source(self) -> dict[str, SourcedDensity]:
        """Return the effective nutrition source for this request."""
        return build_source(
            self.reference,
            self.learned_service.snapshot(),
            self.learned_service.threshold,
        )

    def estimate(self, detection: RawDetection) -> Estimate:
        """Estimate a single detection."""
        return self.estimator.estimate(detection, self.current_source())

    def estimate_all(self, detections: Sequence[RawDetection]) -> list[Estimate]:
        """Estimate detections in input order against one source snapshot."""
        if not detections:
            return []
        source = self.current_source()
        return [self.estimator.estimate(detection, source) for detection in detections]


def _round_half_up(value: float, digits: int = 0) -> float:
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale
