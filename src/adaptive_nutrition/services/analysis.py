"""Photo analysis: vision oracle, detection extraction and estimation."""

import logging
from dataclasses import dataclass, field

from adaptive_nutrition.domain.nutrition import Estimate, FoodItem, RawDetection
from adaptive_nutrition.domain.vision import VisionExtract
from adaptive_nutrition.services.extractor import DescriptionExtractor
from adaptive_nutrition.services.nutrition import NutritionService
from adaptive_nutrition.services.vision import VisionService

_logger = logging.getLogger(__name__)

DEMO_ITEMS: tuple[FoodItem, ...] = (
    FoodItem("Grilled Chicken", "150g", 248, 46.5, 0.0, 5.4),
    FoodItem("Rice", "1 cup", 206, 4.3, 44.5, 0.4),
    FoodItem("Vegetables", "100g", 65, 2.6, 13.0, 0.3),
)

NO_VISION_MESSAGE = "No vision API key configured. Showing demo data."
MODEL_LOADING_MESSAGE = "AI model is loading. Please try again in 30 seconds."
VISION_FAILED_MESSAGE = "Could not analyze image. Using demo data."
NOTHING_DETECTED_MESSAGE = "No food detected in the image. Using demo data."


@dataclass(frozen=True)
class AnalysisResult:
    """Estimates for one analyzed photo."""

    estimates: list[Estimate] = field(default_factory=list)
    demo_items: list[FoodItem] = field(default_factory=list)
    is_demo: bool = False
    message: str | None = None

    @property
    def items(self) -> list[FoodItem]:
        """Food items for display, demo data included."""
        if self.is_demo:
            return list(self.demo_items)
        return [estimate.item for estimate in self.estimates]

    @property
    def total_calories(self) -> int:
        """Sum of item calories."""
        return sum(item.calories for item in self.items)


@dataclass
class AnalysisService:
    """Run the vision oracle and estimate nutrition for what it saw."""

    nutrition_service: NutritionService
    vision_service: VisionService | None = None

    async def analyze(self, image_bytes: bytes) -> AnalysisResult:
        """Analyze a photo, falling back to demo data when vision is unusable."""
        if self.vision_service is None:
            return _demo(NO_VISION_MESSAGE)
        try:
            extract = await self.vision_service.extract(image_bytes)
        except Exception as exc:
            _logger.exception("Vision oracle failed")
            if _is_model_loading(exc):
                return _demo(MODEL_LOADING_MESSAGE)
            return _demo(VISION_FAILED_MESSAGE)

        estimates = self.estimate(extract)
        if not estimates:
            return _demo(NOTHING_DETECTED_MESSAGE)
        return AnalysisResult(estimates=estimates)

    def estimate(self, extract: VisionExtract) -> list[Estimate]:
        """Estimate every detection in a vision result, in order."""
        return self.nutrition_service.estimate_all(self.detections_for(extract))

    def detections_for(self, extract: VisionExtract) -> list[RawDetection]:
        """Prefer structured items; parse the caption when there are none."""
        if extract.items:
            return [
                RawDetection(name=item.name, quantity=item.quantity)
                for item in extract.items
            ]
        if extract.caption:
            _logger.info("Extracting foods from caption: %s", extract.caption)
            source = self.nutrition_service.current_source()
            return DescriptionExtractor(source).extract(extract.caption)
        return []


def _demo(message: str) -> AnalysisResult:
    return AnalysisResult(demo_items=list(DEMO_ITEMS), is_demo=True, message=message)


def _is_model_loading(exc: Exception) -> bool:
    response = getattr(exc, "response", None)
    if getattr(response, "status_code", None) == 503:
        return True
    return "loading" in str(exc).lower()
