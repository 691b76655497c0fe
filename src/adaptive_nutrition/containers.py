"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from adaptive_nutrition.adapters.huggingface_caption_client import HttpxCaptionClient
from adaptive_nutrition.adapters.openai_vision_client import OpenAIVisionClient
from adaptive_nutrition.adapters.supabase_correction_repository import (
    SupabaseCorrectionRepository,
)
from adaptive_nutrition.adapters.supabase_learned_food_repository import (
    SupabaseLearnedFoodRepository,
)
from adaptive_nutrition.config import Settings
from adaptive_nutrition.services.analysis import AnalysisService
from adaptive_nutrition.services.cache import InMemoryCache
from adaptive_nutrition.services.corrections import (
    CorrectionAggregator,
    CorrectionService,
)
from adaptive_nutrition.services.learned import LearnedBaselineService
from adaptive_nutrition.services.nutrition import NutritionEstimator, NutritionService
from adaptive_nutrition.services.quantity import QuantityParser
from adaptive_nutrition.services.reference import ReferenceTable
from adaptive_nutrition.services.vision import VisionClient, VisionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    learned_service: LearnedBaselineService
    nutrition_service: NutritionService
    analysis_service: AnalysisService
    correction_service: CorrectionService
    close_resources: Callable[[], Awaitable[None]]


def build_vision_client(settings: Settings) -> VisionClient | None:
    """Create the configured vision client, or None without an API key."""
    api_key = settings.vision_api_key()
    if not api_key:
        return None
    if settings.vision_provider == "openai":
        return OpenAIVisionClient.create(
            api_key=api_key,
            model=settings.openai_model,
            reasoning_effort=settings.openai_reasoning_effort,
        )
    return HttpxCaptionClient.create(
        api_key=api_key,
        base_url=settings.hf_base_url,
        model=settings.hf_caption_model,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    learned_repository = SupabaseLearnedFoodRepository(supabase_client)
    correction_repository = SupabaseCorrectionRepository(supabase_client)

    parser = QuantityParser()
    learned_service = LearnedBaselineService(
        repository=learned_repository,
        cache=InMemoryCache(),
        threshold=resolved_settings.learned_confidence_threshold,
        snapshot_limit=resolved_settings.learned_snapshot_limit,
        snapshot_ttl_seconds=resolved_settings.learned_snapshot_ttl_seconds,
    )
    nutrition_service = NutritionService(
        reference=ReferenceTable.default(),
        learned_service=learned_service,
        estimator=NutritionEstimator(parser=parser),
    )
    vision_client = build_vision_client(resolved_settings)
    analysis_service = AnalysisService(
        nutrition_service=nutrition_service,
        vision_service=VisionService(vision_client) if vision_client else None,
    )
    correction_service = CorrectionService(
        repository=correction_repository,
        aggregator=CorrectionAggregator(
            repository=learned_repository,
            parser=parser,
            confidence_pivot=resolved_settings.confidence_pivot,
            max_attempts=resolved_settings.correction_max_attempts,
        ),
        learned_service=learned_service,
    )

    async def close_resources() -> None:
        if vision_client is not None:
            await vision_client.close()

    return AppContainer(
        settings=resolved_settings,
        learned_service=learned_service,
        nutrition_service=nutrition_service,
        analysis_service=analysis_service,
        correction_service=correction_service,
        close_resources=close_resources,
    )
