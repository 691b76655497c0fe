"""Tests for container wiring."""

import asyncio

from adaptive_nutrition.adapters.huggingface_caption_client import HttpxCaptionClient
from adaptive_nutrition.adapters.openai_vision_client import OpenAIVisionClient
from adaptive_nutrition.config import Settings
from adaptive_nutrition.containers import build_container, build_vision_client


def test_build_container_creates_services(settings: Settings) -> None:
    container = build_container(settings)

    assert container.nutrition_service is not None
    assert container.analysis_service.vision_service is not None
    assert container.learned_service.threshold == settings.learned_confidence_threshold
    asyncio.run(container.close_resources())


def test_build_vision_client_per_provider(settings: Settings) -> None:
    caption_client = build_vision_client(settings)
    openai_client = build_vision_client(
        settings.model_copy(
            update={"vision_provider": "openai", "openai_api_key": "sk-test"}
        )
    )

    assert isinstance(caption_client, HttpxCaptionClient)
    assert isinstance(openai_client, OpenAIVisionClient)
    asyncio.run(caption_client.close())
    asyncio.run(openai_client.close())


def test_missing_key_disables_vision(settings: Settings) -> None:
    no_key = settings.model_copy(update={"hf_api_key": None})

    assert build_vision_client(no_key) is None

    container = build_container(no_key)
    assert container.analysis_service.vision_service is None
    asyncio.run(container.close_resources())
