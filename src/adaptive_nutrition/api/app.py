"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, File, HTTPException, Request, UploadFile, status
from fastapi.responses import JSONResponse

from adaptive_nutrition.api.models import CorrectionRequest, EstimateRequest
from adaptive_nutrition.app_logging import configure_logging
from adaptive_nutrition.containers import AppContainer
from adaptive_nutrition.domain.corrections import Correction, LearnedFood
from adaptive_nutrition.domain.nutrition import Estimate, FoodItem
from adaptive_nutrition.domain.vision import VisionExtract, VisionItem


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/analyze")
    async def analyze(
        request: Request, image: UploadFile | None = File(default=None)
    ) -> dict[str, object]:
        """Detect foods in an uploaded photo and estimate their nutrition."""
        if image is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="No image provided"
            )
        state_container: AppContainer = request.app.state.container
        image_bytes = await image.read()
        result = await state_container.analysis_service.analyze(image_bytes)
        food_items = (
            [_format_item(item) for item in result.items]
            if result.is_demo
            else [_format_estimate(estimate) for estimate in result.estimates]
        )
        return {
            "food_items": food_items,
            "total_calories": result.total_calories,
            "is_demo": result.is_demo,
            "message": result.message,
        }

    @app.post("/estimate")
    async def estimate(body: EstimateRequest, request: Request) -> dict[str, object]:
        """Estimate nutrition for detections or a caption supplied directly."""
        state_container: AppContainer = request.app.state.container
        extract = VisionExtract(
            items=[
                VisionItem(name=detection.name, quantity=detection.quantity)
                for detection in body.detections
                if detection.name.strip()
            ],
            caption=body.caption,
        )
        estimates = state_container.analysis_service.estimate(extract)
        return {
            "food_items": [_format_estimate(estimate) for estimate in estimates],
            "total_calories": sum(estimate.item.calories for estimate in estimates),
        }

    @app.post("/corrections", response_model=None)
    async def submit_correction(
        body: CorrectionRequest, request: Request
    ) -> dict[str, object] | JSONResponse:
        """Record a user correction and fold it into the learned baseline."""
        if not body.food_name or not body.food_name.strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Missing required fields",
            )
        if body.corrected_calories is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Missing required fields",
            )
        state_container: AppContainer = request.app.state.container
        receipt = state_container.correction_service.submit(_to_correction(body))
        if not receipt.recorded:
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": receipt.error},
            )
        if receipt.error:
            logger.warning(
                "Correction for %s stored without learning: %s",
                body.food_name,
                receipt.error,
            )
        return {
            "success": True,
            "learned": _format_learned(receipt.learned) if receipt.learned else None,
        }

    @app.get("/learned-foods")
    async def learned_food(request: Request, name: str | None = None) -> dict[str, object]:
        """Return the learned baseline for a food name."""
        if not name:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Food name required"
            )
        state_container: AppContainer = request.app.state.container
        food = state_container.learned_service.lookup(name)
        return {"food": _format_learned(food) if food else None}

    @app.post("/learned-foods")
    async def learned_foods(request: Request) -> dict[str, object]:
        """Return all learned foods confident enough to override reference data."""
        state_container: AppContainer = request.app.state.container
        foods = state_container.learned_service.snapshot()
        return {"foods": [_format_learned(food) for food in foods]}

    return app


def _format_item(item: FoodItem) -> dict[str, object]:
    return asdict(item)


def _format_estimate(estimate: Estimate) -> dict[str, object]:
    payload = _format_item(estimate.item)
    payload["calories_per_100g"] = estimate.density.calories
    payload["protein_per_100g"] = estimate.density.protein_g
    payload["carbs_per_100g"] = estimate.density.carbs_g
    payload["fat_per_100g"] = estimate.density.fat_g
    payload["source"] = estimate.origin.value
    return payload


def _format_learned(food: LearnedFood) -> dict[str, object]:
    payload = asdict(food)
    payload["last_updated"] = (
        food.last_updated.isoformat() if food.last_updated else None
    )
    return payload


def _to_correction(body: CorrectionRequest) -> Correction:
    return Correction(
        food_name=body.food_name or "",
        original_quantity=body.original_quantity,
        corrected_quantity=body.corrected_quantity,
        original_calories=body.original_calories,
        corrected_calories=body.corrected_calories or 0.0,
        original_protein_g=body.original_protein,
        corrected_protein_g=body.corrected_protein,
        original_carbs_g=body.original_carbs,
        corrected_carbs_g=body.corrected_carbs,
        original_fat_g=body.original_fat,
        corrected_fat_g=body.corrected_fat,
        user_id=body.user_id,
    )
