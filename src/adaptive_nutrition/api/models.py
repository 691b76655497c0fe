"""Request bodies for the HTTP API."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _ApiModel(BaseModel):
    """Accept both snake_case and camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False
    )


class DetectionIn(_ApiModel):
    """One food name and quantity."""

    name: str
    quantity: str = ""


class EstimateRequest(_ApiModel):
    """Structured detections or a caption to estimate."""

    detections: list[DetectionIn] = Field(default_factory=list)
    caption: str | None = None


class CorrectionRequest(_ApiModel):
    """User edit of a displayed food item."""

    user_id: UUID | None = None
    food_name: str | None = None
    original_quantity: str | None = None
    corrected_quantity: str | None = None
    original_calories: float | None = Field(default=None, ge=0)
    corrected_calories: float | None = Field(default=None, ge=0)
    original_protein: float | None = Field(default=None, ge=0)
    corrected_protein: float | None = Field(default=None, ge=0)
    original_carbs: float | None = Field(default=None, ge=0)
    corrected_carbs: float | None = Field(default=None, ge=0)
    original_fat: float | None = Field(default=None, ge=0)
    corrected_fat: float | None = Field(default=None, ge=0)
