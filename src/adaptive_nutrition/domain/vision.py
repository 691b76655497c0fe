"""Models for vision extraction results."""

from pydantic import BaseModel, Field


class VisionItem(BaseModel):
    """Single detected food item from vision."""

    name: str = Field(min_length=1)
    quantity: str = ""


class VisionExtract(BaseModel):
    """Vision output: a structured item list, a caption, or both."""

    items: list[VisionItem] = Field(default_factory=list)
    caption: str | None = None
