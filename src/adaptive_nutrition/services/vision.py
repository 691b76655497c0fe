"""Vision oracle service."""

import base64
from dataclasses import dataclass
from typing import Protocol

from adaptive_nutrition.domain.vision import VisionExtract

VISION_PROMPT = (
    "Identify every food item in the image. "
    "Return each item with a short name and a quantity such as '200g', "
    "'1 cup' or '2 pieces'. Also return a one-sentence caption of the meal."
)

VISION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "quantity": {"type": "string"},
                },
                "required": ["name", "quantity"],
                "additionalProperties": False,
            },
        },
        "caption": {"anyOf": [{"type": "string"}, {"type": "null"}]},
    },
    "required": ["items", "caption"],
    "additionalProperties": False,
}


class VisionClient(Protocol):
    """Interface for an image-to-food oracle."""

    async def extract(
        self, *, image_bytes: bytes, prompt: str, schema: dict[str, object]
    ) -> dict[str, object]:
        """Return raw `{items, caption}` data for an image."""

    async def close(self) -> None:
        """Release network resources."""


@dataclass
class VisionService:
    """Service that calls the vision oracle and validates its payload."""

    client: VisionClient

    async def extract(self, image_bytes: bytes) -> VisionExtract:
        """Extract food items or a caption from an image."""
        raw = await self.client.extract(
            image_bytes=image_bytes, prompt=VISION_PROMPT, schema=VISION_SCHEMA
        )
        return VisionExtract.model_validate(raw)


def to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "image/jpeg"
