"""Hugging Face inference client for image captioning."""

import logging
from dataclasses import dataclass

import httpx

from adaptive_nutrition.services.vision import VisionClient, detect_mime_type

_logger = logging.getLogger(__name__)


@dataclass
class HttpxCaptionClient(VisionClient):
    """Caption-only vision client; the caption is parsed downstream."""

    api_key: str
    model_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 30.0

    @classmethod
    def create(cls, api_key: str, base_url: str, model: str) -> "HttpxCaptionClient":
        """Create a caption client with a managed httpx session."""
        return cls(
            api_key=api_key,
            model_url=f"{base_url.rstrip('/')}/{model}",
            http_client=httpx.AsyncClient(),
        )

    async def extract(
        self, *, image_bytes: bytes, prompt: str, schema: dict[str, object]
    ) -> dict[str, object]:
        """Caption the image; prompt and schema are not used by this model."""
        response = await self.http_client.post(
            self.model_url,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": detect_mime_type(image_bytes),
            },
            content=image_bytes,
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        payload = response.json()
        _logger.debug("Caption payload: %s", payload)
        return {"items": [], "caption": _caption_from_payload(payload)}

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _caption_from_payload(payload: object) -> str:
    """Accept list, object and bare-string caption responses."""
    if isinstance(payload, list) and payload and isinstance(payload[0], dict):
        text = payload[0].get("generated_text")
        if isinstance(text, str):
            return text
    if isinstance(payload, dict) and isinstance(payload.get("generated_text"), str):
        return payload["generated_text"]
    if isinstance(payload, str):
        return payload
    raise RuntimeError("Unexpected caption response format")
