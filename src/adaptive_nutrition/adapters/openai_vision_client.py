"""OpenAI Responses API client for structured food detection."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from adaptive_nutrition.services.vision import VisionClient, to_data_url


@dataclass
class OpenAIVisionClient(VisionClient):
    """Vision client backed by OpenAI structured outputs."""

    client: AsyncOpenAI
    model: str
    reasoning_effort: str | None = None

    @classmethod
    def create(
        cls, api_key: str, model: str, reasoning_effort: str | None = None
    ) -> "OpenAIVisionClient":
        """Create an OpenAI vision client."""
        return cls(
            client=AsyncOpenAI(api_key=api_key),
            model=model,
            reasoning_effort=reasoning_effort,
        )

    async def extract(
        self, *, image_bytes: bytes, prompt: str, schema: dict[str, object]
    ) -> dict[str, object]:
        """Ask the model for `{items, caption}` under a strict JSON schema."""
        request_payload: dict[str, object] = {
            "model": self.model,
            "input": [
                {
                    "role": "user",
                    "content": [
                        {"type": "input_text", "text": prompt},
                        {"type": "input_image", "image_url": to_data_url(image_bytes)},
                    ],
                }
            ],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": "food_detections",
                    "strict": True,
                    "schema": schema,
                }
            },
            "store": False,
        }
        if self.reasoning_effort:
            request_payload["reasoning"] = {"effort": self.reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        if not response.output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return json.loads(response.output_text)

    async def close(self) -> None:
        """Close the underlying OpenAI session."""
        await self.client.close()
