"""Caption-based food extraction for unstructured vision output."""

import re
from collections.abc import Mapping
from dataclasses import dataclass

from adaptive_nutrition.domain.nutrition import RawDetection
from adaptive_nutrition.services.resolver import FoodResolver, Resolved

MAX_DETECTIONS = 5
_CAPTION_NAME_LENGTH = 45
_SERVING = "1 serving"
_BLANK_CAPTION_NAME = "Food"
_MIN_TOKEN_LENGTH = 4
_TOKEN_PATTERN = re.compile(r"[a-z]+")
_LEADING_ARTICLE = re.compile(r"^(?:a|an|the)\s+", re.IGNORECASE)

STOPWORDS = frozenset(
    {
        "plate",
        "plates",
        "bowl",
        "bowls",
        "meal",
        "food",
        "dish",
        "dishes",
        "with",
        "and",
        "some",
        "there",
        "this",
        "that",
        "table",
        "close",
        "front",
        "white",
        "wooden",
        "picture",
        "image",
        "photo",
    }
)


@dataclass
class DescriptionExtractor:
    """Turn a free-text caption into candidate detections."""

    source: Mapping[str, object]

    def extract(self, caption: str) -> list[RawDetection]:
        """Return 1 to 5 detections for a non-empty caption, none for an empty one."""
        if not caption:
            return []
        text = caption.strip()
        if not text:
            return [RawDetection(name=_BLANK_CAPTION_NAME, quantity=_SERVING)]
        lowered = text.lower()

        names = [key for key in self.source if key in lowered]
        if not names:
            names = self._resolve_tokens(lowered)
        if not names:
            return [RawDetection(name=_caption_name(text), quantity=_SERVING)]
        return [
            RawDetection(name=name, quantity=_SERVING)
            for name in names[:MAX_DETECTIONS]
        ]

    def _resolve_tokens(self, lowered: str) -> list[str]:
        resolver = FoodResolver(self.source)
        names: list[str] = []
        for token in _TOKEN_PATTERN.findall(lowered):
            if len(token) < _MIN_TOKEN_LENGTH or token in STOPWORDS:
                continue
            resolution = resolver.resolve(token)
            if isinstance(resolution, Resolved) and resolution.key not in names:
                names.append(resolution.key)
        return names


def _caption_name(caption: str) -> str:
    name = _LEADING_ARTICLE.sub("", caption)[:_CAPTION_NAME_LENGTH].strip()
    if not name:
        name = caption[:_CAPTION_NAME_LENGTH].strip()
    return name[:1].upper() + name[1:]
