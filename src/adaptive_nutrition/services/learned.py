"""Read access to learned nutrition baselines."""

import logging
from dataclasses import dataclass
from typing import Protocol

from adaptive_nutrition.domain.corrections import LearnedFood
from adaptive_nutrition.domain.nutrition import normalize_food_name
from adaptive_nutrition.services.cache import Cache

_logger = logging.getLogger(__name__)


class LearnedFoodRepository(Protocol):
    """Persistence interface for learned foods."""

    def get_learned_food(self, food_name_normalized: str) -> LearnedFood | None:
        """Return the learned food for a normalized name, if present."""

    def search_learned_foods(self, query: str, limit: int) -> list[LearnedFood]:
        """Return partial name matches ordered by confidence, highest first."""

    def list_confident_foods(self, min_confidence: float, limit: int) -> list[LearnedFood]:
        """Return foods at or above a confidence, most samples first."""

    def save_learned_food(
        self, food: LearnedFood, expected_sample_count: int | None
    ) -> bool:
        """Insert or conditionally update a learned food.

        `expected_sample_count` of None means the row must not exist yet.
        Returns False when the stored row no longer matches the expectation.
        """


@dataclass
class LearnedBaselineService:
    """Service for learned baseline lookups with caching."""

    repository: LearnedFoodRepository
    cache: Cache
    threshold: float = 0.5
    snapshot_limit: int = 500
    snapshot_ttl_seconds: int = 30

    def snapshot(self) -> list[LearnedFood]:
        """Return confident learned foods; store failures yield an empty list."""
        cache_key = f"learned:snapshot:{self.threshold}:{self.snapshot_limit}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        try:
            foods = self.repository.list_confident_foods(
                self.threshold, self.snapshot_limit
            )
        except Exception as exc:
            _logger.warning("Learned food snapshot unavailable: %s", exc)
            return []
        self.cache.set(cache_key, foods, ttl_seconds=self.snapshot_ttl_seconds)
        return foods

    def refresh(self) -> None:
        """Forget the cached snapshot so the next read hits the store."""
        self.cache.invalidate("learned:")

    def lookup(self, food_name: str) -> LearnedFood | None:
        """Return the learned food by exact name, else the best partial match."""
        normalized = normalize_food_name(food_name)
        if not normalized:
            return None
        exact = self.repository.get_learned_food(normalized)
        if exact is not None:
            return exact
        matches = self.repository.search_learned_foods(normalized, limit=1)
        return matches[0] if matches else None
