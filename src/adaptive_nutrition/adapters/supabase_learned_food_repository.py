"""Supabase implementation of the learned food store."""

from dataclasses import dataclass
from datetime import datetime

from postgrest.exceptions import APIError
from supabase import Client

from adaptive_nutrition.domain.corrections import LearnedFood
from adaptive_nutrition.services.learned import LearnedFoodRepository

_TABLE = "learned_foods"
_UNIQUE_VIOLATION = "23505"


@dataclass
class SupabaseLearnedFoodRepository(LearnedFoodRepository):
    """Supabase-backed repository keyed by `food_name_normalized`."""

    client: Client

    def get_learned_food(self, food_name_normalized: str) -> LearnedFood | None:
        """Return the learned food for a normalized name, if present."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("food_name_normalized", food_name_normalized)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_learned_food(response.data[0])

    def search_learned_foods(self, query: str, limit: int) -> list[LearnedFood]:
        """Return partial matches, most confident first."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .ilike("food_name_normalized", f"%{query}%")
            .order("confidence_score", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_learned_food(row) for row in response.data or []]

    def list_confident_foods(self, min_confidence: float, limit: int) -> list[LearnedFood]:
        """Return foods at or above a confidence, most samples first."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .gte("confidence_score", min_confidence)
            .order("sample_count", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_learned_food(row) for row in response.data or []]

    def save_learned_food(
        self, food: LearnedFood, expected_sample_count: int | None
    ) -> bool:
        """Insert a new row or update it only if `sample_count` is unchanged."""
        payload = _to_row(food)
        if expected_sample_count is None:
            try:
                response = self.client.table(_TABLE).insert(payload).execute()
            except APIError as exc:
                if exc.code == _UNIQUE_VIOLATION:
                    return False
                raise
            if not response.data:
                raise RuntimeError("Failed to create learned food")
            return True

        response = (
            self.client.table(_TABLE)
            .update(payload)
            .eq("food_name_normalized", food.food_name_normalized)
            .eq("sample_count", expected_sample_count)
            .execute()
        )
        return bool(response.data)


def _to_row(food: LearnedFood) -> dict[str, object]:
    return {
        "food_name": food.food_name,
        "food_name_normalized": food.food_name_normalized,
        "avg_calories_per_100g": food.avg_calories_per_100g,
        "avg_protein_per_100g": food.avg_protein_per_100g,
        "avg_carbs_per_100g": food.avg_carbs_per_100g,
        "avg_fat_per_100g": food.avg_fat_per_100g,
        "sample_count": food.sample_count,
        "confidence_score": food.confidence_score,
        "last_updated": food.last_updated.isoformat() if food.last_updated else None,
    }


def _parse_learned_food(row: dict[str, object]) -> LearnedFood:
    """Parse a learned_foods row into a domain model."""
    last_updated_raw = row.get("last_updated")
    last_updated = (
        datetime.fromisoformat(last_updated_raw)
        if isinstance(last_updated_raw, str) and last_updated_raw
        else None
    )
    return LearnedFood(
        food_name=str(row.get("food_name") or row.get("food_name_normalized", "")),
        food_name_normalized=str(row.get("food_name_normalized", "")),
        avg_calories_per_100g=float(row.get("avg_calories_per_100g") or 0.0),
        avg_protein_per_100g=float(row.get("avg_protein_per_100g") or 0.0),
        avg_carbs_per_100g=float(row.get("avg_carbs_per_100g") or 0.0),
        avg_fat_per_100g=float(row.get("avg_fat_per_100g") or 0.0),
        sample_count=int(row.get("sample_count") or 0),
        confidence_score=min(1.0, max(0.0, float(row.get("confidence_score") or 0.0))),
        last_updated=last_updated,
    )
