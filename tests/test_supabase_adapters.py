"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

import pytest
from postgrest.exceptions import APIError

from adaptive_nutrition.adapters.supabase_correction_repository import (
    SupabaseCorrectionRepository,
)
from adaptive_nutrition.adapters.supabase_learned_food_repository import (
    SupabaseLearnedFoodRepository,
)
from adaptive_nutrition.domain.corrections import Correction, LearnedFood


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": [], "update": []}
    )
    insert_error: Exception | None = None
    last_payload: object | None = None
    last_filters: list[tuple[str, str, object]] = field(default_factory=list)
    last_order: tuple[str, bool] | None = None
    last_limit: int | None = None

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("eq", column, value))
        return self

    def ilike(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("ilike", column, value))
        return self

    def gte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("gte", column, value))
        return self

    def limit(self, count: int) -> "FakeTable":
        self.last_limit = count
        return self

    def order(self, column: str, desc: bool = False) -> "FakeTable":
        self.last_order = (column, desc)
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        if action == "insert" and self.insert_error is not None:
            raise self.insert_error
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _row(name: str = "paneer", **overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "food_name": name.title(),
        "food_name_normalized": name,
        "avg_calories_per_100g": 280,
        "avg_protein_per_100g": 20,
        "avg_carbs_per_100g": 2,
        "avg_fat_per_100g": 22,
        "sample_count": 3,
        "confidence_score": 0.43,
        "last_updated": "2026-01-05T10:00:00+00:00",
    }
    row.update(overrides)
    return row


def _learned(sample_count: int = 4) -> LearnedFood:
    return LearnedFood(
        food_name="Paneer",
        food_name_normalized="paneer",
        avg_calories_per_100g=280,
        avg_protein_per_100g=20,
        avg_carbs_per_100g=2,
        avg_fat_per_100g=22,
        sample_count=sample_count,
        confidence_score=0.5,
        last_updated=datetime(2026, 1, 5, tzinfo=UTC),
    )


def test_get_learned_food_parses_row() -> None:
    client = FakeSupabaseClient()
    client.table("learned_foods").queue("select", [_row()])

    food = SupabaseLearnedFoodRepository(client).get_learned_food("paneer")

    assert food is not None
    assert food.food_name == "Paneer"
    assert food.sample_count == 3
    assert food.avg_calories_per_100g == 280.0
    assert food.last_updated == datetime(2026, 1, 5, 10, tzinfo=UTC)
    assert ("eq", "food_name_normalized", "paneer") in client.table(
        "learned_foods"
    ).last_filters


def test_get_learned_food_missing_returns_none() -> None:
    client = FakeSupabaseClient()

    assert SupabaseLearnedFoodRepository(client).get_learned_food("ramen") is None


def test_parsing_clamps_confidence_and_tolerates_nulls() -> None:
    client = FakeSupabaseClient()
    client.table("learned_foods").queue(
        "select",
        [_row(confidence_score=1.7, avg_fat_per_100g=None, last_updated=None)],
    )

    food = SupabaseLearnedFoodRepository(client).get_learned_food("paneer")

    assert food is not None
    assert food.confidence_score == 1.0
    assert food.avg_fat_per_100g == 0.0
    assert food.last_updated is None


def test_search_uses_partial_match_ordered_by_confidence() -> None:
    client = FakeSupabaseClient()
    table = client.table("learned_foods")
    table.queue("select", [_row("paneer tikka"), _row("palak paneer")])

    foods = SupabaseLearnedFoodRepository(client).search_learned_foods("paneer", 5)

    assert [food.food_name_normalized for food in foods] == [
        "paneer tikka",
        "palak paneer",
    ]
    assert ("ilike", "food_name_normalized", "%paneer%") in table.last_filters
    assert table.last_order == ("confidence_score", True)
    assert table.last_limit == 5


def test_list_confident_foods_filters_and_orders() -> None:
    client = FakeSupabaseClient()
    table = client.table("learned_foods")
    table.queue("select", [_row(sample_count=12), _row("dal", sample_count=5)])

    foods = SupabaseLearnedFoodRepository(client).list_confident_foods(0.5, 500)

    assert len(foods) == 2
    assert ("gte", "confidence_score", 0.5) in table.last_filters
    assert table.last_order == ("sample_count", True)
    assert table.last_limit == 500


def test_save_inserts_new_food() -> None:
    client = FakeSupabaseClient()
    table = client.table("learned_foods")
    table.queue("insert", [_row(sample_count=1)])

    saved = SupabaseLearnedFoodRepository(client).save_learned_food(_learned(1), None)

    assert saved is True
    assert isinstance(table.last_payload, dict)
    assert table.last_payload["food_name_normalized"] == "paneer"
    assert table.last_payload["last_updated"] == "2026-01-05T00:00:00+00:00"


def test_save_insert_conflict_returns_false() -> None:
    client = FakeSupabaseClient()
    client.table("learned_foods").insert_error = APIError(
        {"code": "23505", "message": "duplicate key value"}
    )

    saved = SupabaseLearnedFoodRepository(client).save_learned_food(_learned(1), None)

    assert saved is False


def test_save_insert_other_errors_propagate() -> None:
    client = FakeSupabaseClient()
    client.table("learned_foods").insert_error = APIError(
        {"code": "42501", "message": "permission denied"}
    )

    with pytest.raises(APIError):
        SupabaseLearnedFoodRepository(client).save_learned_food(_learned(1), None)


def test_save_update_is_conditional_on_sample_count() -> None:
    client = FakeSupabaseClient()
    table = client.table("learned_foods")
    table.queue("update", [_row(sample_count=4)])

    repository = SupabaseLearnedFoodRepository(client)
    saved = repository.save_learned_food(_learned(4), expected_sample_count=3)
    stale = repository.save_learned_food(_learned(4), expected_sample_count=3)

    assert saved is True
    assert stale is False
    assert ("eq", "sample_count", 3) in table.last_filters
    assert ("eq", "food_name_normalized", "paneer") in table.last_filters


def test_correction_repository_inserts_history_row() -> None:
    client = FakeSupabaseClient()
    table = client.table("user_corrections")
    table.queue("insert", [{"id": 1}])
    user_id = uuid4()

    SupabaseCorrectionRepository(client).create_correction(
        Correction(
            food_name="Paneer",
            original_quantity="100g",
            corrected_quantity="120g",
            original_calories=265,
            corrected_calories=336,
            corrected_protein_g=24,
            user_id=user_id,
        )
    )

    assert isinstance(table.last_payload, dict)
    assert table.last_payload["user_id"] == str(user_id)
    assert table.last_payload["corrected_protein"] == 24
    assert table.last_payload["original_fat"] is None


def test_correction_repository_raises_when_nothing_stored() -> None:
    client = FakeSupabaseClient()

    with pytest.raises(RuntimeError):
        SupabaseCorrectionRepository(client).create_correction(
            Correction(
                food_name="Paneer",
                original_quantity=None,
                corrected_quantity="100g",
                original_calories=None,
                corrected_calories=280,
            )
        )
