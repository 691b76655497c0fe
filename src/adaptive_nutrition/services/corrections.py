"""Correction recording and learned baseline aggregation."""

import logging
import math
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Protocol

from adaptive_nutrition.domain.corrections import (
    Correction,
    CorrectionReceipt,
    LearnedFood,
)
from adaptive_nutrition.domain.nutrition import NutrientDensity, normalize_food_name
from adaptive_nutrition.services.learned import (
    LearnedBaselineService,
    LearnedFoodRepository,
)
from adaptive_nutrition.services.quantity import QuantityParser

_logger = logging.getLogger(__name__)


class LearnedFoodConflictError(RuntimeError):
    """Raised when a learned food keeps changing underneath an update."""

    def __init__(self, food_name_normalized: str, attempts: int) -> None:
        super().__init__(
            f"Learned food {food_name_normalized!r} changed concurrently "
            f"{attempts} times; giving up"
        )
        self.food_name_normalized = food_name_normalized
        self.attempts = attempts


class CorrectionRepository(Protocol):
    """Persistence interface for the correction history."""

    def create_correction(self, correction: Correction) -> None:
        """Append a correction to the history."""


def confidence_for(sample_count: int, pivot: float = 4.0) -> float:
    """Saturating confidence: 0 with no samples, approaching 1 as they grow."""
    if sample_count <= 0:
        return 0.0
    return sample_count / (sample_count + pivot)


@dataclass
class CorrectionAggregator:
    """Fold corrections into per-food running averages.

    Writes for one food are serialized in-process and compare-and-swapped
    against the store on `sample_count`; other foods never wait.
    """

    repository: LearnedFoodRepository
    parser: QuantityParser = field(default_factory=QuantityParser)
    confidence_pivot: float = 4.0
    max_attempts: int = 5
    _locks: dict[str, tuple[threading.Lock, int]] = field(
        default_factory=dict, repr=False
    )
    _locks_guard: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def sample_density(self, correction: Correction) -> NutrientDensity:
        """Scale corrected values back to a per-100 g density."""
        quantity = correction.corrected_quantity or correction.original_quantity
        grams = self.parser.parse_grams(quantity, correction.food_name)
        factor = 100.0 / grams
        values = (
            correction.corrected_calories * factor,
            _pick(correction.corrected_protein_g, correction.original_protein_g) * factor,
            _pick(correction.corrected_carbs_g, correction.original_carbs_g) * factor,
            _pick(correction.corrected_fat_g, correction.original_fat_g) * factor,
        )
        if not all(math.isfinite(value) for value in values):
            raise ValueError(
                f"Correction for {correction.food_name!r} has non-finite values"
            )
        return NutrientDensity.of(*values)

    def apply(self, correction: Correction) -> LearnedFood:
        """Update and persist the learned food for a correction."""
        key = normalize_food_name(correction.food_name)
        if not key:
            raise ValueError("Correction food name is empty")
        sample = self.sample_density(correction)

        with self._lock_for(key):
            for attempt in range(1, self.max_attempts + 1):
                current = self.repository.get_learned_food(key)
                updated = self._fold(current, sample, correction.food_name, key)
                expected = current.sample_count if current else None
                if self.repository.save_learned_food(updated, expected):
                    _logger.info(
                        "Learned food updated: %s samples=%s confidence=%.3f",
                        key,
                        updated.sample_count,
                        updated.confidence_score,
                    )
                    return updated
                _logger.info(
                    "Learned food %s changed during update (attempt %s/%s)",
                    key,
                    attempt,
                    self.max_attempts,
                )
        raise LearnedFoodConflictError(key, self.max_attempts)

    def _fold(
        self,
        current: LearnedFood | None,
        sample: NutrientDensity,
        food_name: str,
        key: str,
    ) -> LearnedFood:
        now = datetime.now(tz=UTC)
        if current is None:
            return LearnedFood(
                food_name=food_name.strip(),
                food_name_normalized=key,
                avg_calories_per_100g=sample.calories,
                avg_protein_per_100g=sample.protein_g,
                avg_carbs_per_100g=sample.carbs_g,
                avg_fat_per_100g=sample.fat_g,
                sample_count=1,
                confidence_score=confidence_for(1, self.confidence_pivot),
                last_updated=now,
            )

        count = max(current.sample_count, 0) + 1
        return replace(
            current,
            avg_calories_per_100g=_running_mean(
                current.avg_calories_per_100g, sample.calories, count
            ),
            avg_protein_per_100g=_running_mean(
                current.avg_protein_per_100g, sample.protein_g, count
            ),
            avg_carbs_per_100g=_running_mean(
                current.avg_carbs_per_100g, sample.carbs_g, count
            ),
            avg_fat_per_100g=_running_mean(
                current.avg_fat_per_100g, sample.fat_g, count
            ),
            sample_count=count,
            confidence_score=max(
                current.confidence_score, confidence_for(count, self.confidence_pivot)
            ),
            last_updated=now,
        )

    @contextmanager
    def _lock_for(self, key: str) -> Iterator[None]:
        """Hold the lock for `key`; the lock is dropped once nobody uses it."""
        with self._locks_guard:
            lock, users = self._locks.get(key, (None, 0))
            if lock is None:
                lock = threading.Lock()
            self._locks[key] = (lock, users + 1)
        try:
            with lock:
                yield
        finally:
            with self._locks_guard:
                _, users = self._locks[key]
                if users <= 1:
                    del self._locks[key]
                else:
                    self._locks[key] = (lock, users - 1)


@dataclass
class CorrectionService:
    """Record corrections and feed them to the aggregator."""

    repository: CorrectionRepository
    aggregator: CorrectionAggregator
    learned_service: LearnedBaselineService

    def submit(self, correction: Correction) -> CorrectionReceipt:
        """Store a correction and update its learned food.

        Failures are logged and reported on the receipt, never raised.
        """
        try:
            self.repository.create_correction(correction)
        except Exception as exc:
            _logger.exception("Failed to record correction for %s", correction.food_name)
            return CorrectionReceipt(recorded=False, learned=None, error=str(exc))

        try:
            learned = self.aggregator.apply(correction)
        except Exception as exc:
            _logger.exception(
                "Failed to update learned food for %s", correction.food_name
            )
            return CorrectionReceipt(recorded=True, learned=None, error=str(exc))

        self.learned_service.refresh()
        return CorrectionReceipt(recorded=True, learned=learned)


def _running_mean(average: float, sample: float, count: int) -> float:
    return average + (sample - average) / count


def _pick(corrected: float | None, original: float | None) -> float:
    if corrected is not None:
        return corrected
    if original is not None:
        return original
    return 0.0
