"""Supabase repository for the correction history."""

from dataclasses import dataclass

from supabase import Client

from adaptive_nutrition.domain.corrections import Correction
from adaptive_nutrition.services.corrections import CorrectionRepository


@dataclass
class SupabaseCorrectionRepository(CorrectionRepository):
    """Append-only `user_corrections` table."""

    client: Client

    def create_correction(self, correction: Correction) -> None:
        """Insert a correction row."""
        response = (
            self.client.table("user_corrections")
            .insert(
                {
                    "user_id": str(correction.user_id) if correction.user_id else None,
                    "food_name": correction.food_name,
                    "original_quantity": correction.original_quantity,
                    "corrected_quantity": correction.corrected_quantity,
                    "original_calories": correction.original_calories,
                    "corrected_calories": correction.corrected_calories,
                    "original_protein": correction.original_protein_g,
                    "corrected_protein": correction.corrected_protein_g,
                    "original_carbs": correction.original_carbs_g,
                    "corrected_carbs": correction.corrected_carbs_g,
                    "original_fat": correction.original_fat_g,
                    "corrected_fat": correction.corrected_fat_g,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to record correction")
