"""Static nutrition reference data."""

from collections.abc import Iterator, Mapping

from adaptive_nutrition.domain.nutrition import NutrientDensity

# calories, protein, carbs, fat per 100 g
_DEFAULT_ROWS: list[tuple[str, float, float, float, float]] = [
    ("apple", 52, 0.3, 14, 0.2),
    ("banana", 89, 1.1, 23, 0.3),
    ("chicken breast", 165, 31, 0, 3.6),
    ("chicken", 165, 31, 0, 3.6),
    ("rice", 130, 2.7, 28, 0.3),
    ("pasta", 131, 5, 25, 1.1),
    ("noodles", 138, 4.5, 25, 2.1),
    ("bread", 265, 9, 49, 3.2),
    ("egg", 155, 13, 1.1, 11),
    ("salmon", 208, 20, 0, 12),
    ("broccoli", 34, 2.8, 7, 0.4),
    ("carrot", 41, 0.9, 10, 0.2),
    ("potato", 77, 2, 17, 0.1),
    ("cheese", 402, 25, 1.3, 33),
    ("milk", 42, 3.4, 5, 1),
    ("yogurt", 59, 10, 3.6, 0.4),
    ("beef", 250, 26, 0, 17),
    ("steak", 271, 26, 0, 18),
    ("pork", 242, 27, 0, 14),
    ("fish", 206, 22, 0, 12),
    ("pizza", 266, 11, 33, 10),
    ("burger", 295, 17, 30, 12),
    ("hamburger", 295, 17, 30, 12),
    ("fries", 312, 3.4, 41, 15),
    ("french fries", 312, 3.4, 41, 15),
    ("salad", 15, 1.4, 3, 0.2),
    ("tomato", 18, 0.9, 3.9, 0.2),
    ("onion", 40, 1.1, 9.3, 0.1),
    ("pepper", 31, 1, 7, 0.3),
    ("cucumber", 16, 0.7, 4, 0.1),
    ("avocado", 160, 2, 9, 15),
    ("strawberry", 32, 0.7, 8, 0.3),
    ("orange", 47, 0.9, 12, 0.1),
    ("grape", 69, 0.7, 18, 0.2),
    ("chocolate", 546, 7.8, 45, 31),
    ("cake", 367, 5.4, 53, 14),
    ("cookie", 488, 6.8, 68, 22),
    ("ice cream", 207, 3.5, 24, 11),
    ("coffee", 2, 0.1, 0, 0),
    ("tea", 2, 0, 0.3, 0),
    ("soup", 30, 1.5, 5, 0.5),
    ("sandwich", 250, 12, 30, 9),
    ("sushi", 150, 6, 30, 0.5),
    ("curry", 150, 8, 12, 8),
    ("biryani", 200, 8, 30, 6),
    ("dal", 120, 9, 20, 1),
    ("roti", 120, 3, 25, 1),
    ("naan", 260, 9, 45, 5),
    ("dosa", 133, 4, 24, 2),
    ("idli", 39, 2, 8, 0.1),
    ("samosa", 262, 4, 24, 17),
    ("paneer", 265, 18, 1.2, 21),
    # generic placeholders for captions that only name the container
    ("plate", 200, 10, 25, 8),
    ("food", 200, 10, 25, 8),
    ("meal", 350, 20, 40, 12),
    ("dish", 250, 15, 30, 10),
    ("bowl", 300, 12, 45, 8),
]


class ReferenceTable(Mapping[str, NutrientDensity]):
    """Read-only, insertion-ordered map of canonical food name to density."""

    def __init__(self, entries: Mapping[str, NutrientDensity]) -> None:
        for key in entries:
            if not key or key != key.strip().lower():
                raise ValueError(f"Reference key must be lowercase and trimmed: {key!r}")
        self._entries = dict(entries)

    def __getitem__(self, key: str) -> NutrientDensity:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @classmethod
    def default(cls) -> "ReferenceTable":
        """Return the built-in reference table."""
        return cls(
            {
                name: NutrientDensity(
                    calories=calories, protein_g=protein, carbs_g=carbs, fat_g=fat
                )
                for name, calories, protein, carbs, fat in _DEFAULT_ROWS
            }
        )
