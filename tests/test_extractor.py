"""Tests for caption-based food extraction."""

from adaptive_nutrition.domain.nutrition import RawDetection
from adaptive_nutrition.services.extractor import MAX_DETECTIONS, DescriptionExtractor
from adaptive_nutrition.services.reference import ReferenceTable


def _extractor() -> DescriptionExtractor:
    return DescriptionExtractor(ReferenceTable.default())


def test_known_foods_in_caption_are_listed_in_source_order() -> None:
    detections = _extractor().extract("grilled salmon with broccoli and rice")

    assert detections == [
        RawDetection(name="rice", quantity="1 serving"),
        RawDetection(name="salmon", quantity="1 serving"),
        RawDetection(name="broccoli", quantity="1 serving"),
    ]


def test_caption_detections_are_capped() -> None:
    detections = _extractor().extract("pizza burger fries salad cake cookie coffee")

    assert len(detections) == MAX_DETECTIONS
    assert [detection.name for detection in detections] == [
        "pizza",
        "burger",
        "fries",
        "salad",
        "cake",
    ]


def test_partial_words_resolve_through_tokens() -> None:
    detections = _extractor().extract("chick peas on toast")

    assert detections == [RawDetection(name="chicken breast", quantity="1 serving")]


def test_container_only_caption_uses_placeholder() -> None:
    detections = _extractor().extract("a plate on a wooden table")

    assert detections == [RawDetection(name="plate", quantity="1 serving")]


def test_unrecognized_caption_becomes_synthetic_name() -> None:
    detections = _extractor().extract("a mysterious green smoothie")

    assert detections == [
        RawDetection(name="Mysterious green smoothie", quantity="1 serving")
    ]


def test_synthetic_name_is_truncated() -> None:
    detections = _extractor().extract("the " + "zzzz " * 20)

    assert len(detections) == 1
    assert detections[0].name.startswith("Zzzz")
    assert len(detections[0].name) <= 45


def test_empty_caption_yields_nothing() -> None:
    assert _extractor().extract("") == []


def test_whitespace_caption_yields_generic_entry() -> None:
    assert _extractor().extract("   ") == [RawDetection(name="Food", quantity="1 serving")]


def test_learned_keys_are_recognized() -> None:
    extractor = DescriptionExtractor({"rice": object(), "tofu": object()})

    detections = extractor.extract("Tofu stir fry")

    assert detections == [RawDetection(name="tofu", quantity="1 serving")]
