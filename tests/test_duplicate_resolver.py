"""Duplicate detection strategies, from exact fingerprints to semantic overlap."""

from __future__ import annotations

from logic.duplicate_resolver import (
    BatchEntry,
    DuplicateResolver,
    ItemAttributes,
    normalize_filename,
)

BASE_FP = "0" * 32 + "f" * 32
# last nibble f -> c flips two of 256 bits
NEAR_FP = "0" * 32 + "f" * 31 + "c"
OTHER_FP = "f" * 32 + "0" * 32


def test_exact_fingerprint_wins_first(make_item) -> None:
    existing = make_item("a", "Navy Blue Blazer", "outerwear", color="navy blue", fingerprint=BASE_FP)
    verdict = DuplicateResolver().resolve(
        BASE_FP, ItemAttributes("Something Else", "top", "red"), [existing]
    )
    assert verdict.is_duplicate
    assert verdict.strategy == "exact_fingerprint"
    assert verdict.similarity == 100.0
    assert verdict.matched_item_id == "a"


def test_navy_blazer_uploaded_twice_is_caught_by_near_fingerprint(make_item) -> None:
    existing = make_item("a", "Navy Blue Blazer", "outerwear", color="navy blue", fingerprint=BASE_FP)

    verdict = DuplicateResolver().resolve(
        NEAR_FP, ItemAttributes("  navy blue BLAZER ", "Outerwear", "Navy Blue"), [existing]
    )

    assert verdict.is_duplicate
    assert verdict.strategy == "near_fingerprint"
    assert verdict.similarity == 99.2
    assert verdict.matched_item_id == "a"


def test_exact_metadata_ignores_case_and_whitespace(make_item) -> None:
    existing = make_item("a", "Navy Blue Blazer", "outerwear", color="navy blue", fingerprint=BASE_FP)

    verdict = DuplicateResolver().resolve(
        OTHER_FP, ItemAttributes("NAVY  blue blazer", "outerwear", " Navy Blue "), [existing]
    )

    assert verdict.strategy == "exact_metadata"
    assert verdict.similarity == 90.0


def test_filename_similarity_requires_matching_category(make_item) -> None:
    existing = make_item("a", "Grey Wool Sweater", "top", color="gray", fingerprint=BASE_FP)
    resolver = DuplicateResolver()

    same_category = resolver.resolve(
        OTHER_FP, ItemAttributes("Knit Pullover", "top", "red"), [existing], filename="grey_wool_sweater.JPG"
    )
    other_category = resolver.resolve(
        OTHER_FP, ItemAttributes("Knit Pullover", "bottom", "red"), [existing], filename="grey_wool_sweater.JPG"
    )

    assert same_category.strategy == "filename"
    assert same_category.similarity == 100.0
    assert not other_category.is_duplicate


def test_semantic_overlap_needs_two_shared_words_and_matching_color(make_item) -> None:
    existing = make_item("a", "Slim Fit Chino Pants", "bottom", color="beige", fingerprint=BASE_FP)
    resolver = DuplicateResolver()

    same_color = resolver.resolve(OTHER_FP, ItemAttributes("Chino Pants Relaxed", "bottom", "beige"), [existing])
    other_color = resolver.resolve(OTHER_FP, ItemAttributes("Chino Pants Relaxed", "bottom", "olive"), [existing])

    assert same_color.strategy == "semantic_overlap"
    assert same_color.similarity == 80.0
    assert not other_color.is_duplicate


def test_non_comparable_fingerprints_never_match(make_item) -> None:
    fallback = "nc" + "1" * 62
    existing = make_item("a", "Striped Scarf", "accessory", color="red", fingerprint=fallback)

    verdict = DuplicateResolver().resolve(fallback, ItemAttributes("Linen Shorts", "bottom", "white"), [existing])

    assert not verdict.is_duplicate
    assert verdict.strategy == "none"


def test_malformed_stored_fingerprint_does_not_raise(make_item) -> None:
    existing = make_item("a", "Striped Scarf", "accessory", color="red", fingerprint="not-a-hash")

    verdict = DuplicateResolver().resolve(BASE_FP, ItemAttributes("Linen Shorts", "bottom", "white"), [existing])

    assert not verdict.is_duplicate


def test_batch_compares_against_earlier_uploads(make_item) -> None:
    first = make_item("new-1", "Navy Blue Blazer", "outerwear", color="navy", fingerprint=BASE_FP)
    second = make_item("new-2", "Navy Blazer", "outerwear", color="navy", fingerprint=NEAR_FP)
    entries = [
        BatchEntry(fingerprint=BASE_FP, attributes=ItemAttributes.of(first), candidate=first),
        BatchEntry(fingerprint=NEAR_FP, attributes=ItemAttributes.of(second), candidate=second),
    ]

    resolution = DuplicateResolver().resolve_batch(entries, pool=[])

    assert resolution.unique_indexes == [0]
    assert resolution.verdicts[1].matched_item_id == "new-1"


def test_normalize_filename() -> None:
    assert normalize_filename("My_Blue-Shirt (2).png") == "myblueshirt2"
    assert normalize_filename("IMG_0042.jpeg") == "img0042"
    assert normalize_filename("") == ""
