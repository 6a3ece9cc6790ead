"""Batch ingestion of uploaded wardrobe photos."""

from __future__ import annotations

from typing import Dict, List

from logic.ingestion import UploadedImage, ingest_batch
from logic.similarity_hasher import SimilarityHasher
from logic.validation import ClassifierAttributes
from models.issues import IssueKind


def _classifier(responses: List[Dict[str, object]]):
    queue = list(responses)

    def classify(_content: bytes) -> Dict[str, object]:
        response = queue.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    return classify


def test_identical_uploads_in_one_batch_keep_only_the_first(make_image) -> None:
    data = make_image("vertical")
    uploads = [UploadedImage(content=data, filename="blazer.png"), UploadedImage(content=data, filename="copy.png")]
    classify = _classifier(
        [
            {"name": "Navy Blue Blazer", "category": "outerwear", "color": "Navy Blue"},
            {"name": "navy blue blazer", "category": "outerwear", "color": "navy blue"},
        ]
    )

    report = ingest_batch("u1", uploads, existing_items=[], classify=classify)

    assert len(report.accepted) == 1
    assert report.duplicates[0]["index"] == 1
    assert report.duplicates[0]["matched_item_id"] == report.accepted[0].item_id
    assert report.summary() == "1 items added, 1 duplicates skipped"


def test_upload_matching_existing_item_is_skipped(make_image, make_item) -> None:
    data = make_image("checker")
    fingerprint = SimilarityHasher().fingerprint(data)
    existing = make_item("old", "Striped Scarf", "accessory", color="red", fingerprint=fingerprint)
    classify = _classifier([{"name": "Red Scarf", "category": "accessory", "color": "red"}])

    report = ingest_batch("u1", [UploadedImage(content=data)], existing_items=[existing], classify=classify)

    assert report.accepted == []
    assert report.duplicates[0]["matched_item_id"] == "old"
    assert report.summary() == "Duplicate items detected"


def test_classifier_errors_are_recorded_per_upload(make_image) -> None:
    uploads = [
        UploadedImage(content=make_image("vertical"), filename="a.png"),
        UploadedImage(content=make_image("horizontal"), filename="b.png"),
        UploadedImage(content=make_image("checker"), filename="c.png"),
    ]
    classify = _classifier(
        [
            RuntimeError("classifier offline"),
            {"name": ["not", "a", "string"], "category": "top"},
            {"name": "Blue Jeans", "category": "pants", "color": "blue"},
        ]
    )

    report = ingest_batch("u1", uploads, existing_items=[], classify=classify)

    assert [failure["index"] for failure in report.failures] == [0, 1]
    assert report.failures[0]["reason"] == "classifier offline"
    assert len(report.accepted) == 1
    assert report.accepted[0].category == "bottom"


def test_undecodable_images_are_kept_and_flagged() -> None:
    uploads = [UploadedImage(content=b"broken"), UploadedImage(content=b"broken")]
    classify = _classifier(
        [
            {"name": "Striped Scarf", "category": "accessory", "color": "red"},
            {"name": "Linen Shorts", "category": "bottom", "color": "white"},
        ]
    )

    report = ingest_batch("u1", uploads, existing_items=[], classify=classify)

    assert len(report.accepted) == 2
    assert [issue.kind for issue in report.issues].count(IssueKind.HASH_UNAVAILABLE) == 2


def test_refinement_and_confirmation_flags(make_image) -> None:
    uploads = [UploadedImage(content=make_image("vertical")), UploadedImage(content=make_image("horizontal"))]
    classify = _classifier(
        [
            {"name": "Cotton Cardigan", "category": "outerwear", "color": "cream"},
            {"name": "Mystery Object", "category": "gizmo", "color": "teal"},
        ]
    )

    report = ingest_batch("u1", uploads, existing_items=[], classify=classify, temperature=20)

    cardigan, mystery = report.accepted
    assert cardigan.category == "top"
    assert cardigan.subcategory == "optional_outerwear"
    assert cardigan.material == "cotton"
    assert mystery.category == "other"
    assert {flag["index"] for flag in report.flagged} == {0, 1}
    assert [issue.kind for issue in report.issues] == [IssueKind.AMBIGUOUS_CLASSIFICATION]


def test_classifier_attributes_narrow_free_text() -> None:
    attributes = ClassifierAttributes.model_validate(
        {"name": "  ", "category": "Sneakers", "color": " Olive ", "occasion": "office", "pattern": ""}
    )

    assert attributes.name == "Untitled item"
    assert attributes.category == "shoes"
    assert attributes.color == "olive"
    assert attributes.occasion == "business"
    assert attributes.pattern is None
