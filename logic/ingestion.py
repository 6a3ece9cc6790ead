"""Batch ingestion: fingerprint, refine, de-duplicate and map uploads to items."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from pydantic import ValidationError

from logic.category_refiner import CategoryRefiner
from logic.duplicate_resolver import BatchEntry, DuplicateResolver, ItemAttributes
from logic.similarity_hasher import SimilarityHasher
from logic.validation import ClassifierAttributes
from models.ingestion_mapping import map_attributes_to_item
from models.issues import Issue, IssueKind
from models.wardrobe_item import WardrobeItem
from wardrobe_app.config import WardrobeConfig
from wardrobe_app.logging_config import log_event

logger = logging.getLogger(__name__)

Classifier = Callable[[bytes], Mapping[str, Any]]


@dataclass(frozen=True)
class UploadedImage:
    content: bytes
    filename: Optional[str] = None
    image_url: Optional[str] = None


@dataclass
class IngestionReport:
    accepted: List[WardrobeItem] = field(default_factory=list)
    duplicates: List[Dict[str, Any]] = field(default_factory=list)
    failures: List[Dict[str, Any]] = field(default_factory=list)
    flagged: List[Dict[str, Any]] = field(default_factory=list)
    issues: List[Issue] = field(default_factory=list)

    def summary(self) -> str:
        if self.duplicates and not self.accepted:
            return "Duplicate items detected"
        if self.duplicates:
            return f"{len(self.accepted)} items added, {len(self.duplicates)} duplicates skipped"
        return f"{len(self.accepted)} items added successfully"


@dataclass
class _Prepared:
    index: int
    upload: UploadedImage
    entry: BatchEntry


def ingest_batch(
    user_id: str,
    uploads: Sequence[UploadedImage],
    existing_items: Sequence[WardrobeItem],
    classify: Classifier,
    config: WardrobeConfig | None = None,
    temperature: float | None = None,
    hasher: SimilarityHasher | None = None,
) -> IngestionReport:
    """Turn a batch of uploads into new items, skipping duplicates.

    Each upload is checked against ``existing_items`` and against earlier
    uploads of the same batch. Classifier errors are recorded per upload and
    never abort the batch. Nothing is persisted here.
    """

    config = config or WardrobeConfig()
    hasher = hasher or SimilarityHasher()
    refiner = CategoryRefiner(config)
    resolver = DuplicateResolver(config)
    report = IngestionReport()
    prepared: List[_Prepared] = []

    for index, upload in enumerate(uploads):
        fingerprint = hasher.hash(upload.content)
        if not fingerprint.comparable:
            report.issues.append(
                Issue(
                    kind=IssueKind.HASH_UNAVAILABLE,
                    condition="image_not_decodable",
                    message=f"Upload {index} could not be fingerprinted; duplicate protection is reduced",
                )
            )
        try:
            attributes = ClassifierAttributes.model_validate(dict(classify(upload.content)))
        except ValidationError as exc:
            logger.warning("Classifier output for upload %s failed validation: %s", index, exc.error_count())
            report.failures.append({"index": index, "filename": upload.filename, "reason": "invalid classifier output"})
            continue
        except Exception as exc:  # noqa: BLE001
            logger.error("Classifier failed for upload %s: %s", index, exc)
            report.failures.append({"index": index, "filename": upload.filename, "reason": str(exc)})
            continue

        refined = refiner.refine(attributes.category, attributes.name, attributes.color, temperature)
        prompt = refiner.needs_confirmation(refined.category, attributes.name)
        if refined.category != attributes.category:
            logger.info("Reclassified '%s' from %s to %s", attributes.name, attributes.category, refined.category)
        if refined.ambiguous or prompt.should_prompt:
            report.flagged.append(
                {
                    "index": index,
                    "name": attributes.name,
                    "category": refined.category,
                    "confidence": refined.confidence,
                    "suggestion": prompt.suggestion,
                }
            )
            if refined.ambiguous:
                report.issues.append(
                    Issue(
                        kind=IssueKind.AMBIGUOUS_CLASSIFICATION,
                        condition="low_confidence_category",
                        message=f"'{attributes.name}' kept as {refined.category}; please confirm",
                    )
                )

        candidate = map_attributes_to_item(
            user_id=user_id,
            attributes=attributes,
            category=refined.category,
            subcategory=refined.subcategory,
            fingerprint=fingerprint.fingerprint,
            image_url=upload.image_url,
            max_uses=config.max_uses,
        )
        entry = BatchEntry(
            fingerprint=fingerprint.fingerprint,
            attributes=ItemAttributes(name=attributes.name, category=refined.category, color=attributes.color),
            filename=upload.filename,
            candidate=candidate,
        )
        prepared.append(_Prepared(index=index, upload=upload, entry=entry))

    resolution = resolver.resolve_batch([item.entry for item in prepared], existing_items)
    for item, verdict in zip(prepared, resolution.verdicts):
        if verdict.is_duplicate:
            report.duplicates.append(
                {
                    "index": item.index,
                    "filename": item.upload.filename,
                    "name": item.entry.attributes.name,
                    "matched_item_id": verdict.matched_item_id,
                    "similarity": verdict.similarity,
                    "reason": verdict.reason,
                }
            )
        else:
            report.accepted.append(item.entry.candidate)

    log_event(
        logger,
        logging.INFO,
        "ingestion_batch_completed",
        uploads=len(uploads),
        accepted=len(report.accepted),
        duplicates=len(report.duplicates),
        failed=len(report.failures),
        flagged=len(report.flagged),
    )
    return report


__all__ = ["ingest_batch", "IngestionReport", "UploadedImage", "Classifier"]
