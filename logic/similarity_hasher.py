"""Perceptual fingerprints for near-duplicate image detection."""

from __future__ import annotations

import hashlib
import io
import logging
import re
import time
import uuid
from dataclasses import dataclass

from fuzzywuzzy import fuzz
from PIL import Image, ImageOps

from wardrobe_app.logging_config import log_event

logger = logging.getLogger(__name__)

HASH_SIZE = 16
FINGERPRINT_LENGTH = HASH_SIZE * HASH_SIZE // 4
NON_COMPARABLE_PREFIX = "nc"

_HEX = re.compile(r"^[0-9a-f]+$")


@dataclass(frozen=True)
class FingerprintResult:
    fingerprint: str
    comparable: bool = True


def is_comparable(fingerprint: str | None) -> bool:
    """False for empty or fallback fingerprints, which must never match."""

    return bool(fingerprint) and not fingerprint.startswith(NON_COMPARABLE_PREFIX)


def _is_hex(value: str) -> bool:
    return bool(_HEX.match(value))


def string_similarity(first: str, second: str) -> float:
    """Ratio in ``[0, 100]`` between two arbitrary strings."""

    if not first and not second:
        return 100.0
    if not first or not second:
        return 0.0
    return float(fuzz.ratio(first, second))


def fingerprint_similarity(first: str | None, second: str | None) -> float:
    """Similarity percentage between two fingerprints.

    Equal-length hex fingerprints are compared by Hamming distance over their
    bits. Anything malformed falls back to plain string similarity so that a
    corrupt stored value degrades the comparison instead of raising.
    """

    if not first or not second:
        return 0.0
    a, b = first.lower(), second.lower()
    if a == b:
        return 100.0
    if len(a) == len(b) and _is_hex(a) and _is_hex(b):
        total_bits = len(a) * 4
        differing = bin(int(a, 16) ^ int(b, 16)).count("1")
        return max(0.0, 100.0 - differing / total_bits * 100.0)
    logger.debug("Malformed fingerprint pair, using string similarity")
    return string_similarity(a, b)


class SimilarityHasher:
    """Derive a fixed-length average hash from image bytes.

    Images are oriented, converted to grayscale and shrunk to
    ``hash_size x hash_size`` so size, format and color noise drop out; each
    output bit records whether a pixel is brighter than the mean.
    """

    def __init__(self, hash_size: int = HASH_SIZE) -> None:
        if hash_size < 2 or (hash_size * hash_size) % 4:
            raise ValueError("hash_size must be >= 2 and produce whole hex digits")
        if hash_size * hash_size // 4 <= len(NON_COMPARABLE_PREFIX):
            raise ValueError("hash_size is too small to tell fallback fingerprints apart")
        self.hash_size = hash_size

    @property
    def length(self) -> int:
        return self.hash_size * self.hash_size // 4

    def hash(self, image_bytes: bytes) -> FingerprintResult:
        try:
            return FingerprintResult(fingerprint=self._average_hash(image_bytes), comparable=True)
        except Exception as exc:  # noqa: BLE001
            log_event(
                logger,
                logging.WARNING,
                "fingerprint_fallback",
                error=str(exc),
                size=len(image_bytes or b""),
            )
            return FingerprintResult(fingerprint=self._fallback(image_bytes), comparable=False)

    def fingerprint(self, image_bytes: bytes) -> str:
        return self.hash(image_bytes).fingerprint

    def _average_hash(self, image_bytes: bytes) -> str:
        with Image.open(io.BytesIO(image_bytes)) as image:
            image.load()
            normalised = ImageOps.exif_transpose(image).convert("L")
            normalised = normalised.resize((self.hash_size, self.hash_size), Image.Resampling.LANCZOS)
            pixels = list(normalised.tobytes())
        mean = sum(pixels) / len(pixels)
        value = 0
        for pixel in pixels:
            value = (value << 1) | (1 if pixel > mean else 0)
        return f"{value:0{self.length}x}"

    def _fallback(self, image_bytes: bytes) -> str:
        # Salted so two failed decodes of the same bytes still never collide.
        salt = f"{time.time_ns()}:{uuid.uuid4().hex}".encode()
        digest = hashlib.sha256((image_bytes or b"") + salt).hexdigest()
        return (NON_COMPARABLE_PREFIX + digest)[: self.length]


__all__ = [
    "SimilarityHasher",
    "FingerprintResult",
    "fingerprint_similarity",
    "string_similarity",
    "is_comparable",
    "FINGERPRINT_LENGTH",
    "NON_COMPARABLE_PREFIX",
]
