"""Storage key derivation for originals and their resized variants."""

import re
import time
from dataclasses import dataclass
from typing import Optional, Tuple


_VARIANT_KEY_RE = re.compile(r"_(\d+)x(\d+)_\d+(?:\.[^./]*)?$")


@dataclass(frozen=True)
class KeyNamer:
    """
    Derives every key written for one upload.

    All keys share ``timestamp_ns`` so artifacts of one upload sort and grep
    together. Nothing is checked against the store: two uploads of the same
    filename within the same nanosecond would collide, so uniqueness is
    probabilistic rather than guaranteed.
    """

    stem: str
    extension: str
    timestamp_ns: int

    @classmethod
    def from_filename(
        cls, filename: str, timestamp_ns: Optional[int] = None
    ) -> "KeyNamer":
        # extension is everything from the last dot, so ".png" has an empty stem
        stem, dot, ext = filename.rpartition(".")
        if dot:
            ext = dot + ext
        else:
            stem, ext = filename, ""
        if timestamp_ns is None:
            timestamp_ns = time.time_ns()
        return cls(stem=stem, extension=ext.lower(), timestamp_ns=timestamp_ns)

    def original_key(self) -> str:
        return f"{self.stem}_{self.timestamp_ns}{self.extension}"

    def variant_key(self, width: int, height: int) -> str:
        return f"{self.stem}_{width}x{height}_{self.timestamp_ns}{self.extension}"


def parse_variant_dimensions(key: str) -> Optional[Tuple[int, int]]:
    """
    Recover ``(width, height)`` from a variant key.

    Args:
        key: Storage key such as ``photo_800x600_1234567890.jpg``

    Returns:
        The dimensions encoded in the key, or None for keys that are not
        variant-shaped (originals, foreign objects) or encode a zero size.
    """
    match = _VARIANT_KEY_RE.search(key)
    if not match:
        return None
    width, height = int(match.group(1)), int(match.group(2))
    if width <= 0 or height <= 0:
        return None
    return width, height
