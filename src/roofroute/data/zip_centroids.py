"""Postal code centroid table used as the low-precision coordinate fallback."""

from __future__ import annotations

import csv
import functools
import logging
import re
import threading
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from ..config import settings
from ..models.domain import Coordinate

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")
_ZIP_TOKEN = re.compile(r"(?<!\d)(\d{5})(?!\d)")
_ZIP_PLUS_FOUR = re.compile(r"^\s*(\d{5})[-\s]\d{4}\s*$")

# Held for the whole first load so concurrent first callers share one read.
_LOAD_LOCK = threading.Lock()


def _coerce_float(value: Optional[str], *, row_number: int) -> float:
    if value is None or value.strip() == "":
        raise ValueError(f"Missing coordinate on centroid row {row_number}")
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"Unable to parse coordinate '{value}' on centroid row {row_number}") from exc


@functools.lru_cache(maxsize=None)
def _read_zip_centroids(csv_path: Path) -> Mapping[str, Coordinate]:
    if not csv_path.exists():
        raise FileNotFoundError(f"Zip centroid file not found: {csv_path}")

    centroids: dict[str, Coordinate] = {}
    with csv_path.open(mode="r", encoding="utf-8-sig", newline="") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            raise ValueError(f"Zip centroid file '{csv_path}' is missing a header row.")
        for row_number, row in enumerate(reader, start=2):
            zip_code = normalize_zip(row.get("zip") or row.get("zip_code") or "")
            if not zip_code:
                continue
            centroids[zip_code] = Coordinate(
                latitude=_coerce_float(row.get("latitude") or row.get("lat"), row_number=row_number),
                longitude=_coerce_float(row.get("longitude") or row.get("lng"), row_number=row_number),
            )
    logger.info("Loaded %d zip centroids from %s", len(centroids), csv_path)
    return MappingProxyType(centroids)


def load_zip_centroids(source: Optional[Path] = None) -> Mapping[str, Coordinate]:
    """Return the process-wide centroid table, reading the dataset on first use only."""

    csv_path = Path(source or settings.zip_centroids_file)
    with _LOAD_LOCK:
        return _read_zip_centroids(csv_path)


def clear_zip_centroid_cache() -> None:
    """Forget the loaded table. Intended for tests."""

    with _LOAD_LOCK:
        _read_zip_centroids.cache_clear()


def normalize_zip(raw: Optional[str]) -> str:
    """Reduce a postal code to its 5-digit form; empty string when nothing usable remains.

    Short codes are left-padded. Longer digit runs other than ZIP+4 are returned
    as-is so they miss the table and get reported.
    """

    if raw is None:
        return ""
    text = str(raw)
    plus_four = _ZIP_PLUS_FOUR.match(text)
    if plus_four:
        return plus_four.group(1)
    digits = _NON_DIGITS.sub("", text)
    if not digits:
        return ""
    return digits.zfill(5)


def lookup_coordinates(centroids: Mapping[str, Coordinate], raw_zip: Optional[str]) -> Optional[Coordinate]:
    normalized = normalize_zip(raw_zip)
    coordinate = centroids.get(normalized) if normalized else None
    if coordinate is None:
        logger.warning("Zip code %s not found in centroid dataset", normalized or repr(raw_zip))
    return coordinate


def extract_zip(text: Optional[str]) -> Optional[str]:
    """Return the first standalone 5-digit token in free text, if any."""

    if not text:
        return None
    match = _ZIP_TOKEN.search(text)
    return match.group(1) if match else None
