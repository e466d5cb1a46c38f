"""
dedup.py

Purpose:
    Batch cleaner for one restaurant's vendor rows, run before normalization.

    - drops title / station-header rows and rows with no resolvable name
    - collapses rows sharing (name, location, station), compared after
      normalize_title() (case, punctuation and spacing ignored); first
      occurrence wins, later duplicates are dropped without merging their data
    - returns a CleanReport (before/after counts, % reduction) for audit logs

    The seen-set lives inside one clean() call and is never shared between
    batches or restaurants.
"""
from __future__ import annotations

from typing import Iterable, List, Set, Tuple

from dining_planner.datasets.base import RawVendorRow
from dining_planner.etl.normalizer import identity_key, is_food_row
from dining_planner.logging_utils import get_logger
from dining_planner.schema import CleanReport

logger = get_logger("dedup")

DedupKey = Tuple[str, str, str]


def dedup_key(row: RawVendorRow) -> DedupKey:
    # same key the item id is built from
    return identity_key(row)


def clean(rows: Iterable[RawVendorRow], *, batch_label: str = "") -> Tuple[List[RawVendorRow], CleanReport]:
    rows = list(rows)
    seen: Set[DedupKey] = set()
    kept: List[RawVendorRow] = []
    dropped_invalid = 0
    dropped_duplicates = 0

    for row in rows:
        if not is_food_row(row):
            dropped_invalid += 1
            continue

        key = dedup_key(row)
        if key in seen:
            dropped_duplicates += 1
            continue

        seen.add(key)
        kept.append(row)

    report = CleanReport(
        original_count=len(rows),
        kept_count=len(kept),
        dropped_invalid=dropped_invalid,
        dropped_duplicates=dropped_duplicates,
    )

    logger.info(
        "Cleaned batch '%s': %s",
        batch_label,
        report.summary(),
        extra={
            "invoking_func": "clean",
            "invoking_purpose": "Drop header rows and duplicates before normalization",
            "next_step": "Normalize kept rows into FoodItem records",
            "resolution": "",
        },
    )
    return kept, report
