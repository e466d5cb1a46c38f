from __future__ import annotations
"""
ETL pipeline for vendor menu exports: main entry point is ingest_rows()
1. Clean the batch (drop title/header rows, dedupe on name+location+station)
2. Normalize each kept row into a FoodItem
   a. nutrition / allergens / dietary tags from the free-text field
   b. category from the vendor hint, then the text
3. Optionally persist the items through CatalogStore

Logging in loops:
a. Info-level logging is per batch / per file only.
b. Per-row logging is at DEBUG level, so large imports do not flood logs.
"""

import glob
import os
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from dining_planner.datasets.base import RawVendorRow
from dining_planner.datasets.nutrislice_export import load_export
from dining_planner.etl.dedup import clean
from dining_planner.etl.normalizer import UNKNOWN_LOCATION, normalize_rows
from dining_planner.logging_utils import get_logger
from dining_planner.schema import CleanReport, FoodItem
from dining_planner.storage.catalog_store import CatalogStore

MODULE_PURPOSE = (
    "ETL pipeline that turns vendor export rows into canonical food items "
    "and stores them in the catalog."
)

logger = get_logger("pipeline")

EXPORT_PATTERNS = ("*.xlsx", "*.xls", "*.csv", "*.tsv")


@dataclass
class IngestResult:
    restaurant_id: str
    items: List[FoodItem]
    report: CleanReport
    stored: int = 0


@dataclass
class DiningLocation:
    id: str
    name: str
    restaurant_id: str
    menu: List[FoodItem] = field(default_factory=list)


def restaurant_name(restaurant_id: str) -> str:
    """'scott-traditions' -> 'Scott Traditions'"""
    return restaurant_id.replace("-", " ").replace("_", " ").title()


# Class MenuETL Started --->
class MenuETL:
    def __init__(self, store: Optional[CatalogStore] = None) -> None:
        # store=None runs the pipeline without persistence (dry run / tests)
        self.store = store

    def ingest_rows(self, rows: Iterable[RawVendorRow], restaurant_id: str) -> IngestResult:
        kept, report = clean(rows, batch_label=restaurant_id)
        items = normalize_rows(kept)

        stored = 0
        if self.store is not None and items:
            stored = self.store.put_food_items(items)

        logger.info(
            "Restaurant '%s': %d items normalized, %d stored",
            restaurant_id,
            len(items),
            stored,
            extra={
                "invoking_func": "ingest_rows",
                "invoking_purpose": MODULE_PURPOSE,
                "next_step": "Return IngestResult to caller",
                "resolution": "",
            },
        )
        return IngestResult(restaurant_id=restaurant_id, items=items, report=report, stored=stored)

    def ingest_file(self, path: str, restaurant_id: Optional[str] = None) -> IngestResult:
        if restaurant_id is None:
            restaurant_id = os.path.splitext(os.path.basename(path))[0]
        rows = load_export(path)
        return self.ingest_rows(rows, restaurant_id)

    def ingest_folder(self, folder: str) -> List[IngestResult]:
        files: List[str] = []
        for pattern in EXPORT_PATTERNS:
            files.extend(glob.glob(os.path.join(folder, pattern)))
        files = sorted(files)

        if not files:
            logger.warning(
                "No export files found in folder '%s'",
                folder,
                extra={
                    "invoking_func": "ingest_folder",
                    "invoking_purpose": "Batch ingest all vendor exports in a folder",
                    "next_step": "Return without ingesting",
                    "resolution": "Place Nutrislice .xlsx/.csv exports in the folder and rerun",
                },
            )
            return []

        results: List[IngestResult] = []
        for fpath in files:
            try:
                results.append(self.ingest_file(fpath))
            except Exception as exc:  # noqa: BLE001
                # One broken export must not stop the other restaurants
                logger.error(
                    "Failed to ingest export '%s': %s",
                    fpath,
                    exc,
                    extra={
                        "invoking_func": "ingest_folder",
                        "invoking_purpose": MODULE_PURPOSE,
                        "next_step": "Skip this file and continue with next",
                        "resolution": "Inspect the export format / columns / encoding",
                    },
                    exc_info=True,
                )
        return results

    @staticmethod
    def dining_locations(items: Iterable[FoodItem], restaurant_id: str) -> List[DiningLocation]:
        """Group a restaurant's items per location, in first-seen order."""
        by_location: Dict[str, DiningLocation] = {}
        for item in items:
            name = item.location or UNKNOWN_LOCATION
            loc = by_location.get(name)
            if loc is None:
                loc = DiningLocation(
                    id=f"{restaurant_id}_{'_'.join(name.split())}",
                    name=name,
                    restaurant_id=restaurant_id,
                )
                by_location[name] = loc
            loc.menu.append(item)
        return list(by_location.values())
