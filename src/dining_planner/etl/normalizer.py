"""
normalizer.py

Purpose:
    Turn one RawVendorRow into one canonical FoodItem.

    Rules (in order):
      1. Title / station-header rows and rows without any name are rejected
         (normalize() returns None; callers skip them).
      2. name: vendor name -> imported name -> "Unknown Item"
      3. location: vendor location -> "Unknown Location"
      4. price: float parse, 0.0 on failure or absence, negatives clamped to 0.0
      5. category: classify_category(vendor category hint, text)
      6. calories / protein / carbs / fat: extractor values, 0 when missing
      7. serving size: "{amount} {unit}" only when both are present and non-zero
      8. serving days / menu types: comma split + trim
      9. available: False only when the export says published == false
"""
from __future__ import annotations

import hashlib
import math
from typing import Any, Iterable, List, Optional, Tuple

from dining_planner.datasets.base import RawVendorRow
from dining_planner.enrichment.cleaning import (
    clean_item_name,
    normalize_text,
    normalize_title,
    slugify,
    split_list_field,
)
from dining_planner.enrichment.patterns import (
    classify_category,
    extract_allergens,
    extract_dietary_tags,
    extract_nutrition,
)
from dining_planner.logging_utils import get_logger
from dining_planner.schema import FoodItem

UNKNOWN_ITEM = "Unknown Item"
UNKNOWN_LOCATION = "Unknown Location"

logger = get_logger("normalizer")


def is_food_row(row: RawVendorRow) -> bool:
    """Shared "is this a real menu item" predicate (also used by etl.dedup)."""
    if row.is_section_title or row.is_station_header:
        return False
    return bool(row.resolved_name())


def _parse_number(value: Any) -> float:
    """float() that returns 0.0 instead of raising; '$' and ',' are ignored."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        num = float(value)
    else:
        s = str(value).strip().replace("$", "").replace(",", "")
        if not s:
            return 0.0
        try:
            num = float(s)
        except ValueError:
            return 0.0
    if not math.isfinite(num):
        return 0.0
    return num


def parse_price(value: Any) -> float:
    return max(0.0, _parse_number(value))


def format_serving_size(amount: Any, unit: Any) -> Optional[str]:
    qty = _parse_number(amount)
    unit_s = str(unit).strip() if unit is not None else ""
    if qty == 0 or not unit_s:
        return None
    return f"{qty:g} {unit_s}"


def resolve_name(row: RawVendorRow) -> str:
    return (
        clean_item_name(row.nutrislice_food_name)
        or clean_item_name(row.imported_food_name)
        or UNKNOWN_ITEM
    )


def resolve_location(row: RawVendorRow) -> str:
    return (row.locations or "").strip() or UNKNOWN_LOCATION


def identity_key(row: RawVendorRow) -> Tuple[str, str, str]:
    """
    (name, location, station) as compared for duplicates and ids.

    "PIZZA" at "Scott  Traditions" is the same item as "Pizza" at
    "Scott Traditions"; etl.dedup and make_item_id both use this key, so two
    rows kept apart by the deduplicator never share an id.
    """
    return (
        normalize_title(resolve_name(row)),
        normalize_title(resolve_location(row)),
        normalize_title(row.station),
    )


def make_item_id(row: RawVendorRow) -> str:
    """
    Deterministic id built from identity_key().

    - vendor food id present: "<vendor id>_<name slug>_<location slug>_<station slug>"
    - no vendor id: "item_<hash of name|location|station>"

    The same export row therefore maps to the same id on every import.
    """
    name, location, station = identity_key(row)
    vendor_id = row.vendor_id()
    if vendor_id:
        slugs = [slugify(s) or "default" for s in (name, location, station)]
        return "_".join([vendor_id] + slugs)

    digest = hashlib.sha1("|".join([name, location, station]).encode("utf-8")).hexdigest()[:12]
    return f"item_{digest}"


def normalize(row: RawVendorRow) -> Optional[FoodItem]:
    if not is_food_row(row):
        return None

    name = resolve_name(row)
    location = resolve_location(row)
    text = row.text or ""

    nutrition = extract_nutrition(text)

    def _nutrient(attr: str) -> float:
        if nutrition is None:
            return 0
        value = getattr(nutrition, attr)
        return value if value is not None else 0

    return FoodItem(
        id=make_item_id(row),
        name=name,
        location=location,
        category=classify_category(row.category, text),
        price=parse_price(row.price),
        calories=_nutrient("calories"),
        protein=_nutrient("protein"),
        carbs=_nutrient("carbs"),
        fat=_nutrient("fat"),
        fiber=nutrition.fiber if nutrition else None,
        sugar=nutrition.sugar if nutrition else None,
        sodium=nutrition.sodium if nutrition else None,
        serving_size=format_serving_size(row.serving_size_amount, row.serving_size_unit),
        allergens=extract_allergens(text),
        tags=extract_dietary_tags(text),
        station=(row.station or "").strip(),
        serving_days=split_list_field(row.serving_days),
        menu_types=split_list_field(row.menu_types),
        available=row.published is not False,
        description=normalize_text(text),
        vendor_id=row.vendor_id() or None,
        menu_item_date=row.menu_item_date or None,
        nutrition=nutrition,
    )


def normalize_rows(rows: Iterable[RawVendorRow]) -> List[FoodItem]:
    items: List[FoodItem] = []
    for idx, row in enumerate(rows):
        item = normalize(row)
        if item is None:
            logger.debug(
                "Skipping non-item row %d (title/header/no name)",
                idx,
                extra={
                    "invoking_func": "normalize_rows",
                    "invoking_purpose": "Normalize a batch of vendor rows",
                    "next_step": "Continue with next row",
                    "resolution": "",
                },
            )
            continue
        items.append(item)
    return items
