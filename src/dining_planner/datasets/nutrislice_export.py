# datasets/nutrislice_export.py

"""
What this does:
1. Reads a Nutrislice menu export (.xlsx / .xls / .csv / .tsv) with pandas.
2. Matches columns by synonym sets, so both the spreadsheet headers
   ("Nutrislice Food Name") and snake_case exports ("nutrislice_food_name")
   are understood.
3. Produces RawVendorRow objects; no cleaning or extraction happens here.
   etl.dedup and etl.normalizer take it from there.
"""

from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import pandas as pd

from dining_planner.datasets.base import RawVendorRow
from dining_planner.logging_utils import get_logger

logger = get_logger("nutrislice_export")


def _normalize_col_name(col: str) -> str:
    """
    Normalize column names so we can match them across export variants.
    Examples:
      "Nutrislice Food Name" -> "nutrislice_food_name"
      "Serving size (amount)" -> "serving_size_amount"
    """
    c = str(col).strip().lower()
    for ch in [" ", "-", ".", "(", ")", "[", "]"]:
        c = c.replace(ch, "_")
    while "__" in c:
        c = c.replace("__", "_")
    return c.strip("_")


# RawVendorRow field -> accepted normalized column names
COLUMN_SYNONYMS: Dict[str, tuple] = {
    "nutrislice_id": ("nutrislice_id",),
    "imported_id": ("imported_id",),
    "menu_name": ("menu_name",),
    "published": ("published",),
    "menu_types": ("menu_types", "menu_type", "meal_type"),
    "locations": ("locations", "location"),
    "location_groups": ("location_groups",),
    "serving_days": ("serving_days",),
    "menu_item_date": ("menu_item_date", "date"),
    "day_of_week": ("day_of_week",),
    "nutrislice_food_id": ("nutrislice_food_id",),
    "imported_food_id": ("imported_food_id",),
    "nutrislice_food_name": ("nutrislice_food_name", "food_name"),
    "imported_food_name": ("imported_food_name",),
    "text": ("text", "description"),
    "is_section_title": ("is_section_title",),
    "category": ("category",),
    "price": ("price",),
    "serving_size_amount": ("serving_size_amount", "serving_amount"),
    "serving_size_unit": ("serving_size_unit", "serving_unit"),
    "station": ("station",),
    "is_station_header": ("is_station_header",),
}

BOOL_FIELDS = {"is_section_title", "is_station_header", "published"}
RAW_FIELDS = {"price", "serving_size_amount"}


def _find_col(norm_to_orig: Dict[str, str], candidates: tuple) -> Optional[str]:
    """
    Given a mapping of normalized -> original column names, return the original
    name for the first candidate that exists.
    """
    for cand in candidates:
        if cand in norm_to_orig:
            return norm_to_orig[cand]
    return None


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _cell_str(value: Any) -> str:
    if _is_blank(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        # Excel ids like 12345 come back as 12345.0
        return str(int(value))
    return str(value).strip()


def _parse_bool(value: Any, default: Optional[bool] = False) -> Optional[bool]:
    if _is_blank(value) or str(value).strip() == "":
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"true", "1", "yes", "y", "1.0"}


def rows_from_dataframe(df: pd.DataFrame) -> List[RawVendorRow]:
    """Map an export DataFrame onto RawVendorRow objects (one per line)."""
    norm_to_orig: Dict[str, str] = {}
    for orig in df.columns:
        norm_to_orig.setdefault(_normalize_col_name(orig), orig)

    resolved = {
        field_name: _find_col(norm_to_orig, synonyms)
        for field_name, synonyms in COLUMN_SYNONYMS.items()
    }

    rows: List[RawVendorRow] = []
    for _, rec in df.iterrows():
        kwargs: Dict[str, Any] = {}
        for field_name, col in resolved.items():
            value = rec.get(col) if col is not None else None
            if field_name in BOOL_FIELDS:
                # published defaults to "unknown" so the normalizer can apply
                # its own default (available unless explicitly false)
                default = None if field_name == "published" else False
                kwargs[field_name] = _parse_bool(value, default=default)
            elif field_name in RAW_FIELDS:
                kwargs[field_name] = None if _is_blank(value) else value
            else:
                kwargs[field_name] = _cell_str(value)
        rows.append(RawVendorRow(**kwargs))
    return rows


def read_export_frame(path: str) -> pd.DataFrame:
    ext = os.path.splitext(path)[1].lower()
    if ext in {".xlsx", ".xls"}:
        # First sheet only; Nutrislice puts one menu per workbook
        return pd.read_excel(path, sheet_name=0, dtype=object)
    if ext == ".tsv":
        return pd.read_csv(path, sep="\t", dtype=object)
    return pd.read_csv(path, dtype=object)


def load_export(path: str) -> List[RawVendorRow]:
    """
    Load a vendor export and return its rows, title/header lines included.

    - Handles different column spellings using COLUMN_SYNONYMS
    - Leaves filtering to etl.dedup.clean()
    """
    df = read_export_frame(path)
    rows = rows_from_dataframe(df)

    logger.info(
        "Loaded %d raw rows from '%s'",
        len(rows),
        path,
        extra={
            "invoking_func": "load_export",
            "invoking_purpose": "Read a Nutrislice export into RawVendorRow objects",
            "next_step": "Clean + dedupe rows, then normalize",
            "resolution": "",
        },
    )
    return rows
