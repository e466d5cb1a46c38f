"""
etl_run.py

Purpose:
    Operator runner for vendor (Nutrislice) export ingestion.

    This script orchestrates:
      • Loading one export file, or every export in a folder
      • Cleaning + dedupe (with a per-restaurant reduction report)
      • Normalization into catalog food items
      • Optional upload to the Supabase catalog
      • Optional JSON dump of the normalized items for review

Design:
    - Uses a shared LOG_RUN_ID (from logging_utils).
    - Emits a "Run Banner" at the start.
    - Safe to rerun: item ids are deterministic, uploads are upserts.

Usage:
    python scripts/etl_run.py --input data/raw-exports
    python scripts/etl_run.py --input data/raw-exports/scott.xlsx --upload
    python scripts/etl_run.py --input exports/ --output processed/all_items.json
"""

from __future__ import annotations

import argparse
import datetime
import json
import os
from typing import List

from dining_planner.etl.pipeline import IngestResult, MenuETL, restaurant_name
from dining_planner.logging_utils import LOG_RUN_ID, log_error, log_info, log_warning
from dining_planner.storage.catalog_store import CatalogStore

MODULE_PURPOSE = (
    "Operator CLI that ingests Nutrislice exports into the dining catalog."
)


# ---------------------------------------------------------------------------
# RUN BANNER
# ---------------------------------------------------------------------------
def print_run_banner(args) -> None:
    now = datetime.datetime.now(datetime.timezone.utc)
    banner = [
        "\n===============================================================",
        "  DINING PLANNER EXPORT INGESTION",
        f"  Run ID       : {LOG_RUN_ID}",
        f"  UTC Time     : {now.strftime('%Y-%m-%d %H:%M:%S')}",
        f"  Input        : {args.input}",
        f"  Upload       : {'yes' if args.upload else 'no (dry run)'}",
        "===============================================================\n",
    ]
    print("\n".join(banner))


def write_output(results: List[IngestResult], path: str) -> None:
    payload = {
        "run_id": LOG_RUN_ID,
        "restaurants": [
            {
                "id": r.restaurant_id,
                "name": restaurant_name(r.restaurant_id),
                "original_rows": r.report.original_count,
                "kept_rows": r.report.kept_count,
                "reduction_pct": r.report.reduction_pct,
                "menu_items": [i.to_row() for i in r.items],
            }
            for r in results
        ],
    }
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2, ensure_ascii=False)


# ---------------------------------------------------------------------------
# MAIN SEQUENCE
# ---------------------------------------------------------------------------
def run_etl(args) -> List[IngestResult]:
    store = CatalogStore() if args.upload else None
    etl = MenuETL(store=store)

    log_info(
        f"Starting ingestion from {args.input}",
        module_purpose=MODULE_PURPOSE,
        invoking_function="run_etl",
        invoking_purpose="Export ingestion flow",
        next_step="Load, clean and normalize exports",
    )

    if os.path.isdir(args.input):
        results = etl.ingest_folder(args.input)
        if not results:
            log_warning(
                f"No restaurants ingested from {args.input}",
                module_purpose=MODULE_PURPOSE,
                invoking_function="run_etl",
                invoking_purpose="Export ingestion flow",
                next_step="Exit script",
                resolution="Check the folder holds readable .xlsx/.csv exports",
            )
    else:
        try:
            results = [etl.ingest_file(args.input, restaurant_id=args.restaurant)]
        except Exception as exc:
            log_error(
                f"Ingestion of {args.input} failed",
                module_purpose=MODULE_PURPOSE,
                invoking_function="run_etl",
                invoking_purpose="Export ingestion flow",
                next_step="Abort run",
                resolution="Check the export path, format and Supabase credentials",
                exc=exc,
            )
            raise

    total_items = sum(len(r.items) for r in results)
    total_rows = sum(r.report.original_count for r in results)

    if args.output:
        write_output(results, args.output)

    log_info(
        f"Ingestion completed: {len(results)} restaurant(s), {total_rows} rows -> {total_items} items",
        module_purpose=MODULE_PURPOSE,
        invoking_function="run_etl",
        invoking_purpose="Export ingestion flow",
        next_step=f"Review {args.output}" if args.output else "Exit script",
    )
    return results


# ---------------------------------------------------------------------------
# CLI ENTRYPOINT
# ---------------------------------------------------------------------------
def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Nutrislice export ingestion runner")
    parser.add_argument("--input", default="data/raw-exports", help="Export file or folder of exports")
    parser.add_argument("--restaurant", default=None, help="Restaurant id (single file only; defaults to file name)")
    parser.add_argument("--upload", action="store_true", help="Upsert items into the Supabase catalog")
    parser.add_argument("--output", default=None, help="Write normalized items to this JSON file")
    return parser.parse_args(argv)


if __name__ == "__main__":
    args = parse_args()
    print_run_banner(args)
    run_etl(args)
