"""
catalog_store.py

Thin Supabase adapter for the pieces the planner needs:
  get_catalog(location)          -> List[FoodItem]
  put_food_item(item)            -> upsert one row
  put_food_items(items)          -> bulk upsert with chunked / per-row fallback
  delete_item(item_id)
  get_profile(user_id)           -> GoalProfile
  put_plan(user_id, date, items) -> upsert one plan row

The planning functions never call this module; callers fetch a snapshot,
run the pure functions, then persist.

Note:
  - Service role bypasses RLS (imports/backfills).
  - For client apps, prefer calling a backend; do not expose service keys.
"""
from __future__ import annotations

import datetime
from typing import Any, Dict, List, Optional, Sequence, Union

from supabase import Client

from dining_planner.config import TableNames, get_supabase_client, get_table_names
from dining_planner.logging_utils import get_logger
from dining_planner.planning.nutrition import aggregate
from dining_planner.schema import FoodItem, GoalProfile, MealPlanScore

logger = get_logger("catalog_store")

CHUNK_SIZE = 500


def _is_bulk_limitation(exc: Exception) -> bool:
    msg = str(exc).lower()
    return "parallel" in msg or "multiple" in msg or "bulk" in msg


class CatalogStore:
    def __init__(self, client: Optional[Client] = None, tables: Optional[TableNames] = None) -> None:
        self.client = client if client is not None else get_supabase_client()
        self.tables = tables or get_table_names()

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------
    def get_catalog(self, location: Optional[str] = None, *, available_only: bool = False) -> List[FoodItem]:
        q = self.client.table(self.tables.food_items).select("*")
        if location:
            q = q.eq("location", location)
        if available_only:
            q = q.eq("available", True)
        res = q.execute()

        items: List[FoodItem] = []
        for row in res.data or []:
            # Stored header rows from older imports are not food items
            if row.get("is_section_title") or row.get("is_station_header"):
                continue
            items.append(FoodItem.from_row(row))

        logger.debug(
            "Fetched %d catalog items (location=%s)",
            len(items),
            location,
            extra={
                "invoking_func": "get_catalog",
                "invoking_purpose": "Load a catalog snapshot for planning",
                "next_step": "Hand snapshot to planning functions",
                "resolution": "",
            },
        )
        return items

    def put_food_item(self, item: FoodItem) -> None:
        self.client.table(self.tables.food_items).upsert(item.to_row(), on_conflict="id").execute()

    def put_food_items(self, items: Sequence[FoodItem]) -> int:
        """
        Try bulk upsert, but fall back to chunked and then row-by-row upserts
        if the Supabase instance rejects multi-row inserts.
        """
        rows = [i.to_row() for i in items]
        if not rows:
            return 0

        table = self.client.table(self.tables.food_items)
        try:
            table.upsert(rows, on_conflict="id").execute()
        except Exception as exc:  # noqa: BLE001
            if not _is_bulk_limitation(exc):
                # Not the known bulk-insert limitation -> bubble up
                raise

            logger.warning(
                "Bulk upsert of %d rows rejected; retrying in chunks of %d",
                len(rows),
                CHUNK_SIZE,
                extra={
                    "invoking_func": "put_food_items",
                    "invoking_purpose": "Persist normalized catalog items",
                    "next_step": "Chunked upsert, then per-row if still rejected",
                    "resolution": "",
                },
            )
            try:
                for i in range(0, len(rows), CHUNK_SIZE):
                    table.upsert(rows[i : i + CHUNK_SIZE], on_conflict="id").execute()
            except Exception as chunk_exc:  # noqa: BLE001
                if not _is_bulk_limitation(chunk_exc):
                    raise
                for row in rows:
                    table.upsert(row, on_conflict="id").execute()
        return len(rows)

    def delete_item(self, item_id: str) -> None:
        self.client.table(self.tables.food_items).delete().eq("id", item_id).execute()

    # ------------------------------------------------------------------
    # Profiles + plans
    # ------------------------------------------------------------------
    def get_profile(self, user_id: str) -> GoalProfile:
        res = self.client.table(self.tables.profiles).select("*").eq("user_id", user_id).limit(1).execute()
        if not res.data:
            raise LookupError(f"No profile stored for user {user_id}")
        return GoalProfile.from_row(res.data[0])

    def put_plan(
        self,
        user_id: str,
        plan_date: Union[datetime.date, str],
        items: Sequence[FoodItem],
        score: Optional[MealPlanScore] = None,
    ) -> Dict[str, Any]:
        if isinstance(plan_date, (datetime.date, datetime.datetime)):
            plan_date = plan_date.isoformat()[:10]

        totals = aggregate(items)
        payload: Dict[str, Any] = {
            "user_id": user_id,
            "plan_date": plan_date,
            "item_ids": [i.id for i in items],
            "total_calories": totals.calories,
            "total_protein": totals.protein,
            "total_carbs": totals.carbs,
            "total_fat": totals.fat,
            "total_cost": round(totals.cost, 2),
        }
        if score is not None:
            payload["score"] = score.as_dict()

        self.client.table(self.tables.meal_plans).upsert(payload, on_conflict="user_id,plan_date").execute()

        logger.info(
            "Stored plan for user %s on %s (%d items)",
            user_id,
            plan_date,
            len(items),
            extra={
                "invoking_func": "put_plan",
                "invoking_purpose": "Persist a user's meal plan",
                "next_step": "",
                "resolution": "",
            },
        )
        return payload
