"""
plan_example.py

Generate, optimize and score a meal plan for a stored user.

Run:
  python scripts/plan_example.py --user-id <uuid> [--location "Scott Dining"] [--save]

Requires:
  SUPABASE_URL
  SUPABASE_SERVICE_ROLE_KEY (or anon/authenticated key with RLS policies)
"""
from __future__ import annotations

import argparse
import datetime

from dining_planner.planning import generate
from dining_planner.storage.catalog_store import CatalogStore


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--user-id", required=True)
    ap.add_argument("--location", default=None)
    ap.add_argument("--optimize", action="store_true")
    ap.add_argument("--save", action="store_true", help="Store the plan for today")
    args = ap.parse_args()

    store = CatalogStore()
    goals = store.get_profile(args.user_id)
    catalog = store.get_catalog(args.location, available_only=True)

    plan = generate(catalog, goals, optimize_plan=args.optimize)
    for i, item in enumerate(plan.items, start=1):
        print(f"{i:02d}. [{item.category}] {item.name}  ${item.price:.2f}  {item.calories:g} cal  {item.protein:g}g protein")
    for line in plan.improvements:
        print("    *", line)

    s = plan.score.as_dict()
    print(f"score={s['overall']} (nutrition={s['nutrition_score']}, budget={s['budget_score']}, dietary={s['dietary_score']})")
    for line in plan.score.feedback:
        print("    -", line)

    if args.save:
        store.put_plan(args.user_id, datetime.date.today(), plan.items, plan.score)


if __name__ == "__main__":
    main()
