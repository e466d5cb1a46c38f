"""
Planning layer (dining planner)

Pure functions over an in-memory catalog snapshot:
  - aggregate        : plan totals
  - score            : weighted nutrition / budget / dietary-safety score
  - suggest          : same-category substitution shortlist
  - optimize         : one bounded improvement pass
  - generate         : cold-start plan from a catalog

Fetching the catalog and persisting plans belongs to dining_planner.storage.
"""
from dining_planner.planning.nutrition import aggregate
from dining_planner.planning.optimizer import GeneratedPlan, OptimizationResult, generate, optimize
from dining_planner.planning.scoring import score
from dining_planner.planning.substitution import SubstitutionReason, suggest

__all__ = [
    "aggregate",
    "score",
    "suggest",
    "SubstitutionReason",
    "optimize",
    "OptimizationResult",
    "generate",
    "GeneratedPlan",
]
