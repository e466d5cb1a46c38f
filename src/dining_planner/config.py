"""
config.py

Purpose:
    Environment-driven configuration:
      - get_supabase_client() for the document store,
      - get_openai_settings() for the optional dining assistant,
      - table names used by the catalog store.

Usage:
    from dining_planner.config import get_supabase_client
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

# Client connection details come from env vars, never hardcoded.
from supabase import create_client, Client

from dotenv import load_dotenv

load_dotenv()  # loads .env


@dataclass(frozen=True)
class TableNames:
    food_items: str = "food_items"
    profiles: str = "profiles"
    meal_plans: str = "meal_plans"


@dataclass(frozen=True)
class OpenAISettings:
    api_key: Optional[str]
    model: str


def get_supabase_client() -> Client:
    """Create a Supabase client using env vars."""
    url = os.environ["SUPABASE_URL"]
    key = os.environ["SUPABASE_SERVICE_ROLE_KEY"]  # service role for imports, not anon key
    return create_client(url, key)


def get_table_names() -> TableNames:
    return TableNames(
        food_items=os.getenv("DINING_FOOD_ITEMS_TABLE", "food_items"),
        profiles=os.getenv("DINING_PROFILES_TABLE", "profiles"),
        meal_plans=os.getenv("DINING_MEAL_PLANS_TABLE", "meal_plans"),
    )


def get_openai_settings() -> OpenAISettings:
    """OPENAI_API_KEY unset or set to 'demo' means canned assistant replies."""
    api_key = os.getenv("OPENAI_API_KEY") or None
    if api_key == "demo":
        api_key = None
    return OpenAISettings(
        api_key=api_key,
        model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
    )
