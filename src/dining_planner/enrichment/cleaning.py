# src/dining_planner/enrichment/cleaning.py
from __future__ import annotations

"""
cleaning.py

Purpose:
    Deterministic string cleanup for vendor export cells:
    item names, comma-separated list cells, and slugs for ids.

    This is the "Layer 0" cleanup that runs before extraction.
"""

import re
from typing import Any, List, Optional


def clean_item_name(name: Any) -> Optional[str]:
    if not isinstance(name, str):
        return None
    t = name.replace("\r", " ").replace("\n", " ")
    # Collapse multiple spaces
    t = re.sub(r"\s+", " ", t).strip()
    # Remove hyphens/dashes at start or end
    t = t.strip(" -–—")
    return t or None


def normalize_text(text: Any) -> str:
    if not isinstance(text, str):
        return ""
    t = text.replace("\r", " ")
    lines = [ln.strip() for ln in t.splitlines() if ln.strip()]
    t = " ".join(lines)
    t = re.sub(r"\s+", " ", t)
    return t.strip()


def normalize_title(title: Any) -> str:
    """Normalize an item name for ids / equality checks.

    Behavior:
        - lowercases,
        - strips punctuation,
        - collapses whitespace.

    Digits are kept ("2 Eggs Any Style").
    """
    cleaned = clean_item_name(title)
    if not cleaned:
        return ""
    t = cleaned.lower()
    # Replace non-alphanumeric (incl. underscores) with spaces.
    t = re.sub(r"[^a-z0-9]+", " ", t)
    t = re.sub(r"\s+", " ", t)
    return t.strip()


def slugify(value: Any) -> str:
    return normalize_title(value).replace(" ", "-")


def split_list_field(txt: Any) -> List[str]:
    """Comma-split a serving-day / menu-type cell; empty cell -> []."""
    if not isinstance(txt, str) or not txt.strip():
        return []
    out = []
    for p in txt.split(","):
        p = p.strip()
        if not p:
            continue
        out.append(p)
    return out
