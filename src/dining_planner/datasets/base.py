# datasets/base.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass
# One line of the vendor (Nutrislice) export, before any cleaning.
class RawVendorRow:
    locations: str = ""                     # restaurant / location identifier
    nutrislice_food_name: str = ""          # vendor-assigned name, may be empty
    imported_food_name: str = ""            # imported name, may be empty
    text: str = ""                          # free text with nutrition / allergen phrases
    price: Union[str, float, None] = None   # raw cell value, parsed by the normalizer
    category: str = ""
    station: str = ""
    serving_size_amount: Union[str, float, None] = None
    serving_size_unit: str = ""
    serving_days: str = ""                  # comma-separated
    menu_types: str = ""                    # comma-separated
    is_section_title: bool = False
    is_station_header: bool = False
    published: Optional[bool] = None        # None when the column is absent

    nutrislice_id: str = ""
    imported_id: str = ""
    menu_name: str = ""
    location_groups: str = ""
    nutrislice_food_id: str = ""
    imported_food_id: str = ""
    menu_item_date: str = ""
    day_of_week: str = ""

    def resolved_name(self) -> str:
        return (self.nutrislice_food_name or "").strip() or (self.imported_food_name or "").strip()

    def vendor_id(self) -> str:
        return (self.nutrislice_food_id or "").strip() or (self.imported_food_id or "").strip()
