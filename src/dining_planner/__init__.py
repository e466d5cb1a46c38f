"""
dining_planner

Nutrition-data extraction for Nutrislice menu exports and meal-plan
scoring / optimization over the resulting campus dining catalog.
"""

__version__ = "0.1.0"
