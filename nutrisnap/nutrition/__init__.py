"""Nutrition calculation from the bundled Korean food table."""

from .calculator import FoodItem, NutritionCalculator, round_half_up
from .food_data import FoodDatabase, FoodFact
from .units import UNIT_RULES, UnitRule, resolve_quantity, to_grams

__all__ = [
    "FoodDatabase",
    "FoodFact",
    "FoodItem",
    "NutritionCalculator",
    "UnitRule",
    "UNIT_RULES",
    "resolve_quantity",
    "round_half_up",
    "to_grams",
]
