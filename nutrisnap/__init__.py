"""NutriSnap: free-text meal logging with Korean nutrition lookup."""

from .config import GoogleConfig, NutriSnapConfig, RecordConfig, load_config
from .nutrition import FoodItem, NutritionCalculator
from .parser import MealParser, MealType, ParsedMeal, classify_meal_type, parse_meal
from .record import (
    CalendarEvent,
    FormattedRecord,
    SheetRow,
    format_meal_record,
)
from .recorder import MealRecorder, SyncResult

__all__ = [
    "parse_meal",
    "format_meal_record",
    "classify_meal_type",
    "MealParser",
    "MealType",
    "ParsedMeal",
    "FoodItem",
    "NutritionCalculator",
    "FormattedRecord",
    "SheetRow",
    "CalendarEvent",
    "MealRecorder",
    "SyncResult",
    "NutriSnapConfig",
    "GoogleConfig",
    "RecordConfig",
    "load_config",
]
