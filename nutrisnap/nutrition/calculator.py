"""Nutrition calculator for recognized food mentions."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from .food_data import FoodDatabase, FoodFact
from .units import to_grams

logger = logging.getLogger(__name__)

# Larger served amounts fall back to a quantity of 1
MAX_ITEM_GRAMS = 1e12


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero for positive values (2.5 -> 3, 0.25 -> 0.3)."""
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


@dataclass(frozen=True)
class FoodItem:
    """One recognized, quantified food mention with computed nutrition.

    Macro fields are ``None`` when the food table has no value for them.
    """

    name: str
    quantity: float
    unit: str
    grams: int
    kcal: int
    carb_g: float | None = None
    protein_g: float | None = None
    fat_g: float | None = None
    sodium_mg: int | None = None


class NutritionCalculator:
    """Scales per-100g facts to a served amount."""

    def __init__(self, food_db: FoodDatabase | None = None) -> None:
        self._db = food_db or FoodDatabase.instance()

    @property
    def food_db(self) -> FoodDatabase:
        return self._db

    def create_food_item(
        self, food_name: str, quantity: float, unit: str
    ) -> FoodItem | None:
        """Build a FoodItem for ``quantity`` ``unit`` of ``food_name``.

        Returns:
            None if the food is not in the table.
        """
        fact = self._db.lookup(food_name)
        if fact is None:
            return None

        grams = to_grams(food_name, quantity, unit)
        if not grams <= MAX_ITEM_GRAMS:
            logger.warning(
                "Quantity %r %s of %s is out of range, using 1", quantity, unit, food_name
            )
            quantity = 1.0
            grams = to_grams(food_name, quantity, unit)
        return self.evaluate(fact, grams, quantity=quantity, unit=unit)

    @staticmethod
    def evaluate(
        fact: FoodFact, grams: float, *, quantity: float = 1.0, unit: str = ""
    ) -> FoodItem:
        """Compute nutrition of ``grams`` of a food from its per-100g facts."""
        ratio = grams / 100.0

        def scaled(per_100g: float | None, digits: int) -> float | None:
            if per_100g is None:
                return None
            return round_half_up(per_100g * ratio, digits)

        sodium = scaled(fact.sodium_mg, 0)
        return FoodItem(
            name=fact.name,
            quantity=quantity,
            unit=unit,
            grams=int(round_half_up(grams)),
            kcal=int(round_half_up(fact.kcal * ratio)),
            carb_g=scaled(fact.carb_g, 1),
            protein_g=scaled(fact.protein_g, 1),
            fat_g=scaled(fact.fat_g, 1),
            sodium_mg=int(sodium) if sodium is not None else None,
        )
