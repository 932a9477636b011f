"""Korean food nutrition table loader (singleton)."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class FoodFact:
    """Nutrition facts per 100g of a food.

    Optional fields are ``None`` when the value is unknown. A stored ``0`` is
    a known zero and is kept distinct from ``None``.
    """

    name: str
    group: str
    kcal: float
    carb_g: float | None = None
    protein_g: float | None = None
    fat_g: float | None = None
    sodium_mg: float | None = None


class FoodDatabase:
    """Singleton accessor for the bundled food table.

    Usage:
        db = FoodDatabase.instance()
        fact = db.lookup("김치찌개")
    """

    _instance: FoodDatabase | None = None
    _foods: tuple[FoodFact, ...]
    _name_index: dict[str, FoodFact]

    def __init__(self, data_path: str | Path | None = None) -> None:
        self._data_path = (
            Path(data_path)
            if data_path is not None
            else Path(__file__).parent / "data" / "korean_foods.json"
        )
        self._foods = ()
        self._name_index = {}
        self._load()

    @classmethod
    def instance(cls) -> FoodDatabase:
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton (for testing)."""
        cls._instance = None

    def _load(self) -> None:
        with open(self._data_path, encoding="utf-8") as f:
            raw = json.load(f)

        foods: list[FoodFact] = []
        for entry in raw["foods"]:
            fact = FoodFact(
                name=entry["name"],
                group=entry.get("group", ""),
                kcal=entry["kcal"],
                carb_g=entry.get("carb"),
                protein_g=entry.get("protein"),
                fat_g=entry.get("fat"),
                sodium_mg=entry.get("sodium"),
            )
            foods.append(fact)
            self._name_index[fact.name] = fact
        self._foods = tuple(foods)

    def lookup(self, name: str) -> FoodFact | None:
        """Look up a food by exact name. No fuzzy matching."""
        return self._name_index.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._name_index

    def __len__(self) -> int:
        return len(self._foods)

    def names_in(self, text: str) -> list[str]:
        """Return every food name occurring in ``text``, in table order."""
        return [food.name for food in self._foods if food.name in text]

    @property
    def names(self) -> list[str]:
        return [food.name for food in self._foods]

    @property
    def all_foods(self) -> list[FoodFact]:
        return list(self._foods)
