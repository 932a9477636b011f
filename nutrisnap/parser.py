"""Free-text meal parsing: meal type, food mentions, quantities and totals."""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable
from zoneinfo import ZoneInfo

from .nutrition.calculator import FoodItem, NutritionCalculator, round_half_up
from .nutrition.units import (
    DECIMAL_PATTERN,
    DEFAULT_UNIT,
    NUMERAL_PATTERN,
    SIZE_WORD_PATTERN,
    UNIT_PATTERN,
    resolve_quantity,
)

logger = logging.getLogger(__name__)

DEFAULT_TIME_ZONE = "Asia/Seoul"


class MealType(str, enum.Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"

    @property
    def label_ko(self) -> str:
        return _MEAL_LABELS_KO[self]


_MEAL_LABELS_KO: dict[MealType, str] = {
    MealType.BREAKFAST: "아침",
    MealType.LUNCH: "점심",
    MealType.DINNER: "저녁",
    MealType.SNACK: "간식",
}

# Checked in order; the first meal type with a matching keyword wins
_MEAL_KEYWORDS: list[tuple[MealType, list[str]]] = [
    (MealType.BREAKFAST, ["아침", "조식", "breakfast"]),
    (MealType.LUNCH, ["점심", "중식", "lunch"]),
    (MealType.DINNER, ["저녁", "석식", "dinner"]),
    (MealType.SNACK, ["간식", "snack"]),
]


def classify_meal_type(text: str) -> MealType | None:
    """Return the meal type named in ``text``, or None if unclassified."""
    lowered = text.lower()
    for meal_type, keywords in _MEAL_KEYWORDS:
        if any(k in lowered for k in keywords):
            return meal_type
    return None


@dataclass(frozen=True)
class Mention:
    """A candidate (food, quantity, unit) triple found in the text."""

    food: str
    quantity: str
    unit: str


_FOOD = r"(?P<food>[가-힣A-Za-z]+)"
_UNIT = rf"(?P<unit>{UNIT_PATTERN})"


class PatternMatcher:
    """One text pattern yielding mentions for every non-overlapping match."""

    def __init__(self, name: str, pattern: str) -> None:
        self.name = name
        self._regex = re.compile(pattern)

    def __call__(self, text: str) -> list[Mention]:
        mentions = []
        for m in self._regex.finditer(text):
            groups = m.groupdict()
            mentions.append(Mention(
                food=groups["food"],
                quantity=groups.get("qty") or "",
                unit=groups.get("unit") or "",
            ))
        return mentions

    def __repr__(self) -> str:
        return f"PatternMatcher({self.name!r})"


MATCHERS: tuple[PatternMatcher, ...] = (
    # "밥 한 공기"
    PatternMatcher(
        "food-numeral-unit",
        rf"{_FOOD}\s*(?P<qty>{NUMERAL_PATTERN})\s*{_UNIT}",
    ),
    # "한 그릇 라면", "2그릇 냉면"
    PatternMatcher(
        "quantity-unit-food",
        rf"(?<![가-힣A-Za-z0-9.])(?P<qty>{DECIMAL_PATTERN}|{NUMERAL_PATTERN})"
        rf"\s*{_UNIT}\s+{_FOOD}",
    ),
    # "김치찌개 1그릇", "토스트 2장", "닭가슴살 200g"
    PatternMatcher(
        "food-number-unit",
        rf"{_FOOD}\s*(?P<qty>{DECIMAL_PATTERN})\s*{_UNIT}",
    ),
    # "김치 조금", "밥 많이"
    PatternMatcher(
        "food-size-word",
        rf"{_FOOD}\s+(?P<unit>{SIZE_WORD_PATTERN})(?![가-힣])",
    ),
)


def extract_mentions(
    text: str, matchers: Iterable[PatternMatcher] = MATCHERS
) -> list[Mention]:
    """Run every matcher over ``text`` in order and collect all candidates.

    Earlier matchers do not suppress later ones, so the same food can be
    reported more than once. Candidates are not filtered here.
    """
    mentions: list[Mention] = []
    for matcher in matchers:
        found = matcher(text)
        if found:
            logger.debug("%r matched %d mention(s): %s", matcher, len(found), found)
        mentions.extend(found)
    return mentions


@dataclass(frozen=True)
class ParsedMeal:
    """Result of parsing one free-text meal description."""

    items: tuple[FoodItem, ...] = ()
    total_kcal: int = 0
    total_grams: int = 0
    meal_type: MealType | None = None
    note: str = ""
    recorded_at: datetime = field(
        default_factory=lambda: datetime.now(ZoneInfo(DEFAULT_TIME_ZONE))
    )

    @property
    def meal_label(self) -> str:
        """Korean label for the meal type, "간식" when unclassified."""
        return self.meal_type.label_ko if self.meal_type else "간식"


def aggregate(
    items: Iterable[FoodItem],
    text: str,
    *,
    meal_type: MealType | None = None,
    recorded_at: datetime | None = None,
) -> ParsedMeal:
    """Sum item calories and grams into a ParsedMeal."""
    items = tuple(items)
    return ParsedMeal(
        items=items,
        total_kcal=int(round_half_up(sum(i.kcal for i in items))),
        total_grams=int(round_half_up(sum(i.grams for i in items))),
        meal_type=meal_type,
        note=text,
        recorded_at=recorded_at or datetime.now(ZoneInfo(DEFAULT_TIME_ZONE)),
    )


class MealParser:
    """Turns a free-text meal description into a ParsedMeal."""

    def __init__(
        self,
        calculator: NutritionCalculator | None = None,
        matchers: Iterable[PatternMatcher] = MATCHERS,
        time_zone: str = DEFAULT_TIME_ZONE,
    ) -> None:
        self._calculator = calculator or NutritionCalculator()
        self._matchers = tuple(matchers)
        self._tz = ZoneInfo(time_zone)

    @property
    def calculator(self) -> NutritionCalculator:
        return self._calculator

    def parse(self, text: str | None, now: datetime | None = None) -> ParsedMeal:
        """Parse ``text``. Never raises; unknown input yields an empty meal."""
        if not isinstance(text, str):
            text = ""
        logger.info("Parsing input: %r", text)

        items: list[FoodItem] = []
        for mention in extract_mentions(text, self._matchers):
            if mention.food not in self._calculator.food_db:
                continue
            item = self._calculator.create_food_item(
                mention.food, resolve_quantity(mention.quantity), mention.unit
            )
            if item is not None:
                items.append(item)

        # Bare food names with no quantity or unit
        if not items:
            for name in self._calculator.food_db.names_in(text):
                item = self._calculator.create_food_item(name, 1.0, DEFAULT_UNIT)
                if item is not None:
                    items.append(item)

        meal = aggregate(
            items,
            text,
            meal_type=classify_meal_type(text),
            recorded_at=now or datetime.now(self._tz),
        )
        logger.info(
            "Parsed %d item(s), %d kcal, meal type %s",
            len(meal.items),
            meal.total_kcal,
            meal.meal_type.value if meal.meal_type else "unclassified",
        )
        return meal


_default_parser: MealParser | None = None


def parse_meal(text: str | None, now: datetime | None = None) -> ParsedMeal:
    """Parse ``text`` with a shared default MealParser."""
    global _default_parser
    if _default_parser is None:
        _default_parser = MealParser()
    return _default_parser.parse(text, now=now)
