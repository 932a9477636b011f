"""Korean serving unit to gram conversion utilities."""

from __future__ import annotations

import enum
import math
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

# Tokens meaning the quantity is already a weight in grams
GRAM_MARKERS: tuple[str, ...] = ("g", "그램")

DEFAULT_UNIT = "기본"

# Grams per unit when neither a unit rule nor a size word applies
GENERIC_GRAMS_PER_UNIT = 100.0


@dataclass(frozen=True)
class UnitRule:
    """Gram weight of one serving unit, with per-food overrides."""

    name: str
    default_grams: float
    food_grams: Mapping[str, float] = field(default_factory=dict)

    def grams_for(self, food_name: str) -> float:
        return self.food_grams.get(food_name, self.default_grams)


def _rule(
    name: str, default: float, foods: dict[str, float] | None = None
) -> tuple[str, UnitRule]:
    return name, UnitRule(name, default, MappingProxyType(dict(foods or {})))


UNIT_RULES: Mapping[str, UnitRule] = MappingProxyType(dict([
    # 밥류
    _rule("공기", 150.0, {"밥": 150.0, "흰밥": 150.0, "현미밥": 150.0}),
    # 면/국/찌개류
    _rule("그릇", 200.0, {"라면": 300.0, "냉면": 350.0, "칼국수": 300.0}),
    # 개수 단위
    _rule("개", 50.0, {"계란": 60.0, "계란후라이": 60.0}),
    _rule("장", 30.0, {"식빵": 30.0, "토스트": 30.0}),
    _rule("조각", 50.0, {"피자": 150.0, "치킨": 100.0}),
    # 부피
    _rule("컵", 200.0),
    _rule("숟가락", 15.0),
    _rule("큰술", 15.0),
    _rule("작은술", 5.0),
]))

# Qualitative size words. Quantity is ignored for these.
SIZE_WORD_GRAMS: Mapping[str, float] = MappingProxyType({
    DEFAULT_UNIT: 100.0,
    "조금": 50.0,
    "많이": 200.0,
    "큰": 150.0,
    "작은": 80.0,
})

KOREAN_NUMERALS: Mapping[str, float] = MappingProxyType({
    "한": 1, "하나": 1, "일": 1,
    "두": 2, "둘": 2, "이": 2,
    "세": 3, "셋": 3, "삼": 3,
    "네": 4, "넷": 4, "사": 4,
    "다섯": 5, "오": 5,
    "여섯": 6, "육": 6,
    "일곱": 7, "칠": 7,
    "여덟": 8, "팔": 8,
    "아홉": 9, "구": 9,
    "열": 10, "십": 10,
    "반": 0.5,
})


def _alternation(words) -> str:
    """Regex alternation of ``words``, longest first so prefixes lose."""
    return "|".join(re.escape(w) for w in sorted(words, key=len, reverse=True))


# Regex fragments shared with the mention extractor
UNIT_PATTERN = _alternation([*UNIT_RULES, *GRAM_MARKERS])
SIZE_WORD_PATTERN = _alternation(w for w in SIZE_WORD_GRAMS if w != DEFAULT_UNIT)
NUMERAL_PATTERN = _alternation(KOREAN_NUMERALS)
DECIMAL_PATTERN = r"\d+(?:\.\d+)?"

_DECIMAL_RE = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)\s*")


class QuantityKind(enum.Enum):
    KOREAN_NUMERAL = "korean_numeral"
    DECIMAL = "decimal"
    EMPTY = "empty"


@dataclass(frozen=True)
class QuantityToken:
    """A raw quantity token tagged with how it should be resolved."""

    kind: QuantityKind
    text: str = ""

    @classmethod
    def classify(cls, text: str | None) -> QuantityToken:
        text = (text or "").strip()
        if text in KOREAN_NUMERALS:
            return cls(QuantityKind.KOREAN_NUMERAL, text)
        if text and _DECIMAL_RE.fullmatch(text):
            return cls(QuantityKind.DECIMAL, text)
        return cls(QuantityKind.EMPTY, text)


def resolve_quantity(token: str | QuantityToken | None) -> float:
    """Resolve a quantity token to a positive number.

    Args:
        token: e.g. "한", "반", "2", "1.5", "" or a classified QuantityToken

    Returns:
        The numeric quantity. Defaults to 1.0 when unparseable.
    """
    if not isinstance(token, QuantityToken):
        token = QuantityToken.classify(token)

    if token.kind is QuantityKind.KOREAN_NUMERAL:
        return float(KOREAN_NUMERALS[token.text])

    if token.kind is QuantityKind.DECIMAL:
        value = float(token.text)
        if math.isfinite(value) and value > 0:
            return value

    return 1.0


def to_grams(food_name: str, quantity: float, unit: str) -> float:
    """Convert a quantity of ``unit`` of a food to grams.

    Args:
        food_name: Food name, used for per-food unit overrides
        quantity: Numeric amount (e.g. 2.0)
        unit: Unit token (e.g. "공기", "개", "g", "조금")

    Returns:
        Estimated weight in grams. Never fails: unknown units fall back to
        100g per unit.
    """
    if unit in GRAM_MARKERS:
        return quantity

    rule = UNIT_RULES.get(unit)
    if rule is not None:
        return quantity * rule.grams_for(food_name)

    if unit in SIZE_WORD_GRAMS:
        return SIZE_WORD_GRAMS[unit]

    return quantity * GENERIC_GRAMS_PER_UNIT
