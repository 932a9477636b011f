"""Export formatting of a parsed meal for Google Sheets and Calendar."""

from __future__ import annotations

from dataclasses import astuple, dataclass
from datetime import datetime

from .nutrition.calculator import FoodItem
from .parser import ParsedMeal

DEFAULT_SOURCE = "NutriSnap v1.0"

SHEET_HEADER: tuple[str, ...] = (
    "DateTime", "Meal", "Item", "Qty", "Unit", "Grams",
    "Kcal", "Carb(g)", "Protein(g)", "Fat(g)", "Sodium(mg)",
    "Note", "Source",
)


@dataclass(frozen=True)
class SheetRow:
    """One spreadsheet row. Unknown macros are written as 0."""

    date_time: str
    meal: str
    item: str
    qty: float
    unit: str
    grams: int
    kcal: int
    carb: float
    protein: float
    fat: float
    sodium: int
    note: str
    source: str

    def as_list(self) -> list:
        return list(astuple(self))


@dataclass(frozen=True)
class CalendarEvent:
    title: str
    description: str


@dataclass(frozen=True)
class FormattedRecord:
    rows: tuple[SheetRow, ...]
    event: CalendarEvent

    @property
    def values(self) -> list[list]:
        """Rows as plain value lists, ready for the Sheets API."""
        return [row.as_list() for row in self.rows]


def format_quantity(quantity: float) -> str:
    """Render 2.0 as "2" and 0.5 as "0.5", keeping every digit."""
    if float(quantity).is_integer():
        return str(int(quantity))
    return repr(float(quantity))


def format_korean_datetime(dt: datetime) -> str:
    """Format like the ko-KR locale: "2025. 3. 7. 오후 1:05:09"."""
    period = "오전" if dt.hour < 12 else "오후"
    hour = dt.hour % 12 or 12
    return (
        f"{dt.year}. {dt.month}. {dt.day}. "
        f"{period} {hour}:{dt.minute:02d}:{dt.second:02d}"
    )


def _row(meal: ParsedMeal, item: FoodItem, source: str) -> SheetRow:
    return SheetRow(
        date_time=meal.recorded_at.isoformat(timespec="seconds"),
        meal=meal.meal_label,
        item=item.name,
        qty=item.quantity,
        unit=item.unit,
        grams=item.grams,
        kcal=item.kcal,
        carb=item.carb_g or 0,
        protein=item.protein_g or 0,
        fat=item.fat_g or 0,
        sodium=item.sodium_mg or 0,
        note=meal.note,
        source=source,
    )


def _event(meal: ParsedMeal) -> CalendarEvent:
    # sorted() is stable, so equal calories keep item order
    top = sorted(meal.items, key=lambda i: i.kcal, reverse=True)[:2]
    top_names = ", ".join(i.name for i in top)
    title = f"🍽️ [{meal.meal_label}] {top_names} (≈ {meal.total_kcal} kcal)"

    lines = ["영양 정보:"]
    lines.extend(
        f"• {i.name} {format_quantity(i.quantity)}{i.unit} "
        f"({i.grams}g, {i.kcal}kcal)"
        for i in meal.items
    )
    lines.extend([
        "",
        f"총 칼로리: {meal.total_kcal}kcal",
        f"총 중량: {meal.total_grams}g",
        "",
        f"기록 시각: {format_korean_datetime(meal.recorded_at)}",
    ])
    return CalendarEvent(title=title, description="\n".join(lines))


def format_meal_record(
    meal: ParsedMeal, source: str = DEFAULT_SOURCE
) -> FormattedRecord:
    """Project a ParsedMeal into sheet rows and a calendar event.

    The meal is not modified, and the output depends only on the meal, so
    repeated calls give equal records.
    """
    return FormattedRecord(
        rows=tuple(_row(meal, item, source) for item in meal.items),
        event=_event(meal),
    )
