"""Tests for sheet row and calendar event formatting."""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from nutrisnap.nutrition.calculator import FoodItem
from nutrisnap.parser import MealParser, MealType, aggregate
from nutrisnap.record import (
    SHEET_HEADER,
    CalendarEvent,
    FormattedRecord,
    format_korean_datetime,
    format_meal_record,
    format_quantity,
)

NOW = datetime(2025, 3, 7, 13, 5, 9, tzinfo=ZoneInfo("Asia/Seoul"))


@pytest.fixture
def breakfast():
    return MealParser().parse("아침에 토스트 2장이랑 계란후라이 1개 먹었어", now=NOW)


def test_one_row_per_item(breakfast):
    record = format_meal_record(breakfast)
    assert isinstance(record, FormattedRecord)
    assert len(record.rows) == 2
    assert all(len(values) == len(SHEET_HEADER) == 13 for values in record.values)


def test_row_columns(breakfast):
    row = format_meal_record(breakfast).values[0]
    assert row == [
        "2025-03-07T13:05:09+09:00",
        "아침",
        "토스트",
        2.0,
        "장",
        60,
        174,
        28.8,
        4.8,
        3.6,
        0,  # sodium unknown for toast
        "아침에 토스트 2장이랑 계란후라이 1개 먹었어",
        "NutriSnap v1.0",
    ]


def test_custom_source_tag(breakfast):
    record = format_meal_record(breakfast, source="test-suite")
    assert record.rows[0].source == "test-suite"


def test_unclassified_meal_label():
    meal = MealParser().parse("라면", now=NOW)
    record = format_meal_record(meal)
    assert record.rows[0].meal == "간식"
    assert record.event.title.startswith("🍽️ [간식] 라면")


def test_event_title(breakfast):
    event = format_meal_record(breakfast).event
    assert isinstance(event, CalendarEvent)
    assert event.title == "🍽️ [아침] 토스트, 계란후라이 (≈ 292 kcal)"


def test_event_description(breakfast):
    description = format_meal_record(breakfast).event.description
    assert description.splitlines() == [
        "영양 정보:",
        "• 토스트 2장 (60g, 174kcal)",
        "• 계란후라이 1개 (60g, 118kcal)",
        "",
        "총 칼로리: 292kcal",
        "총 중량: 120g",
        "",
        "기록 시각: 2025. 3. 7. 오후 1:05:09",
    ]


def test_top_two_stable_on_ties():
    items = [
        FoodItem("김치", 1.0, "", 100, 50),
        FoodItem("밥", 1.0, "", 100, 200),
        FoodItem("계란", 1.0, "", 100, 50),
        FoodItem("미역국", 1.0, "", 100, 50),
    ]
    meal = aggregate(items, "", meal_type=MealType.LUNCH, recorded_at=NOW)
    title = format_meal_record(meal).event.title
    assert "밥, 김치 (" in title


def test_formatting_does_not_mutate(breakfast):
    before = breakfast.items
    first = format_meal_record(breakfast)
    second = format_meal_record(breakfast)
    assert breakfast.items == before
    assert [i.name for i in breakfast.items] == ["토스트", "계란후라이"]
    assert first == second


def test_empty_meal():
    meal = aggregate([], "", recorded_at=NOW)
    record = format_meal_record(meal)
    assert record.rows == ()
    assert record.event.title == "🍽️ [간식]  (≈ 0 kcal)"


def test_format_quantity():
    assert format_quantity(2.0) == "2"
    assert format_quantity(0.5) == "0.5"
    assert format_quantity(1234567.0) == "1234567"
    assert format_quantity(1.25) == "1.25"


@pytest.mark.parametrize(
    "hour, expected",
    [
        (0, "2025. 3. 7. 오전 12:00:00"),
        (9, "2025. 3. 7. 오전 9:00:00"),
        (12, "2025. 3. 7. 오후 12:00:00"),
        (23, "2025. 3. 7. 오후 11:00:00"),
    ],
)
def test_format_korean_datetime(hour, expected):
    assert format_korean_datetime(datetime(2025, 3, 7, hour)) == expected
