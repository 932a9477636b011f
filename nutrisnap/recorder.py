"""Meal recording flow: parse, summarize and save to Google services."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from .config import NutriSnapConfig
from .google_services import (
    CalendarEventCreator,
    SaveResult,
    SheetsAppender,
    TokenStore,
    build_credentials,
)
from .nutrition.calculator import FoodItem, round_half_up
from .parser import MealParser, ParsedMeal
from .record import FormattedRecord, format_meal_record, format_quantity

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = (
    "Google Refresh Token이 설정되지 않았습니다. OAuth 설정을 먼저 완료해주세요."
)


@dataclass(frozen=True)
class SyncResult:
    """Independent outcomes of the Sheets and Calendar writes."""

    sheets: SaveResult
    calendar: SaveResult

    @property
    def all_ok(self) -> bool:
        return self.sheets.success and self.calendar.success

    def as_dict(self) -> dict:
        return {"sheets": self.sheets.as_dict(), "calendar": self.calendar.as_dict()}


class MealRecorder:
    """Parses meal descriptions and saves them to Sheets and Calendar.

    The collaborator factories receive google-auth credentials and return a
    SheetsAppender / CalendarEventCreator; tests replace them with fakes.
    """

    def __init__(
        self,
        config: NutriSnapConfig | None = None,
        token_store: TokenStore | None = None,
        parser: MealParser | None = None,
        sheets_factory: Callable[..., SheetsAppender] | None = None,
        calendar_factory: Callable[..., CalendarEventCreator] | None = None,
    ) -> None:
        self._config = config or NutriSnapConfig()
        gc = self._config.google
        self._tokens = token_store or TokenStore(gc.token_path)
        self._parser = parser or MealParser(time_zone=gc.time_zone)
        self._sheets_factory = sheets_factory or (
            lambda creds: SheetsAppender(creds, gc.spreadsheet_name, gc.sheet_name)
        )
        self._calendar_factory = calendar_factory or (
            lambda creds: CalendarEventCreator(
                creds, gc.calendar_id, gc.time_zone, gc.event_minutes
            )
        )

    @property
    def token_store(self) -> TokenStore:
        return self._tokens

    def parse(self, text: str) -> ParsedMeal:
        meal = self._parser.parse(text)
        logger.info(
            "Parse complete: %d item(s), %d kcal", len(meal.items), meal.total_kcal
        )
        return meal

    def adjust_quantity(
        self, food_name: str, quantity: float, unit: str
    ) -> FoodItem | None:
        """Recompute one item at a new quantity. None for unknown foods."""
        logger.info("Adjusting %s to %s%s", food_name, quantity, unit)
        if quantity <= 0:
            return None
        return self._parser.calculator.create_food_item(food_name, quantity, unit)

    def format(self, meal: ParsedMeal) -> FormattedRecord:
        return format_meal_record(meal, source=self._config.record.source_tag)

    @staticmethod
    def summary(meal: ParsedMeal) -> str:
        """Korean nutrition summary for showing back to the user."""
        carb = round_half_up(sum(i.carb_g or 0 for i in meal.items), 1)
        protein = round_half_up(sum(i.protein_g or 0 for i in meal.items), 1)
        fat = round_half_up(sum(i.fat_g or 0 for i in meal.items), 1)
        lines = [
            "📊 영양 정보 요약",
            f"🔥 총 칼로리: {meal.total_kcal}kcal",
            f"🍞 탄수화물: {format_quantity(carb)}g",
            f"🥩 단백질: {format_quantity(protein)}g",
            f"🧈 지방: {format_quantity(fat)}g",
            "",
            "📝 음식 목록:",
        ]
        lines.extend(
            f"• {i.name} {format_quantity(i.quantity)}{i.unit} ({i.kcal}kcal)"
            for i in meal.items
        )
        lines.extend(["", "이 정보를 Google 캘린더와 시트에 기록할까요?"])
        return "\n".join(lines)

    def _credentials(self, refresh_token: str):
        gc = self._config.google
        return build_credentials(refresh_token, gc.client_id, gc.client_secret)

    def _save_sheets(self, refresh_token: str, record: FormattedRecord) -> SaveResult:
        appender = self._sheets_factory(self._credentials(refresh_token))
        return appender.append(record.rows)

    def _save_calendar(
        self,
        refresh_token: str,
        record: FormattedRecord,
        start: datetime | None,
        end: datetime | None,
    ) -> SaveResult:
        creator = self._calendar_factory(self._credentials(refresh_token))
        return creator.create(record.event, start=start, end=end)

    async def save(
        self,
        meal: ParsedMeal,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> SyncResult:
        """Write ``meal`` to Sheets and Calendar concurrently.

        Each write succeeds or fails on its own; nothing is raised.
        """
        refresh_token = self._tokens.get_refresh_token()
        if not refresh_token:
            logger.warning("Google refresh token is not configured")
            failed = SaveResult(False, NOT_CONFIGURED_MESSAGE)
            return SyncResult(sheets=failed, calendar=failed)

        record = self.format(meal)
        logger.info("Saving %d row(s) and one event", len(record.rows))

        sheets_result, calendar_result = await asyncio.gather(
            asyncio.to_thread(self._save_sheets, refresh_token, record),
            asyncio.to_thread(self._save_calendar, refresh_token, record, start, end),
            return_exceptions=True,
        )

        if isinstance(sheets_result, BaseException):
            logger.error("Sheets save raised: %r", sheets_result)
            sheets_result = SaveResult(False, f"시트 저장 실패: {sheets_result}")
        if isinstance(calendar_result, BaseException):
            logger.error("Calendar save raised: %r", calendar_result)
            calendar_result = SaveResult(False, f"캘린더 저장 실패: {calendar_result}")

        return SyncResult(sheets=sheets_result, calendar=calendar_result)

    async def record(self, text: str) -> tuple[ParsedMeal, SyncResult]:
        """Parse ``text`` and save the result."""
        meal = self.parse(text)
        return meal, await self.save(meal)

    def test_connection(self) -> dict:
        """Report which Google services are usable with the current token."""
        has_token = self._tokens.get_refresh_token() is not None
        services = {"sheets": has_token, "calendar": has_token}
        ok = all(services.values())
        return {
            "success": ok,
            "message": (
                "All Google services connected"
                if ok
                else "Some services failed to connect"
            ),
            "services": services,
        }
