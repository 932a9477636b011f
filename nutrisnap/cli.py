"""CLI entry point for NutriSnap."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict

from dotenv import load_dotenv

from .config import load_config
from .google_services import TokenStore, run_oauth_flow
from .parser import ParsedMeal
from .recorder import MealRecorder, SyncResult


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stream handler to the ``nutrisnap`` logger."""
    logger = logging.getLogger("nutrisnap")
    logger.setLevel(level)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="nutrisnap",
        description="NutriSnap — 식사 내용을 입력하면 칼로리와 영양소를 계산해 기록합니다",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="설정 파일 경로 (TOML)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="디버그 로그 출력"
    )

    sub = parser.add_subparsers(dest="command")

    # parse
    parse_parser = sub.add_parser("parse", help="식사 문장을 분석")
    parse_parser.add_argument("text", help='예: "점심에 김치찌개 1그릇이랑 밥 한 공기"')
    parse_parser.add_argument("--json", action="store_true", help="JSON 형식으로 출력")

    # summary
    summary_parser = sub.add_parser("summary", help="영양 정보 요약 출력")
    summary_parser.add_argument("text")

    # record
    record_parser = sub.add_parser("record", help="분석 후 Google Sheets/Calendar 에 기록")
    record_parser.add_argument("text")
    record_parser.add_argument("--json", action="store_true", help="JSON 형식으로 출력")

    # oauth
    oauth_parser = sub.add_parser("oauth", help="Google OAuth 설정")
    oauth_sub = oauth_parser.add_subparsers(dest="oauth_command")
    setup_parser = oauth_sub.add_parser("setup", help="Refresh Token 저장")
    setup_parser.add_argument("token")
    oauth_sub.add_parser("status", help="설정 상태 확인")
    oauth_sub.add_parser("login", help="브라우저로 로그인하여 Refresh Token 발급")
    oauth_sub.add_parser("test", help="Google 서비스 연결 확인")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    load_dotenv()
    config = load_config(args.config)
    configure_logging("DEBUG" if args.verbose else config.logging.level)
    recorder = MealRecorder(config)

    match args.command:
        case "parse":
            _cmd_parse(recorder, args)
        case "summary":
            print(recorder.summary(recorder.parse(args.text)))
        case "record":
            asyncio.run(_cmd_record(recorder, args))
        case "oauth":
            if args.oauth_command is None:
                oauth_parser.print_help()
                sys.exit(1)
            _cmd_oauth(config, recorder, args)


def meal_to_dict(meal: ParsedMeal) -> dict:
    """JSON-friendly view of a ParsedMeal. Unknown macros are omitted."""
    return {
        "items": [
            {k: v for k, v in asdict(item).items() if v is not None}
            for item in meal.items
        ],
        "total_kcal": meal.total_kcal,
        "total_grams": meal.total_grams,
        "meal_type": meal.meal_type.value if meal.meal_type else None,
        "note": meal.note,
        "recorded_at": meal.recorded_at.isoformat(timespec="seconds"),
    }


def _cmd_parse(recorder: MealRecorder, args) -> None:
    meal = recorder.parse(args.text)

    if args.json:
        print(json.dumps(meal_to_dict(meal), ensure_ascii=False, indent=2))
        return

    if not meal.items:
        print("인식된 음식이 없습니다.")
        return
    record = recorder.format(meal)
    print(record.event.title)
    print(record.event.description)


async def _cmd_record(recorder: MealRecorder, args) -> None:
    meal, result = await recorder.record(args.text)

    if args.json:
        data = {"parsed": meal_to_dict(meal), **result.as_dict()}
        print(json.dumps(data, ensure_ascii=False, indent=2))
    else:
        print(recorder.summary(meal))
        print()
        _print_sync_result(result)

    if not result.all_ok:
        sys.exit(2)


def _print_sync_result(result: SyncResult) -> None:
    for label, res in (("Sheets", result.sheets), ("Calendar", result.calendar)):
        mark = "✅" if res.success else "❌"
        print(f"{mark} {label}: {res.message}")
        if res.url:
            print(f"   {res.url}")


def _cmd_oauth(config, recorder: MealRecorder, args) -> None:
    store: TokenStore = recorder.token_store

    match args.oauth_command:
        case "setup":
            res = store.save_refresh_token(args.token)
            print(res.message, file=sys.stdout if res.success else sys.stderr)
            if not res.success:
                sys.exit(1)
        case "status":
            status = store.status()
            print(json.dumps(asdict(status), indent=2))
        case "login":
            print("🔑 브라우저에서 Google 계정 권한을 허용해주세요...")
            try:
                token = run_oauth_flow(config.google.credentials_path)
            except (ImportError, FileNotFoundError, RuntimeError) as e:
                print(f"OAuth 오류: {e}", file=sys.stderr)
                sys.exit(1)
            print(store.save_refresh_token(token).message)
        case "test":
            print(json.dumps(recorder.test_connection(), ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
