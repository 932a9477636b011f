"""TOML configuration loader for NutriSnap."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

DEFAULT_TOKEN_PATH = "~/.config/nutrisnap/google_token.json"
DEFAULT_CREDENTIALS_PATH = "~/.config/nutrisnap/google_credentials.json"


@dataclass
class GoogleConfig:
    client_id: str = ""
    client_secret: str = ""
    credentials_path: str = DEFAULT_CREDENTIALS_PATH
    token_path: str = DEFAULT_TOKEN_PATH
    spreadsheet_name: str = "NutriSnap 영양 기록"
    sheet_name: str = "Nutrition Log"
    calendar_id: str = "primary"
    time_zone: str = "Asia/Seoul"
    event_minutes: int = 30


@dataclass
class RecordConfig:
    source_tag: str = "NutriSnap v1.0"


@dataclass
class LoggingConfig:
    level: str = "INFO"


@dataclass
class NutriSnapConfig:
    google: GoogleConfig = field(default_factory=GoogleConfig)
    record: RecordConfig = field(default_factory=RecordConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | Path | None = None) -> NutriSnapConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    Google OAuth client settings can be overridden via environment variables.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    ggl = raw.get("google", {})
    rec = raw.get("record", {})
    log = raw.get("logging", {})

    # Resolve OAuth client: config file → environment variable
    client_id = ggl.get("client_id", "") or os.environ.get("GOOGLE_CLIENT_ID", "")
    client_secret = ggl.get("client_secret", "") or os.environ.get(
        "GOOGLE_CLIENT_SECRET", ""
    )

    return NutriSnapConfig(
        google=GoogleConfig(
            client_id=client_id,
            client_secret=client_secret,
            credentials_path=ggl.get("credentials_path", DEFAULT_CREDENTIALS_PATH),
            token_path=ggl.get("token_path", DEFAULT_TOKEN_PATH),
            spreadsheet_name=ggl.get("spreadsheet_name", "NutriSnap 영양 기록"),
            sheet_name=ggl.get("sheet_name", "Nutrition Log"),
            calendar_id=ggl.get("calendar_id", "primary"),
            time_zone=ggl.get("time_zone", "Asia/Seoul"),
            event_minutes=ggl.get("event_minutes", 30),
        ),
        record=RecordConfig(
            source_tag=rec.get("source_tag", "NutriSnap v1.0"),
        ),
        logging=LoggingConfig(
            level=str(log.get("level", "INFO")).upper(),
        ),
    )
