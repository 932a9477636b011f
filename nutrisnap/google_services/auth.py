"""Google OAuth 2.0 refresh-token storage and credential building."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from urllib.parse import unquote

from .models import OAuthStatus, SaveResult

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive.file",
    "https://www.googleapis.com/auth/calendar.events",
]

TOKEN_URI = "https://oauth2.googleapis.com/token"

_INSTALL_HINT = (
    "Google 연동에 필요한 패키지가 설치되지 않았습니다:\n"
    "  pip install google-api-python-client google-auth google-auth-oauthlib"
)


class TokenStore:
    """Reads and writes the Google refresh token.

    The token file is checked first, then the ``GOOGLE_REFRESH_TOKEN``
    environment variable.
    """

    ENV_VAR = "GOOGLE_REFRESH_TOKEN"

    def __init__(
        self, token_path: str | Path = "~/.config/nutrisnap/google_token.json"
    ) -> None:
        self._token_path = Path(token_path).expanduser()

    @property
    def token_path(self) -> Path:
        return self._token_path

    def get_refresh_token(self) -> str | None:
        """Return the configured refresh token, or None if not configured."""
        if self._token_path.exists():
            try:
                data = json.loads(self._token_path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError):
                logger.warning("Unreadable token file: %s", self._token_path)
            else:
                if isinstance(data, dict):
                    token = str(data.get("refresh_token") or "").strip()
                    if token:
                        return token
                else:
                    logger.warning("Token file is not a JSON object: %s", self._token_path)

        token = os.environ.get(self.ENV_VAR, "").strip()
        return token or None

    def save_refresh_token(self, token: str) -> SaveResult:
        """Store a refresh token. URL-encoded tokens are decoded first."""
        token = unquote((token or "").strip())
        if not token:
            return SaveResult(False, "Google Refresh Token is required")

        self._token_path.parent.mkdir(parents=True, exist_ok=True)
        self._token_path.write_text(
            json.dumps({"refresh_token": token}), encoding="utf-8"
        )
        logger.info("Refresh token saved to %s", self._token_path)
        return SaveResult(True, "Google OAuth configured successfully")

    def status(self) -> OAuthStatus:
        has_token = self.get_refresh_token() is not None
        return OAuthStatus(is_configured=has_token, has_refresh_token=has_token)


def build_credentials(
    refresh_token: str,
    client_id: str,
    client_secret: str,
    scopes: list[str] | None = None,
):
    """Build google-auth Credentials that refresh from ``refresh_token``."""
    try:
        from google.oauth2.credentials import Credentials
    except ImportError:
        raise ImportError(_INSTALL_HINT)

    return Credentials(
        token=None,
        refresh_token=refresh_token,
        token_uri=TOKEN_URI,
        client_id=client_id,
        client_secret=client_secret,
        scopes=scopes or SCOPES,
    )


def run_oauth_flow(
    credentials_path: str | Path, scopes: list[str] | None = None
) -> str:
    """Run the browser consent flow and return the issued refresh token.

    Raises:
        FileNotFoundError: If the OAuth client secrets file is missing.
        ImportError: If google-auth-oauthlib is not installed.
    """
    credentials_path = Path(credentials_path).expanduser()
    if not credentials_path.exists():
        raise FileNotFoundError(
            f"OAuth 클라이언트 파일을 찾을 수 없습니다: {credentials_path}\n"
            f"Google Cloud Console 에서 다운로드해주세요."
        )

    try:
        from google_auth_oauthlib.flow import InstalledAppFlow
    except ImportError:
        raise ImportError(_INSTALL_HINT)

    flow = InstalledAppFlow.from_client_secrets_file(
        str(credentials_path), scopes or SCOPES
    )
    creds = flow.run_local_server(port=0, access_type="offline", prompt="consent")
    if not creds.refresh_token:
        raise RuntimeError("Google 에서 Refresh Token 을 받지 못했습니다.")
    return creds.refresh_token
