"""Result models shared by the Google collaborators."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SaveResult:
    """Outcome of one Google write. Failures carry a readable message."""

    success: bool
    message: str
    url: str | None = None

    def as_dict(self) -> dict:
        data: dict = {"success": self.success, "message": self.message}
        if self.url:
            data["url"] = self.url
        return data


@dataclass(frozen=True)
class OAuthStatus:
    is_configured: bool
    has_refresh_token: bool


def error_status(exc: BaseException) -> int | None:
    """HTTP status of a googleapiclient HttpError, if any."""
    status = getattr(exc, "status_code", None)
    if status is None:
        status = getattr(getattr(exc, "resp", None), "status", None)
    try:
        return int(status) if status is not None else None
    except (TypeError, ValueError):
        return None


def describe_error(exc: BaseException, service: str) -> str:
    """Korean user-facing message for a failed call to ``service``."""
    status = error_status(exc)
    if status == 401:
        return "Google 인증이 만료되었습니다. 다시 로그인해주세요."
    if status == 403:
        return f"{service} 권한이 없습니다. 권한을 확인해주세요."
    if isinstance(exc, ImportError):
        return str(exc)
    return f"{service} 저장 중 오류가 발생했습니다."
