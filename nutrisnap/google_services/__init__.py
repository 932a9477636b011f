"""Google Sheets / Calendar persistence via OAuth 2.0."""

from .auth import SCOPES, TokenStore, build_credentials, run_oauth_flow
from .calendar import CalendarEventCreator
from .models import OAuthStatus, SaveResult
from .sheets import SheetsAppender

__all__ = [
    "SCOPES",
    "TokenStore",
    "build_credentials",
    "run_oauth_flow",
    "SheetsAppender",
    "CalendarEventCreator",
    "SaveResult",
    "OAuthStatus",
]
