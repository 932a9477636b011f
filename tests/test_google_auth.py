"""Tests for refresh token storage and OAuth helpers."""

import json
import sys
from unittest.mock import MagicMock, patch

import pytest

from nutrisnap.google_services.auth import (
    SCOPES,
    TOKEN_URI,
    TokenStore,
    build_credentials,
    run_oauth_flow,
)


@pytest.fixture(autouse=True)
def no_env_token(monkeypatch):
    monkeypatch.delenv("GOOGLE_REFRESH_TOKEN", raising=False)


class TestTokenStore:
    def test_init_default_path(self):
        store = TokenStore()
        assert "google_token.json" in str(store.token_path)
        assert "~" not in str(store.token_path)

    def test_not_configured(self, tmp_path):
        store = TokenStore(tmp_path / "token.json")
        assert store.get_refresh_token() is None
        status = store.status()
        assert status.is_configured is False
        assert status.has_refresh_token is False

    def test_save_and_read(self, tmp_path):
        path = tmp_path / "nested" / "token.json"
        store = TokenStore(path)

        result = store.save_refresh_token("  1//abc  ")

        assert result.success is True
        assert json.loads(path.read_text()) == {"refresh_token": "1//abc"}
        assert store.get_refresh_token() == "1//abc"
        assert store.status().is_configured is True

    def test_save_decodes_url_encoded_token(self, tmp_path):
        store = TokenStore(tmp_path / "token.json")
        store.save_refresh_token("1%2F%2Fabc")
        assert store.get_refresh_token() == "1//abc"

    def test_save_rejects_blank(self, tmp_path):
        path = tmp_path / "token.json"
        store = TokenStore(path)
        result = store.save_refresh_token("   ")
        assert result.success is False
        assert result.message == "Google Refresh Token is required"
        assert not path.exists()

    def test_env_fallback(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GOOGLE_REFRESH_TOKEN", " env-token ")
        store = TokenStore(tmp_path / "token.json")
        assert store.get_refresh_token() == "env-token"

    def test_file_wins_over_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GOOGLE_REFRESH_TOKEN", "env-token")
        store = TokenStore(tmp_path / "token.json")
        store.save_refresh_token("file-token")
        assert store.get_refresh_token() == "file-token"

    def test_blank_file_token_falls_back(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GOOGLE_REFRESH_TOKEN", "env-token")
        path = tmp_path / "token.json"
        path.write_text(json.dumps({"refresh_token": "  "}))
        assert TokenStore(path).get_refresh_token() == "env-token"

    def test_corrupt_file_is_ignored(self, tmp_path):
        path = tmp_path / "token.json"
        path.write_text("{not json")
        assert TokenStore(path).get_refresh_token() is None

    @pytest.mark.parametrize("payload", ["[]", "\"abc\"", "1", "null"])
    def test_non_object_file_is_ignored(self, tmp_path, monkeypatch, payload):
        monkeypatch.setenv("GOOGLE_REFRESH_TOKEN", "env-token")
        path = tmp_path / "token.json"
        path.write_text(payload)
        assert TokenStore(path).get_refresh_token() == "env-token"


def test_build_credentials():
    mock_credentials_mod = MagicMock()
    with patch.dict(sys.modules, {
        "google.oauth2.credentials": mock_credentials_mod,
    }):
        creds = build_credentials("refresh", "client-id", "client-secret")

    assert creds is mock_credentials_mod.Credentials.return_value
    mock_credentials_mod.Credentials.assert_called_once_with(
        token=None,
        refresh_token="refresh",
        token_uri=TOKEN_URI,
        client_id="client-id",
        client_secret="client-secret",
        scopes=SCOPES,
    )


class TestRunOAuthFlow:
    def test_missing_client_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="OAuth 클라이언트 파일"):
            run_oauth_flow(tmp_path / "missing.json")

    def test_returns_refresh_token(self, tmp_path):
        secrets = tmp_path / "client.json"
        secrets.write_text("{}")

        mock_flow_mod = MagicMock()
        flow = mock_flow_mod.InstalledAppFlow.from_client_secrets_file.return_value
        flow.run_local_server.return_value.refresh_token = "new-refresh"

        with patch.dict(sys.modules, {
            "google_auth_oauthlib": MagicMock(flow=mock_flow_mod),
            "google_auth_oauthlib.flow": mock_flow_mod,
        }):
            token = run_oauth_flow(secrets)

        assert token == "new-refresh"
        mock_flow_mod.InstalledAppFlow.from_client_secrets_file.assert_called_once_with(
            str(secrets), SCOPES
        )
