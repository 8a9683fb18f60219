from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest

from zoomlaunch.auth_google import import_client_secrets, run_auth_flow
from zoomlaunch.google_calendar import SCOPES


def test_import_client_secrets_creates_config_dir(tmp_path) -> None:  # type: ignore[no-untyped-def]
    source = tmp_path / "download.json"
    source.write_text(json.dumps({"web": {"client_id": "abc"}}))
    dest = tmp_path / "config" / "google" / "client_secrets.json"

    import_client_secrets(source, dest)
    assert json.loads(dest.read_text()) == {"web": {"client_id": "abc"}}


def test_import_client_secrets_rejects_invalid_json(tmp_path) -> None:  # type: ignore[no-untyped-def]
    source = tmp_path / "download.json"
    source.write_text("not json")
    with pytest.raises(ValueError, match="not valid JSON"):
        import_client_secrets(source, tmp_path / "out.json")


def test_import_client_secrets_rejects_unknown_shape(tmp_path) -> None:  # type: ignore[no-untyped-def]
    source = tmp_path / "download.json"
    source.write_text(json.dumps(["installed"]))
    with pytest.raises(ValueError, match="not a Google OAuth client secret"):
        import_client_secrets(source, tmp_path / "out.json")


def test_run_auth_flow_writes_token(tmp_path) -> None:  # type: ignore[no-untyped-def]
    flow = MagicMock()
    flow.run_local_server.return_value.to_json.return_value = '{"token": "t"}'
    token = tmp_path / "nested" / "token.json"

    with patch(
        "zoomlaunch.auth_google.InstalledAppFlow.from_client_secrets_file", return_value=flow
    ) as factory:
        run_auth_flow(client_secret_json=tmp_path / "secrets.json", token_path=token, port=9000)

    factory.assert_called_once_with(str(tmp_path / "secrets.json"), SCOPES)
    assert flow.run_local_server.call_args.kwargs["port"] == 9000
    assert token.read_text() == '{"token": "t"}'
