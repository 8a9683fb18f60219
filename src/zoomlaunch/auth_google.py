from __future__ import annotations

import argparse
import json
import shutil
from pathlib import Path

from google_auth_oauthlib.flow import InstalledAppFlow

from .config import Settings
from .google_calendar import SCOPES

_CLIENT_TYPES = ("installed", "web")


def import_client_secrets(source: Path, dest: Path) -> None:
    """Copy a downloaded OAuth client secret into the config directory."""
    try:
        data = json.loads(source.read_text())
    except json.JSONDecodeError as e:
        raise ValueError(f"{source} is not valid JSON: {e}") from e
    if not isinstance(data, dict) or not any(k in data for k in _CLIENT_TYPES):
        raise ValueError(f"{source} is not a Google OAuth client secret file")
    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, dest)


def run_auth_flow(*, client_secret_json: Path, token_path: Path, port: int = 8080) -> None:
    token_path.parent.mkdir(parents=True, exist_ok=True)
    flow = InstalledAppFlow.from_client_secrets_file(str(client_secret_json), SCOPES)
    creds = flow.run_local_server(host="localhost", port=port, open_browser=True)
    token_path.write_text(creds.to_json())


def main() -> None:
    settings = Settings()
    p = argparse.ArgumentParser(
        description="One-time Google OAuth for read-only Calendar access (writes token json)."
    )
    p.add_argument(
        "--client-secret",
        default=str(settings.client_secrets_path),
        help="Path to OAuth client secret JSON.",
    )
    p.add_argument(
        "--token",
        default=str(settings.token_path),
        help="Path to write google token JSON.",
    )
    p.add_argument(
        "--port", type=int, default=settings.oauth_port, help="Local server port for OAuth callback."
    )
    args = p.parse_args()

    run_auth_flow(
        client_secret_json=Path(args.client_secret),
        token_path=Path(args.token),
        port=args.port,
    )


if __name__ == "__main__":
    main()
