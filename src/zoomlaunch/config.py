from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

CLIENT_SECRETS_FILENAME = "client_secrets.json"
TOKEN_FILENAME = "token.json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Shared with the Ruby zoom_launcher gem, so existing credentials keep working.
    config_dir: Path = Field(
        default=Path("~/.config/google"), validation_alias="ZOOMLAUNCH_CONFIG_DIR"
    )
    log_level: str = Field(default="WARNING", validation_alias="LOG_LEVEL")

    calendar_id: str = Field(default="primary", validation_alias="ZOOMLAUNCH_CALENDAR_ID")
    count: int = Field(default=1, ge=1, validation_alias="ZOOMLAUNCH_COUNT")
    oauth_port: int = Field(default=8080, validation_alias="ZOOMLAUNCH_OAUTH_PORT")

    @property
    def resolved_config_dir(self) -> Path:
        return self.config_dir.expanduser()

    @property
    def client_secrets_path(self) -> Path:
        return self.resolved_config_dir / CLIENT_SECRETS_FILENAME

    @property
    def token_path(self) -> Path:
        return self.resolved_config_dir / TOKEN_FILENAME
