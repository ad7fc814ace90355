from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE = "https://bsky.social/xrpc"


class Settings(BaseSettings):
    """Runtime configuration, read from `BSKY_*` environment variables or `.env`."""

    model_config = SettingsConfigDict(
        env_prefix="BSKY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    handle: Optional[str] = Field(
        default=None,
        description="Your Bluesky handle (BSKY_HANDLE).",
    )
    app_key: Optional[str] = Field(
        default=None,
        description="App password from Settings > App Passwords (BSKY_APP_KEY).",
    )
    api_base: str = Field(
        default=DEFAULT_API_BASE,
        min_length=8,
        description="XRPC base URL.",
    )
    http_timeout_seconds: float = Field(default=30.0, gt=0)
    # getFollows rejects limits above 100
    page_size: int = Field(default=100, ge=1, le=100)
    member_delay_seconds: float = Field(
        default=0.05,
        ge=0,
        description="Pause after each list membership request.",
    )
