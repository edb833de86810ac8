"""Environment-driven settings for the Page4U MCP server"""
import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_API_URL = "https://page4u.ai"
DEFAULT_TIMEOUT_SECONDS = 30.0

API_KEY_ENV = "PAGE4U_API_KEY"
API_URL_ENV = "PAGE4U_API_URL"
TIMEOUT_ENV = "PAGE4U_TIMEOUT"
LOG_LEVEL_ENV = "PAGE4U_LOG_LEVEL"


class Credential(BaseModel):
    """Bearer token plus the API base URL it is valid for."""

    model_config = ConfigDict(frozen=True)

    token: str = ""
    base_url: str = DEFAULT_API_URL

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slashes(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def is_configured(self) -> bool:
        return bool(self.token)


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    api_key: str = ""
    api_url: str = DEFAULT_API_URL
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"

    @property
    def credential(self) -> Credential:
        return Credential(token=self.api_key, base_url=self.api_url)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read settings from the environment (or the given mapping).

    Unset or blank variables fall back to the defaults. A missing API key is
    not an error here: it is reported on the first request instead.
    """
    env = os.environ if environ is None else environ
    values = {}
    if env.get(API_KEY_ENV):
        values["api_key"] = env[API_KEY_ENV].strip()
    if env.get(API_URL_ENV):
        values["api_url"] = env[API_URL_ENV].strip()
    if env.get(TIMEOUT_ENV):
        values["timeout_seconds"] = env[TIMEOUT_ENV]
    if env.get(LOG_LEVEL_ENV):
        values["log_level"] = env[LOG_LEVEL_ENV]
    return Settings(**values)
