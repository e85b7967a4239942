"""
PalmPay gateway settings using pydantic-settings v2.

Every key is read from the environment (or `.env`) under the ``PALMPAY_``
prefix, e.g. ``PALMPAY_APP_ID`` or ``PALMPAY_PRIVATE_KEY_PATH``.
"""
from __future__ import annotations

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


DEFAULT_PRIVATE_KEY_PATH = "keys/private_key.pem"
DEFAULT_PUBLIC_KEY_PATH = "keys/public_key.pem"


class PalmPaySettings(BaseSettings):
    app_id: Optional[str] = None
    country_code: Optional[str] = None
    base_url: str = "https://open-gw-prod.palmpay-inc.com"
    private_key_path: Optional[str] = Field(default=None)
    public_key_path: Optional[str] = Field(default=None)

    model_config = SettingsConfigDict(
        env_prefix="PALMPAY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


palmpay_settings = PalmPaySettings()
