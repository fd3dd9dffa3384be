"""Central configuration loaded from environment variables and .env files."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # TOTP verification: steps of tolerance on each side of the current step.
    # 0 accepts only the current step.
    mfa_valid_window: int = Field(default=0, ge=0)

    # Issuer label used by the CLI when none is given
    mfa_default_issuer: str = "LoneWolf"

    # QR rendering
    qr_box_size: int = Field(default=10, gt=0)
    qr_border: int = Field(default=4, ge=0)

    # Encryption of stored secrets
    lonewolf_master_key: str = ""


settings = Settings()
