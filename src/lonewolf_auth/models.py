"""Pydantic models for TOTP configuration and enrollment payloads."""

from __future__ import annotations

import base64
import hashlib
from enum import StrEnum
from typing import Any

import pyotp
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Shortest secret accepted by the RFC 6238 builder (128 bits)
MIN_SECRET_BYTES = 16


class Algorithm(StrEnum):
    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"


_DIGESTS: dict[Algorithm, Any] = {
    Algorithm.SHA1: hashlib.sha1,
    Algorithm.SHA256: hashlib.sha256,
    Algorithm.SHA512: hashlib.sha512,
}


class TotpConfig(BaseModel):
    """RFC 6238 parameter set for one generate or verify call.

    Built fresh on every call and never persisted.
    """

    model_config = ConfigDict(frozen=True)

    secret: bytes
    digits: int = 6
    step: int = Field(default=30, gt=0)
    t0: int = Field(default=0, ge=0)
    algorithm: Algorithm = Algorithm.SHA1
    issuer: str | None = None
    account_name: str = ""

    @field_validator("secret")
    @classmethod
    def _secret_long_enough(cls, v: bytes) -> bytes:
        if len(v) < MIN_SECRET_BYTES:
            raise ValueError(
                f"secret must be at least {MIN_SECRET_BYTES * 8} bits, got {len(v) * 8}"
            )
        return v

    @field_validator("digits")
    @classmethod
    def _digits_in_range(cls, v: int) -> int:
        if not 6 <= v <= 8:
            raise ValueError(f"digits must be between 6 and 8, got {v}")
        return v

    @field_validator("issuer", "account_name")
    @classmethod
    def _no_label_separator(cls, v: str | None) -> str | None:
        if v and ":" in v:
            raise ValueError(f"label must not contain ':' ({v!r})")
        return v

    @property
    def base32_secret(self) -> str:
        """Secret bytes as unpadded RFC 4648 base32, the form otpauth:// URIs carry."""
        return base64.b32encode(self.secret).decode("ascii").rstrip("=")

    def to_totp(self) -> pyotp.TOTP:
        return pyotp.TOTP(
            self.base32_secret,
            digits=self.digits,
            digest=_DIGESTS[self.algorithm],
            name=self.account_name,
            issuer=self.issuer or None,
            interval=self.step,
        )


class Enrollment(BaseModel):
    """Everything a user needs to register an authenticator app."""

    qr_code: str  # base64 PNG
    secret: str
    uri: str
