"""TOTP (Time-based One-Time Password) enrollment and verification.

Uses pyotp for the RFC 4226 / RFC 6238 code generation; the enrollment
image is rendered by lonewolf_auth.mfa.qr. Secrets are 64-char hex strings;
the bytes fed to the HMAC are the UTF-8 bytes of that string, not the 32
random bytes behind it.
"""

from __future__ import annotations

import hmac
import logging
import math
import os
import time
from collections.abc import Callable

from pydantic import ValidationError

from lonewolf_auth.config import settings
from lonewolf_auth.exceptions import ClockError, ConfigurationError
from lonewolf_auth.mfa.qr import render_qr_base64
from lonewolf_auth.models import Enrollment, TotpConfig

logger = logging.getLogger(__name__)

SECRET_NUM_BYTES = 32
DIGITS = 6

RandomSource = Callable[[int], bytes]
Clock = Callable[[], float]


def generate_random_string(random_bytes: RandomSource | None = None) -> str:
    """Generate a new secret: 32 random bytes as 64 lowercase hex chars."""
    raw = (random_bytes or os.urandom)(SECRET_NUM_BYTES)
    return "".join(f"{b:02x}" for b in raw)


def secret_bytes(secret: str) -> bytes:
    """Key material for a secret: the UTF-8 bytes of the hex string itself."""
    return secret.encode("utf-8")


def build_config(
    secret: str,
    issuer: str | None = None,
    account_name: str = "",
    digits: int = DIGITS,
) -> TotpConfig:
    """Build an RFC 6238 configuration (30s step, epoch 0, SHA1) for a secret."""
    try:
        return TotpConfig(
            secret=secret_bytes(secret),
            digits=digits,
            issuer=issuer,
            account_name=account_name,
        )
    except ValidationError as exc:
        messages = "; ".join(err["msg"] for err in exc.errors())
        raise ConfigurationError(f"Invalid TOTP configuration: {messages}") from exc


def provisioning_uri(secret: str, issuer: str, account_name: str) -> str:
    """Get the otpauth:// URI for QR code enrollment."""
    config = build_config(secret, issuer=issuer, account_name=account_name)
    return config.to_totp().provisioning_uri(name=account_name, issuer_name=issuer or None)


def enroll(
    issuer: str,
    account_name: str,
    *,
    random_bytes: RandomSource | None = None,
) -> Enrollment:
    """Create a fresh secret and its QR enrollment payload.

    Raises ConfigurationError for labels the RFC 6238 builder rejects and
    RenderError if the QR code can't be produced. Nothing is returned on error.
    """
    secret = generate_random_string(random_bytes)
    uri = provisioning_uri(secret, issuer, account_name)
    qr_code = render_qr_base64(uri)
    logger.debug("Created TOTP enrollment for %s / %s", issuer, account_name)
    return Enrollment(qr_code=qr_code, secret=secret, uri=uri)


def generate(
    issuer: str,
    account_name: str,
    *,
    random_bytes: RandomSource | None = None,
) -> tuple[str, str]:
    """Generate a 6-digit TOTP enrollment. Returns (base64 QR PNG, secret)."""
    enrollment = enroll(issuer, account_name, random_bytes=random_bytes)
    return enrollment.qr_code, enrollment.secret


def _counter(config: TotpConfig, clock: Clock | None) -> int:
    try:
        now = (clock or time.time)()
    except OSError as exc:
        raise ClockError(f"System clock unavailable: {exc}") from exc
    if not math.isfinite(now):
        raise ClockError(f"System clock returned a non-finite time ({now})")
    if now < 0:
        raise ClockError(f"System clock is before the Unix epoch ({now})")
    if now < config.t0:
        raise ClockError(f"System clock ({now}) is before the TOTP epoch ({config.t0})")
    return (int(now) - config.t0) // config.step


def current_code(secret: str, *, clock: Clock | None = None) -> str:
    """Get the TOTP code for a secret at the current time step."""
    config = build_config(secret)
    return config.to_totp().generate_otp(_counter(config, clock))


def verify(
    code: str,
    secret: str,
    *,
    valid_window: int | None = None,
    clock: Clock | None = None,
) -> bool:
    """Verify a 6-digit TOTP code against a secret.

    Only the current step is accepted unless ``valid_window`` (default
    ``settings.mfa_valid_window``) widens it by that many steps on each side.
    Comparison is exact: no whitespace stripping or other normalization.
    Configuration and clock failures raise instead of returning False.
    """
    window = settings.mfa_valid_window if valid_window is None else valid_window
    if window < 0:
        raise ConfigurationError(f"valid_window must be >= 0, got {window}")

    config = build_config(secret)
    totp = config.to_totp()
    counter = _counter(config, clock)

    submitted = code.encode("utf-8")
    verified = False
    for offset in range(-window, window + 1):
        if counter + offset < 0:
            continue
        expected = totp.generate_otp(counter + offset)
        if hmac.compare_digest(submitted, expected.encode("utf-8")):
            verified = True
            break

    logger.debug("TOTP verification %s (window=%d)", "succeeded" if verified else "failed", window)
    return verified


async def async_enroll(
    issuer: str,
    account_name: str,
    *,
    random_bytes: RandomSource | None = None,
) -> Enrollment:
    """Async version of enroll() for asyncio callers."""
    return enroll(issuer, account_name, random_bytes=random_bytes)


async def async_generate(
    issuer: str,
    account_name: str,
    *,
    random_bytes: RandomSource | None = None,
) -> tuple[str, str]:
    """Async version of generate()."""
    return generate(issuer, account_name, random_bytes=random_bytes)


async def async_verify(
    code: str,
    secret: str,
    *,
    valid_window: int | None = None,
    clock: Clock | None = None,
) -> bool:
    """Async version of verify()."""
    return verify(code, secret, valid_window=valid_window, clock=clock)
