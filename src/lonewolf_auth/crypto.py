"""AES-256-GCM sealing for TOTP secrets the caller stores at rest.

The account label is bound as associated data, so a sealed secret copied onto
another account's row fails to open.
"""

from __future__ import annotations

import base64
import binascii
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from lonewolf_auth.config import settings
from lonewolf_auth.exceptions import SealError

_NONCE_SIZE = 12  # 96-bit nonce for AES-GCM


def _master_key() -> bytes:
    raw = settings.lonewolf_master_key
    if not raw:
        raise RuntimeError("LONEWOLF_MASTER_KEY not set")
    try:
        key = base64.b64decode(raw, validate=True)
    except binascii.Error as exc:
        raise ValueError("LONEWOLF_MASTER_KEY is not valid base64") from exc
    if len(key) != 32:
        raise ValueError("LONEWOLF_MASTER_KEY must be 32 bytes (base64-encoded)")
    return key


def seal_secret(secret: str, account_name: str = "") -> str:
    """Encrypt a secret for storage. Returns base64(nonce + ciphertext)."""
    aesgcm = AESGCM(_master_key())
    nonce = os.urandom(_NONCE_SIZE)
    sealed = aesgcm.encrypt(nonce, secret.encode("utf-8"), account_name.encode("utf-8"))
    return base64.b64encode(nonce + sealed).decode("ascii")


def open_secret(token: str, account_name: str = "") -> str:
    """Decrypt a token from seal_secret() for the same account.

    Raises SealError if the token is malformed, was sealed under
    another key or belongs to another account.
    """
    aesgcm = AESGCM(_master_key())
    try:
        raw = base64.b64decode(token, validate=True)
    except binascii.Error as exc:
        raise SealError("Sealed secret is not valid base64") from exc
    if len(raw) <= _NONCE_SIZE:
        raise SealError("Sealed secret is truncated")

    nonce, sealed = raw[:_NONCE_SIZE], raw[_NONCE_SIZE:]
    try:
        plaintext = aesgcm.decrypt(nonce, sealed, account_name.encode("utf-8"))
    except InvalidTag as exc:
        raise SealError("Sealed secret failed authentication") from exc
    return plaintext.decode("utf-8")
