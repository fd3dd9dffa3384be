"""LoneWolf Auth: TOTP multi-factor authentication helpers."""

__version__ = "0.1.0"
