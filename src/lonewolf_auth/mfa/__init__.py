"""TOTP enrollment and verification."""
