"""Errors raised by the MFA helpers.

Every failure surfaces as an ``MfaError`` carrying a human-readable message.
Nothing is retried or recovered locally; callers decide what to do.
"""

from __future__ import annotations


class MfaError(RuntimeError):
    """Base class for all MFA failures."""


class ConfigurationError(MfaError):
    """Invalid RFC 6238 parameters: digit count, labels or secret."""


class RenderError(MfaError):
    """The enrollment QR code could not be encoded or rendered."""


class ClockError(MfaError):
    """System time is unavailable or before the epoch."""


class SealError(MfaError):
    """A sealed secret is malformed or fails authentication."""
