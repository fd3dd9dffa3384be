"""QR code rendering for enrollment URIs."""

from __future__ import annotations

import base64
import io

import qrcode
from qrcode.constants import ERROR_CORRECT_M
from qrcode.exceptions import DataOverflowError

from lonewolf_auth.config import settings
from lonewolf_auth.exceptions import RenderError


def render_qr_base64(data: str, *, box_size: int | None = None, border: int | None = None) -> str:
    """Render ``data`` as a PNG QR code and return it as base64 text.

    The smallest QR version that fits the payload is chosen. Raises
    RenderError if the payload exceeds QR capacity or the image can't be encoded.
    """
    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECT_M,
        box_size=box_size if box_size is not None else settings.qr_box_size,
        border=border if border is not None else settings.qr_border,
    )
    qr.add_data(data)
    try:
        qr.make(fit=True)
    # qrcode 8.x rejects version 41 with ValueError before raising DataOverflowError
    except (DataOverflowError, ValueError) as exc:
        raise RenderError(f"QR payload too large ({len(data)} chars)") from exc

    img = qr.make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    try:
        img.save(buffer, format="PNG")
    except (OSError, ValueError) as exc:
        raise RenderError(f"Failed to encode QR image: {exc}") from exc
    return base64.b64encode(buffer.getvalue()).decode()
