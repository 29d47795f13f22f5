# app/services/qr_service.py
"""
Exit pass QR codes.
A student gets one on entry; the guard desk scans it and the decoded text
is the student id expected by request-exit.
"""

import base64
import io
from typing import Optional
import qrcode
from qrcode.constants import ERROR_CORRECT_H
from app.utils.logger import get_logger

logger = get_logger(__name__)


def generate_qr_data_url(data: str) -> Optional[str]:
    """
    Encode `data` as a PNG QR code and return it as a data URL.
    Returns None if generation fails; the caller's entry is already saved.
    """
    try:
        qr = qrcode.QRCode(error_correction=ERROR_CORRECT_H, box_size=10, border=1)
        qr.add_data(data)
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white")

        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
        encoded = base64.b64encode(buffer.getvalue()).decode("utf-8")
        return f"data:image/png;base64,{encoded}"
    except Exception as e:
        logger.error(f"[QR] Error generating QR code for {data!r}: {e}")
        return None


def exit_pass_qr(record) -> Optional[str]:
    return generate_qr_data_url(record.identity)
