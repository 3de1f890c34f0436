"""
QR identifier image for printed documents.

The packing list code is encoded with error correction level M into a PNG
of at least 128x128 pixels and embedded in the document as a data URL.
"""

from __future__ import annotations

import base64
import io
import math

import qrcode
from qrcode.exceptions import DataOverflowError

from core.exceptions import EncodingError
from logging_config import get_logger


logger = get_logger(__name__)

MIN_SIZE_PX = 128
BORDER_MODULES = 1


def encode_qr_png(data: str, min_size_px: int = MIN_SIZE_PX) -> bytes:
    """
    Encode text as a QR code PNG.

    Args:
        data: Text to encode
        min_size_px: Minimum width/height of the square image

    Returns:
        PNG bytes

    Raises:
        EncodingError: If the data is empty or cannot be encoded
    """
    if not data:
        raise EncodingError(data, "nothing to encode")

    try:
        qr = qrcode.QRCode(
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=1,
            border=BORDER_MODULES,
        )
        qr.add_data(data)
        qr.make(fit=True)

        # Scale modules up until the image reaches the minimum size
        modules = qr.modules_count + 2 * BORDER_MODULES
        qr.box_size = max(1, math.ceil(min_size_px / modules))

        img = qr.make_image(fill_color="black", back_color="white")
        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
    except (DataOverflowError, ValueError, TypeError, OSError) as e:
        logger.error(f"QR encoding failed for {data!r}: {e}")
        raise EncodingError(data, str(e)) from e

    return buffer.getvalue()


def encode_qr_data_url(data: str, min_size_px: int = MIN_SIZE_PX) -> str:
    """
    Encode text as a QR code and return it as a PNG data URL.

    Raises:
        EncodingError: If the QR code cannot be generated
    """
    png = encode_qr_png(data, min_size_px)
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")
