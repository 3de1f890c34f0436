"""
Unit tests for the QR identifier encoder.
"""

import base64
import io
from unittest.mock import patch

import pytest
from PIL import Image
from qrcode.exceptions import DataOverflowError

from core.exceptions import EncodingError
from modules.qr_encoder import MIN_SIZE_PX, encode_qr_data_url, encode_qr_png


PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class TestEncodeQrPng:
    """Test PNG generation."""

    def test_returns_png(self):
        png = encode_qr_png("LOMPL191026143005")
        assert png.startswith(PNG_SIGNATURE)

    def test_minimum_size(self):
        image = Image.open(io.BytesIO(encode_qr_png("LOMPL191026143005")))
        width, height = image.size
        assert width == height
        assert width >= MIN_SIZE_PX

    def test_custom_minimum_size(self):
        image = Image.open(io.BytesIO(encode_qr_png("LOMPL191026143005", min_size_px=300)))
        assert image.size[0] >= 300

    def test_empty_data(self):
        with pytest.raises(EncodingError):
            encode_qr_png("")

    def test_overflow_becomes_encoding_error(self):
        with patch("modules.qr_encoder.qrcode.QRCode.make", side_effect=DataOverflowError("too long")):
            with pytest.raises(EncodingError) as exc_info:
                encode_qr_png("LOMPL191026143005")
        assert exc_info.value.code == "LOMPL191026143005"
        assert "too long" in exc_info.value.message


class TestEncodeQrDataUrl:
    """Test data URL wrapping."""

    def test_data_url(self):
        url = encode_qr_data_url("LOMPL191026143005")
        prefix = "data:image/png;base64,"
        assert url.startswith(prefix)
        assert base64.b64decode(url[len(prefix):]).startswith(PNG_SIGNATURE)

    def test_deterministic(self):
        assert encode_qr_data_url("LOMPL191026143005") == encode_qr_data_url("LOMPL191026143005")
