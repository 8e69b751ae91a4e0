"""Unit tests for image payload decoding."""

import base64

import pytest

from app.services.assets import ImageFormat, decode_asset, sniff_image_format, split_data_url
from app.utils.exceptions import InvalidAssetError
from conftest import data_url, make_image


class TestDecodeAsset:
    """Test cases for decode_asset."""

    def test_png_data_url(self, png_bytes):
        asset = decode_asset(data_url(png_bytes))

        assert asset.format is ImageFormat.PNG
        assert (asset.width, asset.height) == (200, 100)
        assert asset.data == png_bytes

    def test_jpeg_data_url(self, jpeg_bytes):
        asset = decode_asset(data_url(jpeg_bytes, "image/jpeg"))

        assert asset.format is ImageFormat.JPEG
        assert asset.width == 200

    def test_magic_number_wins_over_declared_mime(self, png_bytes):
        """Test PNG bytes labelled as JPEG are still treated as PNG."""
        asset = decode_asset(data_url(png_bytes, "image/jpeg"))
        assert asset.format is ImageFormat.PNG

    def test_plain_base64(self, jpeg_bytes):
        asset = decode_asset(base64.b64encode(jpeg_bytes).decode("ascii"))
        assert asset.format is ImageFormat.JPEG

    def test_raw_bytes(self, png_bytes):
        asset = decode_asset(png_bytes)
        assert asset.format is ImageFormat.PNG
        assert asset.height == 100

    def test_base64_as_bytes(self, png_bytes):
        asset = decode_asset(base64.b64encode(png_bytes))
        assert asset.format is ImageFormat.PNG

    def test_intrinsic_size(self):
        asset = decode_asset(make_image(31, 77))
        assert (asset.width, asset.height) == (31, 77)

    @pytest.mark.parametrize(
        "payload",
        [
            "data:image/png;base64,!!!not-base64!!!",
            "data:image/png;base64,",
            base64.b64encode(b"plain text, not an image").decode("ascii"),
            b"\x00\xff\xfe binary junk",
        ],
    )
    def test_invalid_payload(self, payload):
        with pytest.raises(InvalidAssetError):
            decode_asset(payload)

    def test_truncated_png(self, png_bytes):
        with pytest.raises(InvalidAssetError):
            decode_asset(png_bytes[:20])


class TestHelpers:
    """Test cases for data-URL and signature helpers."""

    def test_split_data_url(self):
        assert split_data_url("data:image/JPEG;base64,QUJD") == ("image/jpeg", "QUJD")
        assert split_data_url("QUJD") == (None, "QUJD")

    def test_sniff(self, png_bytes, jpeg_bytes):
        assert sniff_image_format(png_bytes) is ImageFormat.PNG
        assert sniff_image_format(jpeg_bytes) is ImageFormat.JPEG
        assert sniff_image_format(b"GIF89a") is None
