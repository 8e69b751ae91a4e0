"""Shared fixtures: in-memory PDFs and images."""

import base64
import io

import fitz
import pytest
from PIL import Image


def make_pdf(pages: int = 1, width: float = 612, height: float = 792) -> bytes:
    """Build a blank PDF with the given number of pages."""
    doc = fitz.open()
    for _ in range(pages):
        doc.new_page(width=width, height=height)
    data = doc.tobytes()
    doc.close()
    return data


def make_image(width: int = 200, height: int = 100, fmt: str = "PNG") -> bytes:
    """Build a solid-colour image encoded as PNG or JPEG."""
    img = Image.new("RGB", (width, height), (20, 40, 160))
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


def data_url(data: bytes, mime: str = "image/png") -> str:
    return f"data:{mime};base64," + base64.b64encode(data).decode("ascii")


@pytest.fixture
def pdf_bytes() -> bytes:
    return make_pdf()


@pytest.fixture
def png_bytes() -> bytes:
    return make_image()


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image(fmt="JPEG")
