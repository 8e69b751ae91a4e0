"""PDF document wrapper used by the rendering pipeline.

Drawing methods take page-space coordinates with the origin at the bottom-left
corner of the page, as PDF content streams do. PyMuPDF addresses pages from
the top-left corner, so every draw call flips the vertical axis here.
"""

from dataclasses import dataclass

import fitz

from app.config import BUILTIN_FONTS
from app.services.assets import DecodedAsset, ImageFormat, decode_asset
from app.utils.exceptions import DocumentLoadError, InvalidAssetError

BLACK = (0, 0, 0)


@dataclass
class ImageHandle:
    """Image embedded into one document.

    The image stream is written on first draw; later draws reference the same
    xref instead of embedding the bytes again.
    """

    data: bytes
    format: ImageFormat
    width: int
    height: int
    xref: int = 0


@dataclass(frozen=True)
class FontHandle:
    """Built-in font resolved once per document."""

    name: str


class PdfPage:
    """One page of a :class:`PdfDocument`."""

    def __init__(self, page: fitz.Page):
        self._page = page

    @property
    def number(self) -> int:
        return self._page.number

    def size(self) -> tuple[float, float]:
        """Return ``(width, height)`` in points."""
        rect = self._page.rect
        return rect.width, rect.height

    def _flip_y(self, y: float) -> float:
        return self._page.rect.height - y

    def _to_rect(self, x: float, y: float, width: float, height: float) -> fitz.Rect:
        rect = fitz.Rect(x, self._flip_y(y + height), x + width, self._flip_y(y))
        return rect.normalize()

    def draw_image(
        self, handle: ImageHandle, x: float, y: float, width: float, height: float
    ) -> None:
        """Draw an embedded image stretched to the given box."""
        rect = self._to_rect(x, y, width, height)
        if handle.xref:
            self._page.insert_image(rect, xref=handle.xref, keep_proportion=False)
        else:
            handle.xref = self._page.insert_image(
                rect, stream=handle.data, keep_proportion=False
            )

    def draw_text(self, text: str, x: float, y: float, size: float, font: FontHandle) -> None:
        """Draw a single line of text with its baseline starting at ``(x, y)``."""
        self._page.insert_text(
            fitz.Point(x, self._flip_y(y)),
            text,
            fontsize=size,
            fontname=font.name,
            color=BLACK,
        )

    def draw_circle(
        self,
        cx: float,
        cy: float,
        radius: float,
        border_width: float,
        filled: bool = False,
    ) -> None:
        """Draw a circle outline, optionally filled."""
        self._page.draw_circle(
            fitz.Point(cx, self._flip_y(cy)),
            radius,
            color=BLACK if border_width else None,
            fill=BLACK if filled else None,
            width=border_width,
        )


class PdfDocument:
    """In-memory PDF opened from bytes and mutated by draw calls."""

    def __init__(self, doc: fitz.Document):
        self._doc = doc

    @classmethod
    def load(cls, data: bytes) -> "PdfDocument":
        """Open PDF bytes.

        Raises:
            DocumentLoadError: If the bytes are not a readable, unencrypted PDF
                with at least one page.
        """
        if not data:
            raise DocumentLoadError("Source document is empty")

        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            raise DocumentLoadError(f"Failed to open PDF: {e}") from e

        if doc.needs_pass:
            doc.close()
            raise DocumentLoadError("Source document is password protected")
        if doc.page_count == 0:
            doc.close()
            raise DocumentLoadError("Source document has no pages")

        return cls(doc)

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    def pages(self) -> list[PdfPage]:
        return [PdfPage(page) for page in self._doc]

    def embed_image(self, asset: DecodedAsset) -> ImageHandle:
        return ImageHandle(
            data=asset.data, format=asset.format, width=asset.width, height=asset.height
        )

    def embed_png(self, data: bytes) -> ImageHandle:
        return self._embed_as(data, ImageFormat.PNG)

    def embed_jpg(self, data: bytes) -> ImageHandle:
        return self._embed_as(data, ImageFormat.JPEG)

    def _embed_as(self, data: bytes, image_format: ImageFormat) -> ImageHandle:
        asset = decode_asset(data)
        if asset.format is not image_format:
            raise InvalidAssetError(
                f"Expected {image_format.value} image, got {asset.format.value}"
            )
        return self.embed_image(asset)

    def embed_font(self, name: str) -> FontHandle:
        """Resolve a built-in font by its short name (e.g. ``helv``)."""
        if name not in BUILTIN_FONTS:
            raise ValueError(f"Unknown built-in font: {name}")
        return FontHandle(name=name)

    def save(self) -> bytes:
        """Serialize the document in its current state."""
        return self._doc.tobytes()

    def close(self) -> None:
        self._doc.close()

    def __enter__(self) -> "PdfDocument":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
