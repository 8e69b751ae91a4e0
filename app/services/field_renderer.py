"""Per-field drawing on a PDF page."""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from app.config import settings
from app.core.fit import fit_within
from app.core.geometry import Box
from app.models.fields import (
    BaseField,
    DateField,
    FieldKind,
    ImageField,
    RadioField,
    SignatureField,
    TextField,
)
from app.services.assets import decode_asset
from app.services.pdf_document import FontHandle, ImageHandle, PdfDocument, PdfPage
from app.utils.logger import logger

MIN_RADIUS = 1e-5


@dataclass(frozen=True)
class RenderOptions:
    """Layout constants for text and radio fields."""

    font_size: float = 10.0
    text_left_inset: float = 2.0
    text_placeholder: str = "Text"
    date_format: str = "%Y-%m-%d"
    radio_border_width: float = 1.0

    @classmethod
    def from_settings(cls) -> "RenderOptions":
        return cls(
            font_size=settings.text_font_size,
            text_left_inset=settings.text_left_inset,
            text_placeholder=settings.text_placeholder,
            date_format=settings.date_format,
            radio_border_width=settings.radio_border_width,
        )


class FieldRenderer:
    """Draws fields of every kind onto pages of one document.

    A renderer belongs to a single render pass: it holds the document being
    mutated, the shared signature image and the font resolved for the pass.
    """

    def __init__(
        self,
        document: PdfDocument,
        font: FontHandle,
        signed_at: datetime,
        signature: Optional[ImageHandle] = None,
        options: Optional[RenderOptions] = None,
    ):
        self.document = document
        self.font = font
        self.signed_at = signed_at
        self.signature = signature
        self.options = options or RenderOptions()
        self._handlers: dict[FieldKind, Callable[[PdfPage, BaseField, Box], bool]] = {
            FieldKind.SIGNATURE: self._render_signature,
            FieldKind.IMAGE: self._render_image,
            FieldKind.TEXT: self._render_text,
            FieldKind.DATE: self._render_text,
            FieldKind.RADIO: self._render_radio,
        }

    def render(self, page: PdfPage, field: BaseField, box: Box) -> bool:
        """Draw ``field`` into ``box`` on ``page``.

        Returns False when the field was skipped.
        """
        handler = self._handlers.get(field.kind) if field.kind else None
        if handler is None:
            logger.debug(f"Skipping field of unknown type {getattr(field, 'type', None)!r}")
            return False
        return handler(page, field, box)

    def _draw_fitted(self, page: PdfPage, image: ImageHandle, box: Box) -> None:
        target = fit_within(image.width, image.height, box)
        page.draw_image(image, target.x, target.y, target.width, target.height)

    def _render_signature(self, page: PdfPage, field: SignatureField, box: Box) -> bool:
        if self.signature is None:
            logger.debug("Skipping signature field: no signature image supplied")
            return False
        self._draw_fitted(page, self.signature, box)
        return True

    def _render_image(self, page: PdfPage, field: ImageField, box: Box) -> bool:
        if field.image_data:
            image = self.document.embed_image(decode_asset(field.image_data))
        elif self.signature is not None:
            image = self.signature
        else:
            logger.debug("Skipping image field: no image data and no signature fallback")
            return False
        self._draw_fitted(page, image, box)
        return True

    def text_for(self, field: BaseField) -> str:
        """Resolve the string drawn for a text or date field."""
        if isinstance(field, DateField):
            return self.signed_at.strftime(self.options.date_format)
        value = field.value if isinstance(field, TextField) else None
        if value and value.strip():
            return value
        return self.options.text_placeholder

    def _render_text(self, page: PdfPage, field: BaseField, box: Box) -> bool:
        size = self.options.font_size
        x = box.x + self.options.text_left_inset
        y = box.y + box.height / 2 - size / 2
        page.draw_text(self.text_for(field), x, y, size, self.font)
        return True

    def _render_radio(self, page: PdfPage, field: RadioField, box: Box) -> bool:
        radius = min(abs(box.width), abs(box.height)) / 4
        cx, cy = box.center
        if not _drawable(radius) or not (math.isfinite(cx) and math.isfinite(cy)):
            logger.debug(f"Skipping radio field: glyph radius {radius!r} cannot be drawn")
            return False
        page.draw_circle(cx, cy, radius, self.options.radio_border_width)
        if field.checked:
            if _drawable(radius / 2):
                page.draw_circle(cx, cy, radius / 2, 0, filled=True)
            else:
                logger.debug(f"Skipping radio dot: radius {radius / 2!r} too small")
        return True


def _drawable(radius: float) -> bool:
    # PyMuPDF rejects circles at or below this radius
    return math.isfinite(radius) and radius > MIN_RADIUS
