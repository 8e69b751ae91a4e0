"""Signing pipeline: stamp placed fields onto a PDF and record content hashes."""

import hashlib
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence

from app.config import settings
from app.core.geometry import percent_box_to_page
from app.models.audit import AuditRecord
from app.models.fields import BaseField
from app.services.assets import decode_asset
from app.services.field_renderer import FieldRenderer, RenderOptions
from app.services.pdf_document import PdfDocument, PdfPage
from app.services.storage_service import StorageService
from app.utils.audit import AuditLog
from app.utils.logger import logger


def content_hash(data: bytes) -> str:
    """SHA-256 hex digest of a byte stream."""
    return hashlib.sha256(data).hexdigest()


def local_now() -> datetime:
    return datetime.now().astimezone()


def resolve_page(pages: Sequence[PdfPage], index: int) -> PdfPage:
    """Return the page at ``index``, falling back to the first page."""
    if 0 <= index < len(pages):
        return pages[index]
    return pages[0]


@dataclass(frozen=True)
class RenderResult:
    """Output of one render pass."""

    output: bytes
    original_hash: str
    signed_hash: str
    rendered: int
    skipped: int


@dataclass(frozen=True)
class SignResult:
    """Outcome of a successful sign request."""

    output_ref: str
    output: bytes
    original_hash: str
    signed_hash: str
    signed_at: datetime


class SigningService:
    """Renders field placements onto source documents and persists the result.

    Every call works on its own document, assets and renderer; nothing is
    shared between concurrent requests except the storage and audit
    collaborators.
    """

    def __init__(
        self,
        storage: Optional[StorageService] = None,
        audit_log: Optional[AuditLog] = None,
        options: Optional[RenderOptions] = None,
        font_name: Optional[str] = None,
        clock: Callable[[], datetime] = local_now,
    ):
        self.storage = storage
        self.audit_log = audit_log
        self.options = options or RenderOptions.from_settings()
        self.font_name = font_name or settings.default_font
        self.clock = clock

    def render(
        self,
        source: bytes,
        fields: Sequence[BaseField],
        signature_asset: bytes | str | None = None,
        signed_at: Optional[datetime] = None,
    ) -> RenderResult:
        """Draw ``fields`` onto a copy of ``source`` and hash both byte streams.

        Fields are drawn in the given order, so later fields stack on top of
        earlier ones.

        Raises:
            DocumentLoadError: If ``source`` is not a readable PDF.
            InvalidAssetError: If the signature or a field image cannot be decoded.
        """
        signed_at = signed_at or self.clock()

        with PdfDocument.load(source) as document:
            original_hash = content_hash(source)

            signature = None
            if signature_asset:
                signature = document.embed_image(decode_asset(signature_asset))
                logger.debug(
                    f"Signature image {signature.format.value} {signature.width}x{signature.height}"
                )

            renderer = FieldRenderer(
                document=document,
                font=document.embed_font(self.font_name),
                signed_at=signed_at,
                signature=signature,
                options=self.options,
            )

            pages = document.pages()
            rendered = skipped = 0
            for position, field in enumerate(fields):
                page = resolve_page(pages, field.page_index)
                if page.number != field.page_index:
                    logger.debug(
                        f"Field #{position}: page {field.page_index} out of range, using page 0"
                    )
                page_width, page_height = page.size()
                box = percent_box_to_page(
                    field.x_percent,
                    field.y_percent,
                    field.width_percent,
                    field.height_percent,
                    page_width,
                    page_height,
                )
                if box.is_empty():
                    logger.debug(f"Field #{position}: skipped, zero-size box")
                    skipped += 1
                    continue

                if renderer.render(page, field, box):
                    rendered += 1
                else:
                    skipped += 1

            output = document.save()

        return RenderResult(
            output=output,
            original_hash=original_hash,
            signed_hash=content_hash(output),
            rendered=rendered,
            skipped=skipped,
        )

    def sign(
        self,
        source: bytes,
        source_id: str,
        fields: Sequence[BaseField],
        signature_asset: bytes | str | None = None,
    ) -> SignResult:
        """Render, persist and audit one sign request.

        Audit failures are logged and never change the returned result.
        """
        if self.storage is None:
            raise RuntimeError("SigningService.sign requires a storage service")

        signed_at = self.clock()
        result = self.render(source, fields, signature_asset, signed_at)

        output_ref = self.storage.save_signed(
            result.output,
            source_id,
            rendered_at=signed_at,
            metadata={
                "original-hash": result.original_hash,
                "signed-hash": result.signed_hash,
                "source-id": source_id,
                "signed-at": signed_at.isoformat(),
            },
        )
        logger.info(
            f"Signed {source_id} -> {output_ref}: {result.rendered} fields drawn, "
            f"{result.skipped} skipped. Hash: {result.signed_hash[:16]}..."
        )

        self._record_audit(
            AuditRecord(
                source_id=source_id,
                original_hash=result.original_hash,
                signed_hash=result.signed_hash,
                signed_at=signed_at,
            )
        )

        return SignResult(
            output_ref=output_ref,
            output=result.output,
            original_hash=result.original_hash,
            signed_hash=result.signed_hash,
            signed_at=signed_at,
        )

    def _record_audit(self, record: AuditRecord) -> None:
        if self.audit_log is None or not settings.audit_enabled:
            return
        try:
            self.audit_log.append(record)
        except Exception as e:
            logger.error(f"Audit save error for {record.source_id}: {e}", exc_info=True)
