"""API routes: upload a PDF and stamp placed fields onto it."""

from fastapi import APIRouter, File, HTTPException, Query, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from app.config import settings
from app.models.requests import SignRequest, SignResponse, UploadResponse
from app.services.signing_service import SigningService
from app.services.storage_service import DocumentNotFoundError, StorageError, StorageService
from app.utils.audit import AuditLog, create_audit_log
from app.utils.exceptions import DocumentLoadError, InvalidAssetError
from app.utils.logger import logger

router = APIRouter(tags=["documents"])

# ---------------------------------------------------------------------------
# Lazy-initialised services (avoids import-time side-effects)
# ---------------------------------------------------------------------------

_storage_service: StorageService | None = None
_audit_log: AuditLog | None = None
_signing_service: SigningService | None = None


def _get_storage_service() -> StorageService:
    global _storage_service
    if _storage_service is None:
        _storage_service = StorageService()
    return _storage_service


def _get_audit_log() -> AuditLog:
    global _audit_log
    if _audit_log is None:
        _audit_log = create_audit_log()
    return _audit_log


def _get_signing_service() -> SigningService:
    global _signing_service
    if _signing_service is None:
        _signing_service = SigningService(storage=_get_storage_service(), audit_log=_get_audit_log())
    return _signing_service


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@router.post("/upload-pdf", status_code=status.HTTP_200_OK)
async def upload_pdf(
        file: UploadFile | None = File(None, description="PDF document to sign"),
) -> dict:
    """Store an uploaded PDF and return its id."""
    if file is None or not file.filename:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    content = await _read_upload(file)

    try:
        pdf_id = _get_storage_service().save_upload(content, file.filename)
    except StorageError as exc:
        logger.error(f"Upload error: {exc}", exc_info=True)
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Upload failed") from exc

    response = UploadResponse(pdf_id=pdf_id, url=f"/uploads/{pdf_id}")
    return response.model_dump(by_alias=True)


@router.post("/sign-pdf", status_code=status.HTTP_200_OK)
async def sign_pdf(request: SignRequest) -> dict:
    """Stamp the placed fields onto an uploaded PDF and return the signed copy's URL."""
    if not request.pdf_id:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="pdfId is required")

    storage = _get_storage_service()
    try:
        source = storage.read_upload(request.pdf_id)
    except DocumentNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="PDF not found") from exc
    except StorageError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    logger.info(f"sign-pdf | pdfId={request.pdf_id} fields={len(request.fields)}")

    try:
        result = await run_in_threadpool(
            _get_signing_service().sign,
            source,
            request.pdf_id,
            request.fields,
            request.base64_signature or None,
        )
        url = storage.signed_url(result.output_ref)
    except DocumentLoadError as exc:
        logger.warning(f"Cannot load {request.pdf_id}: {exc}")
        raise HTTPException(status.HTTP_422_UNPROCESSABLE_ENTITY, detail=f"Invalid PDF: {exc}") from exc
    except InvalidAssetError as exc:
        logger.warning(f"Invalid image for {request.pdf_id}: {exc}")
        raise HTTPException(status.HTTP_422_UNPROCESSABLE_ENTITY, detail=f"Invalid image: {exc}") from exc
    except StorageError as exc:
        logger.error(f"Storage error: {exc}", exc_info=True)
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to store signed PDF") from exc
    except Exception as exc:
        logger.error(f"sign-pdf error: {exc}", exc_info=True)
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to sign PDF") from exc

    response = SignResponse(
        url=url,
        pdf_id=request.pdf_id,
        original_hash=result.original_hash,
        signed_hash=result.signed_hash,
        signed_at=result.signed_at.isoformat(),
    )
    return response.model_dump(by_alias=True)


@router.get("/audit", status_code=status.HTTP_200_OK)
async def list_audit_records(
        limit: int | None = Query(None, ge=1, le=1000, description="Most recent N records"),
) -> dict:
    """Return recent audit records."""
    records = _get_audit_log().records(limit)
    return {"records": [record.to_json_dict() for record in records]}


# ---------------------------------------------------------------------------
# Shared private helpers
# ---------------------------------------------------------------------------

async def _read_upload(file: UploadFile) -> bytes:
    """Read file bytes, raising appropriate HTTP errors on failure."""
    try:
        content = await file.read()
    except Exception as exc:
        logger.error(f"Failed to read upload: {exc}")
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to read uploaded file") from exc

    if not content:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="Uploaded file is empty")
    if len(content) > settings.max_upload_size:
        raise HTTPException(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="Uploaded file is too large")

    return content
