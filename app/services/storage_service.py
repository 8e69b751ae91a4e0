"""Storage service for uploaded sources and signed output."""

import re
import time
from datetime import datetime
from pathlib import Path, PurePath

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.config import settings
from app.utils.logger import logger


class StorageError(Exception):
    """Raised when storage operations fail."""

    pass


class DocumentNotFoundError(StorageError):
    """Raised when a source document id does not exist."""

    pass


def _epoch_ms(moment: datetime | None = None) -> int:
    if moment is None:
        return int(time.time() * 1000)
    return int(moment.timestamp() * 1000)


def _safe_name(name: str) -> str:
    """Reject names that would escape the storage directory."""
    if not name or PurePath(name).name != name or name in (".", ".."):
        raise StorageError(f"Invalid document name: {name!r}")
    return name


class StorageService:
    """Keeps uploads and signed documents on local disk, mirroring output to S3."""

    def __init__(self, upload_dir: str | Path | None = None, signed_dir: str | Path | None = None):
        self.upload_dir = Path(upload_dir or settings.upload_dir)
        self.signed_dir = Path(signed_dir or settings.signed_dir)

        self.s3_enabled = settings.s3_enabled
        if not self.s3_enabled:
            logger.info("S3 mirror is disabled, signed documents stay on local disk")
            return

        self.bucket_name = settings.s3_bucket_name
        kwargs = {
            "region_name": settings.s3_region,
            "aws_access_key_id": settings.s3_access_key,
            "aws_secret_access_key": settings.s3_secret_key,
        }
        if settings.s3_endpoint_url:
            kwargs["endpoint_url"] = settings.s3_endpoint_url
        self.s3_client = boto3.client("s3", **kwargs)

    def save_upload(self, content: bytes, filename: str) -> str:
        """Store an uploaded source document and return its id."""
        base = re.sub(r"\s+", "-", PurePath(filename or "document.pdf").name)
        source_id = _safe_name(f"{_epoch_ms()}-{base}")
        self._write(self.upload_dir / source_id, content)
        logger.info(f"Stored upload {source_id} ({len(content)} bytes)")
        return source_id

    def read_upload(self, source_id: str) -> bytes:
        """Read the bytes of a previously uploaded source document."""
        path = self.upload_dir / _safe_name(source_id)
        if not path.is_file():
            raise DocumentNotFoundError(f"PDF not found: {source_id}")
        try:
            return path.read_bytes()
        except OSError as e:
            logger.error(f"Failed to read upload {source_id}: {e}")
            raise StorageError(f"Failed to read {source_id}: {e}") from e

    def signed_name(self, source_id: str, rendered_at: datetime | None = None) -> str:
        """Name of the signed output for a source rendered at ``rendered_at``."""
        stem = PurePath(_safe_name(source_id)).stem
        return f"{stem}-signed-{_epoch_ms(rendered_at)}.pdf"

    def save_signed(
        self,
        content: bytes,
        source_id: str,
        rendered_at: datetime | None = None,
        metadata: dict[str, str] | None = None,
    ) -> str:
        """Persist a fully rendered document and return its name."""
        name = self.signed_name(source_id, rendered_at)
        self._write(self.signed_dir / name, content)
        logger.info(f"Stored signed document {name}")

        if self.s3_enabled:
            self._upload_s3(content, name, metadata)
        return name

    def signed_url(self, name: str) -> str:
        """Return a retrievable reference for a signed document."""
        if not self.s3_enabled:
            return f"/signed/{_safe_name(name)}"

        try:
            url: str = self.s3_client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket_name, "Key": name},
                ExpiresIn=settings.s3_presigned_url_expiration,
            )
            return url
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to generate pre-signed URL for {name}: {e}")
            raise StorageError(f"Failed to generate pre-signed URL: {e}") from e

    def _write(self, path: Path, content: bytes) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}")
            raise StorageError(f"Failed to write {path.name}: {e}") from e

    def _upload_s3(self, content: bytes, name: str, metadata: dict[str, str] | None) -> None:
        try:
            kwargs = {
                "Bucket": self.bucket_name,
                "Key": name,
                "Body": content,
                "ContentType": "application/pdf",
            }
            if metadata:
                kwargs["Metadata"] = {
                    k: v.encode("ascii", "replace").decode("ascii") for k, v in metadata.items()
                }
            self.s3_client.put_object(**kwargs)
            logger.info(f"Successfully uploaded {name} to S3 bucket {self.bucket_name}")
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to upload {name} to S3: {e}")
            raise StorageError(f"S3 upload failed: {e}") from e
