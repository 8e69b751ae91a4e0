"""Unit tests for storage service."""

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from app.services.storage_service import DocumentNotFoundError, StorageError, StorageService

RENDERED_AT = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def storage(tmp_path):
    return StorageService(upload_dir=tmp_path / "uploads", signed_dir=tmp_path / "signed")


class TestStorageService:
    """Test cases for StorageService."""

    def test_save_and_read_upload(self, storage):
        source_id = storage.save_upload(b"%PDF-data", "My Contract v2.pdf")

        prefix, _, name = source_id.partition("-")
        assert prefix.isdigit()
        assert name == "My-Contract-v2.pdf"
        assert storage.read_upload(source_id) == b"%PDF-data"

    def test_upload_name_drops_directories(self, storage):
        source_id = storage.save_upload(b"x", "../../etc/passwd")
        assert "/" not in source_id
        assert source_id.endswith("-passwd")

    def test_read_missing_upload(self, storage):
        with pytest.raises(DocumentNotFoundError):
            storage.read_upload("123-missing.pdf")

    @pytest.mark.parametrize("source_id", ["../secret.pdf", "a/b.pdf", "..", ""])
    def test_read_rejects_path_components(self, storage, source_id):
        with pytest.raises(StorageError):
            storage.read_upload(source_id)

    def test_save_signed_name(self, storage):
        name = storage.save_signed(b"signed", "1700000000000-doc.pdf", rendered_at=RENDERED_AT)

        assert name == f"1700000000000-doc-signed-{int(RENDERED_AT.timestamp() * 1000)}.pdf"
        assert (storage.signed_dir / name).read_bytes() == b"signed"
        assert storage.signed_url(name) == f"/signed/{name}"

    def test_repeated_signs_do_not_collide(self, storage):
        first = storage.save_signed(b"a", "doc.pdf", rendered_at=RENDERED_AT)
        second = storage.save_signed(
            b"b", "doc.pdf", rendered_at=RENDERED_AT.replace(second=1)
        )
        assert first != second


class TestS3Mirror:
    """Test cases for the optional S3 mirror."""

    @pytest.fixture
    def s3_storage(self, tmp_path):
        with patch("app.services.storage_service.settings") as mock_settings, patch(
            "app.services.storage_service.boto3"
        ) as mock_boto3:
            mock_settings.s3_enabled = True
            mock_settings.s3_bucket_name = "signed-docs"
            mock_settings.s3_region = "eu-west-1"
            mock_settings.s3_access_key = "key"
            mock_settings.s3_secret_key = "secret"
            mock_settings.s3_endpoint_url = None
            mock_settings.s3_presigned_url_expiration = 600
            mock_boto3.client.return_value = MagicMock()
            yield StorageService(upload_dir=tmp_path / "u", signed_dir=tmp_path / "s")

    def test_save_signed_uploads_to_bucket(self, s3_storage):
        name = s3_storage.save_signed(
            b"signed", "doc.pdf", rendered_at=RENDERED_AT, metadata={"signed-hash": "ab"}
        )

        s3_storage.s3_client.put_object.assert_called_once_with(
            Bucket="signed-docs",
            Key=name,
            Body=b"signed",
            ContentType="application/pdf",
            Metadata={"signed-hash": "ab"},
        )
        assert (s3_storage.signed_dir / name).exists()

    def test_signed_url_is_presigned(self, s3_storage):
        s3_storage.s3_client.generate_presigned_url.return_value = "https://s3/doc"

        assert s3_storage.signed_url("doc.pdf") == "https://s3/doc"
        s3_storage.s3_client.generate_presigned_url.assert_called_once_with(
            "get_object", Params={"Bucket": "signed-docs", "Key": "doc.pdf"}, ExpiresIn=600
        )

    def test_upload_failure(self, s3_storage):
        s3_storage.s3_client.put_object.side_effect = ClientError(
            {"Error": {"Code": "500", "Message": "boom"}}, "PutObject"
        )

        with pytest.raises(StorageError, match="S3 upload failed"):
            s3_storage.save_signed(b"signed", "doc.pdf", rendered_at=RENDERED_AT)
