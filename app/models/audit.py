"""Audit record correlating a source document with its signed derivative."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class AuditRecord(BaseModel):
    """Append-only entry written once per successful sign."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source_id: str = Field(..., alias="pdfId", min_length=1)
    original_hash: str = Field(..., alias="originalHash", min_length=64, max_length=64)
    signed_hash: str = Field(..., alias="signedHash", min_length=64, max_length=64)
    signed_at: datetime = Field(..., alias="signedAt")

    def to_json_dict(self) -> dict:
        """Convert to a JSON-serialisable dictionary using wire names."""
        return {
            "pdfId": self.source_id,
            "originalHash": self.original_hash,
            "signedHash": self.signed_hash,
            "signedAt": self.signed_at.isoformat(),
        }
