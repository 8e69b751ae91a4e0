"""Request and response bodies for the HTTP layer."""

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.fields import FieldDescriptor


class SignRequest(BaseModel):
    """Body of ``POST /sign-pdf``."""

    model_config = ConfigDict(populate_by_name=True)

    pdf_id: str = Field(default="", alias="pdfId")
    base64_signature: str = Field(default="", alias="base64Signature")
    fields: List[FieldDescriptor] = Field(default_factory=list)

    @field_validator("pdf_id", "base64_signature", mode="before")
    @classmethod
    def none_is_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("fields", mode="before")
    @classmethod
    def non_list_is_empty(cls, v: Any) -> Any:
        """Anything but a list means no fields."""
        return v if isinstance(v, list) else []


class UploadResponse(BaseModel):
    """Body returned by ``POST /upload-pdf``."""

    model_config = ConfigDict(populate_by_name=True)

    pdf_id: str = Field(..., serialization_alias="pdfId")
    url: str


class SignResponse(BaseModel):
    """Body returned by ``POST /sign-pdf``."""

    model_config = ConfigDict(populate_by_name=True)

    url: str
    pdf_id: str = Field(..., serialization_alias="pdfId")
    original_hash: str = Field(..., serialization_alias="originalHash")
    signed_hash: str = Field(..., serialization_alias="signedHash")
    signed_at: str = Field(..., serialization_alias="signedAt")
