"""Field, audit and request models."""

from app.models.audit import AuditRecord
from app.models.fields import (
    BaseField,
    DateField,
    FieldDescriptor,
    FieldKind,
    ImageField,
    RadioField,
    SignatureField,
    TextField,
    UnknownField,
    parse_fields,
)
from app.models.requests import SignRequest, SignResponse, UploadResponse

__all__ = [
    "AuditRecord",
    "BaseField",
    "FieldDescriptor",
    "FieldKind",
    "SignatureField",
    "ImageField",
    "TextField",
    "DateField",
    "RadioField",
    "UnknownField",
    "parse_fields",
    "SignRequest",
    "SignResponse",
    "UploadResponse",
]
