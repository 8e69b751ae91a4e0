"""Field placement models.

A field is one user-placed annotation on one page. Its rectangle is given in
percent of the page size, anchored at the top-left corner, so the same field
set is valid whatever the zoom of the viewer or the physical page size.
"""

from enum import Enum
from typing import Annotated, Any, ClassVar, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    field_validator,
)

from app.core.geometry import to_number


class FieldKind(str, Enum):
    """Supported field kinds."""

    SIGNATURE = "signature"
    IMAGE = "image"
    TEXT = "text"
    DATE = "date"
    RADIO = "radio"


class BaseField(BaseModel):
    """Placement shared by every field kind."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    kind: ClassVar[Optional[FieldKind]] = None

    page_index: int = Field(default=0, alias="page")
    x_percent: float = Field(default=0.0, alias="xPercent")
    y_percent: float = Field(default=0.0, alias="yPercent")
    width_percent: float = Field(default=0.0, alias="widthPercent")
    height_percent: float = Field(default=0.0, alias="heightPercent")

    @field_validator("x_percent", "y_percent", "width_percent", "height_percent", mode="before")
    @classmethod
    def coerce_percent(cls, v: Any) -> float:
        """Treat non-numeric percent values as zero."""
        return to_number(v)

    @field_validator("page_index", mode="before")
    @classmethod
    def coerce_page_index(cls, v: Any) -> int:
        """Accept whole numbers only; anything else targets the first page."""
        if isinstance(v, bool):
            return 0
        if isinstance(v, int):
            return v
        if isinstance(v, float) and v.is_integer():
            return int(v)
        return 0


class SignatureField(BaseField):
    """Slot filled with the shared signature image."""

    kind: ClassVar[Optional[FieldKind]] = FieldKind.SIGNATURE
    type: Literal["signature"] = "signature"


class ImageField(BaseField):
    """Slot filled with its own image, or the signature image as a fallback."""

    kind: ClassVar[Optional[FieldKind]] = FieldKind.IMAGE
    type: Literal["image"] = "image"
    image_data: Optional[Union[bytes, str]] = Field(default=None, alias="imageData")

    @field_validator("image_data", mode="before")
    @classmethod
    def empty_image_is_none(cls, v: Any) -> Any:
        if not v or not isinstance(v, (bytes, str)):
            return None
        return v


class TextField(BaseField):
    """Free text slot."""

    kind: ClassVar[Optional[FieldKind]] = FieldKind.TEXT
    type: Literal["text"] = "text"
    value: Optional[str] = None

    @field_validator("value", mode="before")
    @classmethod
    def non_string_is_none(cls, v: Any) -> Any:
        return v if isinstance(v, str) else None


class DateField(BaseField):
    """Slot showing the date of signing."""

    kind: ClassVar[Optional[FieldKind]] = FieldKind.DATE
    type: Literal["date"] = "date"


class RadioField(BaseField):
    """Radio glyph, filled when checked."""

    kind: ClassVar[Optional[FieldKind]] = FieldKind.RADIO
    type: Literal["radio"] = "radio"
    checked: bool = False

    @field_validator("checked", mode="before")
    @classmethod
    def truthy_checked(cls, v: Any) -> bool:
        return bool(v)


class UnknownField(BaseField):
    """Field of a kind this service does not know; never rendered."""

    type: str = ""

    @field_validator("type", mode="before")
    @classmethod
    def stringify_type(cls, v: Any) -> str:
        return v if isinstance(v, str) else ""


_KNOWN_KINDS = {kind.value for kind in FieldKind}


def _field_tag(value: Any) -> str:
    if isinstance(value, dict):
        kind = value.get("type")
    else:
        kind = getattr(value, "type", None)
    if isinstance(kind, FieldKind):
        kind = kind.value
    if isinstance(kind, str) and kind in _KNOWN_KINDS:
        return kind
    return "unknown"


FieldDescriptor = Annotated[
    Union[
        Annotated[SignatureField, Tag(FieldKind.SIGNATURE.value)],
        Annotated[ImageField, Tag(FieldKind.IMAGE.value)],
        Annotated[TextField, Tag(FieldKind.TEXT.value)],
        Annotated[DateField, Tag(FieldKind.DATE.value)],
        Annotated[RadioField, Tag(FieldKind.RADIO.value)],
        Annotated[UnknownField, Tag("unknown")],
    ],
    Discriminator(_field_tag),
]

_field_list_adapter = TypeAdapter(list[FieldDescriptor])


def parse_fields(raw: Any) -> list[BaseField]:
    """Validate a raw list of field dicts, keeping input order."""
    if not isinstance(raw, list):
        return []
    return _field_list_adapter.validate_python(raw)
