"""Unit tests for field placement models."""

import pytest

from app.models.fields import (
    DateField,
    FieldKind,
    ImageField,
    RadioField,
    SignatureField,
    TextField,
    UnknownField,
    parse_fields,
)
from app.models.requests import SignRequest


class TestParseFields:
    """Test cases for parsing raw field payloads."""

    def test_camel_case_payload(self):
        """Test the browser payload shape is accepted."""
        fields = parse_fields(
            [
                {
                    "type": "text",
                    "page": 0,
                    "xPercent": 10,
                    "yPercent": 12.5,
                    "widthPercent": 30,
                    "heightPercent": 6,
                    "value": "Hello",
                    "checked": False,
                    "imageData": "",
                }
            ]
        )

        assert len(fields) == 1
        field = fields[0]
        assert isinstance(field, TextField)
        assert field.kind is FieldKind.TEXT
        assert field.x_percent == 10.0
        assert field.y_percent == 12.5
        assert field.value == "Hello"

    def test_each_kind_maps_to_its_model(self):
        fields = parse_fields(
            [{"type": "signature"}, {"type": "image"}, {"type": "date"}, {"type": "radio", "checked": True}]
        )

        assert [type(f) for f in fields] == [SignatureField, ImageField, DateField, RadioField]
        assert fields[3].checked is True

    def test_unknown_kind_is_kept_as_unknown(self):
        """Test unrecognised kinds parse without error and carry no kind."""
        fields = parse_fields([{"type": "checkbox", "xPercent": 1}, {"xPercent": 2}, {"type": ["x"]}])

        assert all(isinstance(f, UnknownField) for f in fields)
        assert all(f.kind is None for f in fields)
        assert fields[0].type == "checkbox"

    def test_order_is_preserved(self):
        fields = parse_fields([{"type": "radio"}, {"type": "text"}, {"type": "radio"}])
        assert [f.type for f in fields] == ["radio", "text", "radio"]

    def test_non_numeric_percent_is_zero(self):
        field = parse_fields([{"type": "text", "xPercent": "abc", "widthPercent": None}])[0]

        assert field.x_percent == 0.0
        assert field.width_percent == 0.0

    @pytest.mark.parametrize("page, expected", [(2, 2), (1.0, 1), (1.5, 0), ("3", 0), (None, 0), (True, 0), (-1, -1)])
    def test_page_index_coercion(self, page, expected):
        field = parse_fields([{"type": "date", "page": page}])[0]
        assert field.page_index == expected

    def test_blank_image_data_is_none(self):
        field = parse_fields([{"type": "image", "imageData": ""}])[0]
        assert field.image_data is None

    def test_non_string_text_value_is_none(self):
        field = parse_fields([{"type": "text", "value": 42}])[0]
        assert field.value is None

    def test_non_list_is_empty(self):
        assert parse_fields({"type": "text"}) == []

    def test_fields_are_immutable(self):
        field = parse_fields([{"type": "radio"}])[0]
        with pytest.raises(Exception):
            field.checked = True


class TestSignRequest:
    """Test cases for the sign request body."""

    def test_parses_fields(self):
        request = SignRequest.model_validate(
            {
                "pdfId": "123-doc.pdf",
                "base64Signature": "data:image/png;base64,AAAA",
                "fields": [{"type": "signature", "xPercent": 5}, {"type": "stamp"}],
            }
        )

        assert request.pdf_id == "123-doc.pdf"
        assert isinstance(request.fields[0], SignatureField)
        assert isinstance(request.fields[1], UnknownField)

    def test_defaults(self):
        request = SignRequest.model_validate({"pdfId": None, "fields": "nope"})

        assert request.pdf_id == ""
        assert request.base64_signature == ""
        assert request.fields == []
