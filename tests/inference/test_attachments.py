# Unit tests for data-URI attachments and chat message assembly

import pytest

from inference.input_processing import (
    Attachment,
    InputUtils,
    is_data_uri,
    parse_data_uri,
)

_PNG = "data:image/png;base64,iVBORw0KGgo="
_PDF = "data:application/pdf;base64,JVBERi0="


@pytest.mark.parametrize("value, expected", [
    (_PNG, True),
    (_PDF, True),
    ("data:image/jpeg;name=receipt.jpg;base64,/9j/4AAQ", True),
    ("data:image/png,iVBORw0KGgo=", False),
    ("data:;base64,iVBORw0KGgo=", False),
    ("https://cdn.example.com/receipt.png", False),
    ("data:image/png;base64,not*base64", False),
    (None, False),
    (42, False),
])
def test_is_data_uri(value, expected):
    assert is_data_uri(value) is expected


def test_parse_data_uri():
    attachment = parse_data_uri(_PNG)
    assert attachment == Attachment(mime_type="image/png", data="iVBORw0KGgo=")
    assert attachment.is_image
    assert attachment.to_data_uri() == _PNG


def test_parse_rejects_plain_url():
    with pytest.raises(ValueError):
        parse_data_uri("https://cdn.example.com/receipt.png")


def test_text_only_message_uses_plain_content():
    message = InputUtils.create_multimodal_message("Categorise this.")
    assert message == {"role": "user", "content": "Categorise this."}


def test_image_attachment_becomes_image_part():
    message = InputUtils.create_multimodal_message(
        "Receipt: [attachment #1: image/png]", [parse_data_uri(_PNG)],
    )
    assert message["content"] == [
        {"type": "text", "text": "Receipt: [attachment #1: image/png]"},
        {"type": "image_url", "image_url": {"url": _PNG}},
    ]


def test_pdf_attachment_becomes_file_part():
    message = InputUtils.create_multimodal_message(
        "Bank Statement: [attachment #1: application/pdf]", [parse_data_uri(_PDF)],
    )
    assert message["content"][1] == {
        "type": "file",
        "file": {"filename": "attachment-1.pdf", "file_data": _PDF},
    }


def test_unsupported_attachment_is_skipped_with_warning(caplog):
    csv = parse_data_uri("data:text/csv;base64,YSxi")

    with caplog.at_level("WARNING", logger="inference.input_processing.message_utils"):
        message = InputUtils.create_multimodal_message("Statement: [attachment #1: text/csv]", [csv])

    assert message == {"role": "user", "content": "Statement: [attachment #1: text/csv]"}
    assert "text/csv" in caplog.text
