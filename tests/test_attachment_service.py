from datetime import datetime, timezone

import pytest

from services.attachment_service import (
    attachment_from_upload,
    create_file_attachment,
    decode_data_url,
    file_icon,
    format_file_size,
    is_image_file,
)

NOW = datetime(2025, 6, 15, tzinfo=timezone.utc)


class FakeUpload:
    """Stands in for streamlit's UploadedFile."""

    def __init__(self, name, data, type):
        self.name = name
        self.type = type
        self._data = data

    def getbuffer(self):
        return memoryview(self._data)


def test_create_attachment_inlines_payload():
    attachment = create_file_attachment("scan.png", b"abc", clock=lambda: NOW)

    assert attachment.type == "image/png"
    assert attachment.size == 3
    assert attachment.url == "data:image/png;base64,YWJj"
    assert attachment.uploaded_at == NOW
    assert decode_data_url(attachment.url) == b"abc"


def test_unknown_extension_falls_back_to_octet_stream():
    assert create_file_attachment("blob", b"").type == "application/octet-stream"


def test_attachment_from_upload_uses_browser_type():
    attachment = attachment_from_upload(FakeUpload("notes.pdf", b"%PDF-1.4", "application/pdf"))

    assert attachment.name == "notes.pdf"
    assert attachment.type == "application/pdf"
    assert decode_data_url(attachment.url) == b"%PDF-1.4"


def test_decode_rejects_plain_urls():
    with pytest.raises(ValueError):
        decode_data_url("https://example.com/x.png")


@pytest.mark.parametrize(
    "size,expected",
    [(0, "0 Bytes"), (500, "500 Bytes"), (1024, "1 KB"), (1536, "1.5 KB"), (5 * 1024 ** 2, "5 MB")],
)
def test_format_file_size(size, expected):
    assert format_file_size(size) == expected


def test_type_helpers():
    assert is_image_file("image/jpeg")
    assert not is_image_file("application/pdf")
    assert file_icon("application/pdf") == "📄"
    assert file_icon("application/vnd.openxmlformats-officedocument.spreadsheetml.sheet") == "📊"
