import base64
import mimetypes
import uuid
from typing import Callable

from core.time_utils import now_utc
from models import FileAttachment

DEFAULT_TYPE = "application/octet-stream"

ACCEPTED_TYPES = ["png", "jpg", "jpeg", "gif", "webp", "pdf", "doc", "docx", "xls", "xlsx"]


def encode_data_url(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def decode_data_url(url: str) -> bytes:
    """Return the raw bytes held in a base64 data URL."""
    header, _, payload = url.partition(",")
    if not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("Not a base64 data URL")
    return base64.b64decode(payload)


def create_file_attachment(
    name: str,
    data: bytes,
    mime_type: str | None = None,
    clock: Callable = now_utc,
) -> FileAttachment:
    """Encode raw file bytes as an inline attachment record."""
    mime_type = mime_type or mimetypes.guess_type(name)[0] or DEFAULT_TYPE
    return FileAttachment(
        id=str(uuid.uuid4()),
        name=name,
        url=encode_data_url(data, mime_type),
        type=mime_type,
        size=len(data),
        uploaded_at=clock(),
    )


def attachment_from_upload(uploaded_file, clock: Callable = now_utc) -> FileAttachment:
    """Build an attachment from a Streamlit UploadedFile."""
    return create_file_attachment(
        uploaded_file.name,
        bytes(uploaded_file.getbuffer()),
        mime_type=uploaded_file.type,
        clock=clock,
    )


def format_file_size(size: int) -> str:
    if size <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    i = 0
    while size >= 1024 ** (i + 1) and i < len(units) - 1:
        i += 1
    value = round(size / 1024 ** i, 2)
    return f"{value:g} {units[i]}"


def is_image_file(mime_type: str) -> bool:
    return (mime_type or "").startswith("image/")


def file_icon(mime_type: str) -> str:
    mime_type = mime_type or ""
    if mime_type.startswith("image/"):
        return "🖼️"
    if "pdf" in mime_type:
        return "📄"
    if "excel" in mime_type or "sheet" in mime_type:
        return "📊"
    if "doc" in mime_type:
        return "📝"
    return "📎"
