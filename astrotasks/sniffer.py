"""Magic-number sniffing for stored task documents."""

from __future__ import annotations

PDF_MAGIC = b"%PDF"
PNG_MAGIC = b"\x89PNG"
JPEG_MAGIC = b"\xff\xd8\xff"

# Only this many leading bytes are inspected for the plain-text check.
TEXT_PROBE_LENGTH = 100


def sniff_content_type(data: bytes) -> str:
    """Best-effort MIME type for ``data``. Never raises, never rejects."""
    if len(data) > 4 and data.startswith(PDF_MAGIC):
        return "application/pdf"
    if data.startswith(PNG_MAGIC):
        return "image/png"
    if data.startswith(JPEG_MAGIC):
        return "image/jpeg"
    if all(b <= 0x7F for b in data[:TEXT_PROBE_LENGTH]):
        return "text/plain"
    return "application/octet-stream"
