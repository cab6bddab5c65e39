"""Checks run on an uploaded task document before it is persisted.

Stages run in order; the first one to raise short-circuits the rest.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from astrotasks.errors import FileSizeError, FileTypeError

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 5 * 1024 * 1024

ALLOWED_CONTENT_TYPES = frozenset({
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "image/jpeg",
    "image/png",
    "text/plain",
})


@dataclass(frozen=True)
class UploadCandidate:
    """An uploaded file as received from the multipart body."""

    content: bytes
    content_type: Optional[str] = None
    filename: Optional[str] = None
    max_bytes: int = MAX_UPLOAD_BYTES

    @property
    def size(self) -> int:
        return len(self.content)


UploadStage = Callable[[UploadCandidate], UploadCandidate]


def check_content_type(candidate: UploadCandidate) -> UploadCandidate:
    # Parameters such as "; charset=utf-8" do not affect the allow-list.
    mime = (candidate.content_type or "").split(";", 1)[0].strip().lower()
    if mime not in ALLOWED_CONTENT_TYPES:
        raise FileTypeError("Invalid file type. Allowed: PDF, DOC, DOCX, JPG, JPEG, PNG, TXT")
    return candidate


def check_size(candidate: UploadCandidate) -> UploadCandidate:
    if candidate.size > candidate.max_bytes:
        limit_mib = candidate.max_bytes / (1024 * 1024)
        raise FileSizeError(f"File too large. Maximum size is {limit_mib:g} MB")
    return candidate


UPLOAD_STAGES: tuple[UploadStage, ...] = (check_content_type, check_size)


def run_upload_stages(
    candidate: UploadCandidate,
    stages: Iterable[UploadStage] = UPLOAD_STAGES,
) -> UploadCandidate:
    for stage in stages:
        candidate = stage(candidate)
    logger.debug(f"Accepted upload {candidate.filename!r} ({candidate.size} bytes)")
    return candidate
