"""Error taxonomy. Each error carries the HTTP status it maps to."""

from __future__ import annotations


class AstroTasksError(Exception):
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AstroTasksError):
    status_code = 400


class MissingFieldError(ValidationError):
    def __init__(self, message: str = "All fields are required", field: str | None = None):
        super().__init__(message)
        self.field = field


class InvalidFormatError(ValidationError):
    pass


class NotFoundError(AstroTasksError):
    status_code = 404


class ConflictError(AstroTasksError):
    status_code = 409


class UploadError(AstroTasksError):
    status_code = 400


class FileTypeError(UploadError):
    pass


class FileSizeError(UploadError):
    pass


class StorageError(AstroTasksError):
    """Query or connection failure. ``message`` is safe to show; ``detail`` is not."""

    status_code = 500

    def __init__(self, message: str = "Internal server error", detail: str | None = None):
        super().__init__(message)
        self.detail = detail


class StartupError(AstroTasksError):
    pass
