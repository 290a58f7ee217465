"""
Knowledge-base upload workflow: file validation and the upload session.
"""

from .session import (
    ALLOWED_TRANSITIONS,
    DocumentRecord,
    InvalidTransitionError,
    SelectedFile,
    Toast,
    UploadSession,
    UploadStatus,
)
from .validation import (
    ALLOWED_TYPES,
    MAX_DOCUMENT_FILE_SIZE,
    MAX_MEDIA_FILE_SIZE,
    MEDIA_TYPES,
    format_file_size,
    is_media_type,
    validate_file,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "ALLOWED_TYPES",
    "DocumentRecord",
    "InvalidTransitionError",
    "MAX_DOCUMENT_FILE_SIZE",
    "MAX_MEDIA_FILE_SIZE",
    "MEDIA_TYPES",
    "SelectedFile",
    "Toast",
    "UploadSession",
    "UploadStatus",
    "format_file_size",
    "is_media_type",
    "validate_file",
]
