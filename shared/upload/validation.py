"""File type and size rules for knowledge-base uploads."""

from typing import Optional

MB = 1024 * 1024

ALLOWED_TYPES = (
    "application/pdf",
    "text/plain",
    "image/png",
    "image/jpeg",
    "image/jpg",
    "image/webp",
    # Video formats
    "video/mp4",
    "video/quicktime",  # .mov
    "video/webm",
    # Audio formats
    "audio/mpeg",  # .mp3
    "audio/wav",
    "audio/x-wav",
    "audio/mp4",  # .m4a
    "audio/x-m4a",
)

MEDIA_TYPES = (
    "video/mp4",
    "video/quicktime",
    "video/webm",
    "audio/mpeg",
    "audio/wav",
    "audio/x-wav",
    "audio/mp4",
    "audio/x-m4a",
)

MAX_MEDIA_FILE_SIZE = 50 * MB
MAX_DOCUMENT_FILE_SIZE = 10 * MB

# Extension -> MIME type, for callers that only have a filename
EXTENSION_TYPES = {
    ".pdf": "application/pdf",
    ".txt": "text/plain",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".mp4": "video/mp4",
    ".mov": "video/quicktime",
    ".webm": "video/webm",
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".m4a": "audio/mp4",
}

UNSUPPORTED_TYPE_MESSAGE = (
    "Unsupported file type. Please upload PDF, TXT, PNG, JPG, WEBP, MP4, MOV, WEBM, MP3, WAV, or M4A files."
)


def is_media_type(mime_type: str) -> bool:
    return mime_type in MEDIA_TYPES


def size_limit(mime_type: str) -> int:
    return MAX_MEDIA_FILE_SIZE if is_media_type(mime_type) else MAX_DOCUMENT_FILE_SIZE


def validate_file(mime_type: str, size: int) -> Optional[str]:
    """Return a user-facing error message, or None when the file is acceptable."""
    if mime_type not in ALLOWED_TYPES:
        return UNSUPPORTED_TYPE_MESSAGE
    limit = size_limit(mime_type)
    if size > limit:
        return (
            f"File too large. Maximum size is {limit // MB}MB. "
            f"Your file is {size / MB:.1f}MB."
        )
    return None


def format_file_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < MB:
        return f"{size / 1024:.1f} KB"
    return f"{size / MB:.1f} MB"


def placeholder_content(name: str, mime_type: str) -> str:
    """Content stored for files whose text is not extracted client-side."""
    if mime_type == "application/pdf":
        return f"[PDF Document: {name}]"
    if mime_type.startswith("image/"):
        return f"[Image: {name}]"
    if is_media_type(mime_type):
        return f"[Processing: {name}]"
    return ""


def transcription_failed_content(name: str) -> str:
    return f"[Transcription failed for: {name}]"
