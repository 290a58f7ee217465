"""
Upload workflow for the knowledge base.

``UploadSession`` mirrors the upload dialog of the web client without any UI:
it validates a selected file, stores it, records the document row and, for
audio/video, asks the ``transcribe-media`` function to fill in the content.

Status moves through::

    idle -> uploading -> (transcribing) -> success | error

Transitions outside ``ALLOWED_TRANSITIONS`` raise ``InvalidTransitionError``;
in particular an in-flight upload cannot be reset or cancelled.
"""

import logging
import mimetypes
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from pydantic import BaseModel

from shared.clients.functions import FunctionsClient
from shared.clients.storage import DocumentStore

from .validation import (
    EXTENSION_TYPES,
    is_media_type,
    placeholder_content,
    transcription_failed_content,
    validate_file,
)

logger = logging.getLogger(__name__)

TRANSCRIBE_FUNCTION = "transcribe-media"
UPLOAD_FAILED_MESSAGE = "Upload failed. Please try again."


class UploadStatus(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    TRANSCRIBING = "transcribing"
    SUCCESS = "success"
    ERROR = "error"


ALLOWED_TRANSITIONS: dict[UploadStatus, frozenset[UploadStatus]] = {
    UploadStatus.IDLE: frozenset({UploadStatus.IDLE, UploadStatus.UPLOADING, UploadStatus.ERROR}),
    UploadStatus.UPLOADING: frozenset({UploadStatus.TRANSCRIBING, UploadStatus.SUCCESS, UploadStatus.ERROR}),
    UploadStatus.TRANSCRIBING: frozenset({UploadStatus.SUCCESS, UploadStatus.ERROR}),
    UploadStatus.SUCCESS: frozenset({UploadStatus.IDLE, UploadStatus.ERROR}),
    UploadStatus.ERROR: frozenset({UploadStatus.IDLE, UploadStatus.UPLOADING, UploadStatus.ERROR}),
}

IN_FLIGHT = frozenset({UploadStatus.UPLOADING, UploadStatus.TRANSCRIBING})


class InvalidTransitionError(RuntimeError):
    def __init__(self, current: UploadStatus, target: UploadStatus):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move upload from {current.value} to {target.value}")


@dataclass(frozen=True)
class Toast:
    title: str
    description: str
    variant: str = "default"

    @property
    def is_warning(self) -> bool:
        return self.variant == "destructive"


@dataclass
class SelectedFile:
    name: str
    mime_type: str
    data: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_path(cls, path: str | Path, mime_type: Optional[str] = None) -> "SelectedFile":
        path = Path(path)
        if mime_type is None:
            mime_type = EXTENSION_TYPES.get(path.suffix.lower()) or mimetypes.guess_type(path.name)[0] or ""
        return cls(name=path.name, mime_type=mime_type, data=path.read_bytes())


class DocumentRecord(BaseModel):
    """Row inserted into the documents table."""

    user_id: str
    name: str
    file_path: str
    file_type: str
    file_size: int
    content: Optional[str] = None


def extract_content(file: SelectedFile) -> str:
    """Text files are stored verbatim; everything else gets a placeholder."""
    if file.mime_type == "text/plain":
        return file.data.decode("utf-8", errors="replace")
    return placeholder_content(file.name, file.mime_type)


class UploadSession:
    """One upload dialog: a selected file, its progress and the toasts it raised."""

    def __init__(
        self,
        store: DocumentStore,
        functions: FunctionsClient,
        user_id: Optional[str],
        notify: Optional[Callable[[Toast], None]] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.functions = functions
        self.user_id = user_id
        self.notify = notify
        self.clock = clock

        self.status = UploadStatus.IDLE
        self.progress = 0
        self.error_message = ""
        self.selected_file: Optional[SelectedFile] = None
        self.file_path: Optional[str] = None
        self.toasts: list[Toast] = []

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def is_busy(self) -> bool:
        return self.status in IN_FLIGHT

    def _transition(self, target: UploadStatus) -> None:
        if target not in ALLOWED_TRANSITIONS[self.status]:
            raise InvalidTransitionError(self.status, target)
        logger.debug("Upload status %s -> %s", self.status.value, target.value)
        self.status = target

    def _toast(self, title: str, description: str, variant: str = "default") -> None:
        toast = Toast(title=title, description=description, variant=variant)
        self.toasts.append(toast)
        if self.notify:
            self.notify(toast)

    def reset(self) -> None:
        """Clear the dialog; refused while an upload is in flight."""
        self._transition(UploadStatus.IDLE)
        self.selected_file = None
        self.file_path = None
        self.progress = 0
        self.error_message = ""

    close = reset

    def select_file(self, file: SelectedFile) -> bool:
        """Validate and select a file. Returns False when it was rejected."""
        if self.is_busy:
            raise InvalidTransitionError(self.status, UploadStatus.IDLE)

        error = validate_file(file.mime_type, file.size)
        if error:
            self._transition(UploadStatus.ERROR)
            self.error_message = error
            return False

        self._transition(UploadStatus.IDLE)
        self.selected_file = file
        self.error_message = ""
        return True

    # ------------------------------------------------------------------
    # Upload
    # ------------------------------------------------------------------

    async def upload(self) -> bool:
        """Run the upload. Returns True when the session ends in ``success``."""
        file = self.selected_file
        if file is None or not self.user_id:
            return False

        self._transition(UploadStatus.UPLOADING)
        self.progress = 10
        media = is_media_type(file.mime_type)

        try:
            file_path = f"{self.user_id}/{int(self.clock() * 1000)}-{file.name}"
            self.file_path = file_path
            self.progress = 30

            await self.store.upload(file_path, file.data, content_type=file.mime_type)
            self.progress = 50

            content = extract_content(file)
            self.progress = 60

            record = DocumentRecord(
                user_id=self.user_id,
                name=file.name,
                file_path=file_path,
                file_type=file.mime_type,
                file_size=file.size,
                content=content or None,
            )
            await self.store.insert_document(record.model_dump())

            if media:
                self._transition(UploadStatus.TRANSCRIBING)
                self.progress = 70
                await self._transcribe(file, file_path)
            else:
                self._toast(
                    "File added to knowledge base",
                    "You can now ask questions based on this document.",
                )

            self.progress = 100
            self._transition(UploadStatus.SUCCESS)
            return True

        except Exception as e:
            logger.error("Upload error: %s", e, exc_info=True)
            self._transition(UploadStatus.ERROR)
            self.error_message = UPLOAD_FAILED_MESSAGE
            self._toast("Upload failed", "Failed to upload document. Please try again.", variant="destructive")
            return False

    async def _request_transcription(self, file: SelectedFile, file_path: str) -> bool:
        try:
            response = await self.functions.invoke(
                TRANSCRIBE_FUNCTION,
                {
                    "filePath": file_path,
                    "fileType": file.mime_type,
                    "fileName": file.name,
                    "userId": self.user_id,
                },
            )
            result = response.json()
        except Exception as e:
            logger.error("Transcription request failed: %s", e)
            return False

        if not response.is_success or not (isinstance(result, dict) and result.get("success")):
            logger.error("Transcription failed: %s", result)
            return False
        return True

    async def _transcribe(self, file: SelectedFile, file_path: str) -> None:
        """A failed transcription keeps the upload and marks the row instead."""
        if await self._request_transcription(file, file_path):
            self._toast(
                "Media transcribed successfully",
                "You can now ask questions based on this audio/video content.",
            )
            return

        try:
            await self.store.update_content(file_path, self.user_id, transcription_failed_content(file.name))
        except Exception as e:
            logger.warning("Could not mark failed transcription on %s: %s", file_path, e)

        self._toast(
            "Media uploaded with warning",
            "File uploaded but transcription failed. You may have limited ability to query this file.",
            variant="destructive",
        )
