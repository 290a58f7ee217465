"""
Media Transcription.

Downloads an uploaded audio/video blob, sends it to the AI gateway as a
single multimodal completion and writes the transcript back onto the
document row. Any failure is fatal for the request; a transcript that
cannot be saved is discarded.
"""

import base64
import logging
from dataclasses import dataclass

from shared.clients.ai_gateway import AIGatewayClient, completion_text
from shared.clients.storage import DocumentStore
from shared.errors import APIException, ErrorCode, UpstreamError

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 500

# The gateway's video decoder does not accept QuickTime containers.
MIME_OVERRIDES = {
    "video/quicktime": "video/mp4",
}

TRANSCRIPTION_PROMPT = """You are a professional transcription service. Transcribe the following audio/video file accurately and completely.

INSTRUCTIONS:
1. Transcribe ALL spoken content word-for-word
2. Include timestamps at the beginning of each major section or paragraph (format: [MM:SS])
3. If multiple speakers are present, label them as Speaker 1, Speaker 2, etc.
4. Note any significant non-speech audio in brackets, e.g., [music], [applause], [pause]
5. Preserve the natural flow and paragraphing of the speech
6. If there are any unclear words, mark them as [unclear]
7. For non-English content, provide transcription in the original language

OUTPUT FORMAT:
Start with a brief summary (1-2 sentences), then provide the full transcript.

---
SUMMARY:
[Brief summary of the content]

---
TRANSCRIPT:
[Full transcription with timestamps]
"""


@dataclass(frozen=True)
class TranscriptionResult:
    transcript: str

    @property
    def full_length(self) -> int:
        return len(self.transcript)

    @property
    def preview(self) -> str:
        if len(self.transcript) > PREVIEW_LENGTH:
            return self.transcript[:PREVIEW_LENGTH] + "..."
        return self.transcript


def gateway_mime_type(file_type: str) -> str:
    return MIME_OVERRIDES.get(file_type, file_type)


def build_transcription_messages(data: bytes, file_type: str) -> list[dict]:
    encoded = base64.b64encode(data).decode("ascii")
    return [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": TRANSCRIPTION_PROMPT},
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:{gateway_mime_type(file_type)};base64,{encoded}"},
                },
            ],
        }
    ]


class MediaTranscriber:
    """download -> encode -> transcribe -> persist."""

    def __init__(self, store: DocumentStore, gateway: AIGatewayClient, model: str, max_tokens: int = 8000):
        self.store = store
        self.gateway = gateway
        self.model = model
        self.max_tokens = max_tokens

    async def transcribe(self, file_path: str, file_type: str, file_name: str, user_id: str) -> TranscriptionResult:
        logger.info("Starting transcription for: %s (%s)", file_name, file_type, extra={"file_path": file_path})

        data = await self.store.download(file_path)
        messages = build_transcription_messages(data, file_type)

        logger.info("Sending to AI gateway for transcription (%s)...", gateway_mime_type(file_type))
        try:
            result = await self.gateway.complete(messages, model=self.model, max_tokens=self.max_tokens)
        except UpstreamError as e:
            raise APIException(
                ErrorCode.TRANSCRIPTION_FAILED,
                f"Transcription failed: {e.upstream_status}",
                details={"upstream_status": e.upstream_status},
            ) from e
        finally:
            await self.gateway.close()

        transcript = completion_text(result)
        if not transcript:
            raise APIException(ErrorCode.TRANSCRIPTION_FAILED, "No transcript generated")

        logger.info("Transcript generated, length: %d characters", len(transcript))

        await self.store.update_content(file_path, user_id, transcript)
        logger.info("Transcript saved successfully", extra={"file_path": file_path, "user_id": user_id})

        return TranscriptionResult(transcript=transcript)
