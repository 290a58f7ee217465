"""
Upload CLI tests.
main() runs against an AsyncMock document store and a FunctionsClient
whose outbound calls go through httpx.MockTransport.
"""
import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from shared.clients.functions import FunctionsClient
from shared.clients.storage import DocumentStore
from shared.upload import cli
from shared.upload.validation import UNSUPPORTED_TYPE_MESSAGE


@pytest.fixture
def store():
    return AsyncMock(spec=DocumentStore)


@pytest.fixture
def seen():
    return []


@pytest.fixture
def transcribe_response():
    return httpx.Response(200, json={"success": True, "transcript": "hello", "fullLength": 5})


@pytest.fixture
def patched(monkeypatch, make_settings, store, seen, transcribe_response):
    """Point the CLI at test settings, the mock store and a mock-transport functions client."""
    def handler(request):
        seen.append(request)
        return transcribe_response

    def functions_client(functions_url, api_key, timeout=30.0):
        return FunctionsClient(functions_url, api_key, timeout=timeout, transport=httpx.MockTransport(handler))

    documents = MagicMock()
    documents.from_credentials.return_value = store
    monkeypatch.setattr(cli, "get_settings", lambda: make_settings())
    monkeypatch.setattr(cli, "DocumentStore", documents)
    monkeypatch.setattr(cli, "FunctionsClient", functions_client)
    return documents


def write(tmp_path: Path, name: str, data: bytes) -> str:
    path = tmp_path / name
    path.write_bytes(data)
    return str(path)


@pytest.mark.unit
class TestParser:
    def test_arguments(self):
        args = cli.build_parser().parse_args(["notes.txt", "--user-id", "user-1", "--mime-type", "text/plain"])
        assert args.file == Path("notes.txt")
        assert args.user_id == "user-1"
        assert args.mime_type == "text/plain"
        assert args.verbose is False

    def test_user_id_is_required(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.build_parser().parse_args(["notes.txt"])
        assert exc_info.value.code == 2
        assert "--user-id" in capsys.readouterr().err


@pytest.mark.unit
class TestMain:
    def test_text_document(self, patched, store, seen, tmp_path, capsys):
        path = write(tmp_path, "notes.txt", b"hello world")

        assert cli.main([path, "--user-id", "user-1"]) == 0

        out = capsys.readouterr().out
        assert "Uploading notes.txt (11 B)..." in out
        assert "* File added to knowledge base: You can now ask questions based on this document." in out
        assert "Stored at user-1/" in out
        patched.from_credentials.assert_called_once_with(
            "https://project.supabase.co", "anon-key", bucket="documents", table="documents"
        )
        store.upload.assert_awaited_once()
        assert store.insert_document.await_args.args[0]["content"] == "hello world"
        assert seen == []

    def test_media_requests_transcription(self, patched, store, seen, tmp_path, capsys):
        path = write(tmp_path, "talk.mp3", b"ID3")

        assert cli.main([path, "--user-id", "user-1"]) == 0

        assert "* Media transcribed successfully:" in capsys.readouterr().out
        assert len(seen) == 1
        assert str(seen[0].url) == "https://project.supabase.co/functions/v1/transcribe-media"
        assert seen[0].headers["authorization"] == "Bearer anon-key"
        body = json.loads(seen[0].content)
        assert body["fileType"] == "audio/mpeg"
        assert body["fileName"] == "talk.mp3"
        assert body["userId"] == "user-1"
        assert body["filePath"].endswith("-talk.mp3")

    @pytest.mark.parametrize(
        "transcribe_response",
        [httpx.Response(500, json={"error": "AI gateway error"}), httpx.Response(200, json={"success": False})],
    )
    def test_failed_transcription_still_succeeds(self, patched, store, tmp_path, capsys):
        path = write(tmp_path, "talk.mp3", b"ID3")

        assert cli.main([path, "--user-id", "user-1"]) == 0

        assert "! Media uploaded with warning:" in capsys.readouterr().out
        store.update_content.assert_awaited_once()
        assert store.update_content.await_args.args[2] == "[Transcription failed for: talk.mp3]"

    def test_rejected_file(self, patched, store, tmp_path, capsys):
        path = write(tmp_path, "archive.zip", b"PK")

        assert cli.main([path, "--user-id", "user-1"]) == 2

        assert capsys.readouterr().out.strip() == f"! {UNSUPPORTED_TYPE_MESSAGE}"
        store.upload.assert_not_awaited()

    def test_mime_type_override(self, patched, store, tmp_path, capsys):
        path = write(tmp_path, "notes.data", b"plain text")

        assert cli.main([path, "--user-id", "user-1", "--mime-type", "text/plain"]) == 0

        assert store.upload.await_args.kwargs["content_type"] == "text/plain"

    def test_failed_upload(self, patched, store, tmp_path, capsys):
        store.upload.side_effect = RuntimeError("bucket not found")
        path = write(tmp_path, "notes.txt", b"hello")

        assert cli.main([path, "--user-id", "user-1"]) == 1

        out = capsys.readouterr().out
        assert "! Upload failed: Failed to upload document. Please try again." in out
        assert "Stored at" not in out

    def test_missing_file(self, patched, tmp_path, capsys):
        missing = tmp_path / "nope.txt"

        assert cli.main([str(missing), "--user-id", "user-1"]) == 2

        assert capsys.readouterr().out.startswith(f"! Cannot read {missing}:")
        patched.from_credentials.assert_not_called()

    def test_missing_credentials(self, monkeypatch, make_settings, tmp_path, capsys):
        monkeypatch.setattr(cli, "get_settings", lambda: make_settings(SUPABASE_URL="", SUPABASE_ANON_KEY=""))
        path = write(tmp_path, "notes.txt", b"hello")

        assert cli.main([path, "--user-id", "user-1"]) == 2

        assert capsys.readouterr().out.strip() == "! Supabase credentials not configured"
