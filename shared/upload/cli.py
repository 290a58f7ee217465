#!/usr/bin/env python3
"""Upload a file into the FS RAG knowledge base from the command line.

Runs the same workflow as the web upload dialog: validate, store, record the
document row and, for audio/video, request transcription. Credentials come
from SUPABASE_URL / SUPABASE_ANON_KEY (see shared.config).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from shared.clients.functions import FunctionsClient
from shared.clients.storage import DocumentStore
from shared.config import Settings, get_settings
from shared.errors import ConfigurationError

from .session import SelectedFile, Toast, UploadSession
from .validation import format_file_size

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Upload a document or media file to the knowledge base")
    parser.add_argument("file", type=Path, help="File to upload")
    parser.add_argument("--user-id", required=True, help="Owner of the uploaded document")
    parser.add_argument("--mime-type", help="Override the MIME type guessed from the extension")
    parser.add_argument("--verbose", action="store_true")
    return parser


def print_toast(toast: Toast) -> None:
    prefix = "!" if toast.is_warning else "*"
    print(f"{prefix} {toast.title}: {toast.description}")


async def run_upload(settings: Settings, file: SelectedFile, user_id: str) -> int:
    store = DocumentStore.from_credentials(
        settings.SUPABASE_URL,
        settings.SUPABASE_ANON_KEY,
        bucket=settings.STORAGE_BUCKET,
        table=settings.DOCUMENTS_TABLE,
    )
    functions = FunctionsClient(
        settings.functions_url,
        settings.SUPABASE_ANON_KEY,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
    session = UploadSession(store, functions, user_id, notify=print_toast)
    try:
        if not session.select_file(file):
            print(f"! {session.error_message}")
            return 2
        print(f"Uploading {file.name} ({format_file_size(file.size)})...")
        ok = await session.upload()
    finally:
        await functions.close()

    if not ok:
        return 1
    print(f"Stored at {session.file_path}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        file = SelectedFile.from_path(args.file, mime_type=args.mime_type)
    except OSError as e:
        print(f"! Cannot read {args.file}: {e}")
        return 2

    try:
        return asyncio.run(run_upload(get_settings(), file, args.user_id))
    except ConfigurationError as e:
        print(f"! {e.error.message}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
