"""Local filesystem storage for uploaded media.

Files are written into the context's uploads directory under a random
name that keeps the original extension. The stored name is what gets
saved in the entity's ``file``/``image`` column.
"""

import logging
from pathlib import Path, PurePath
from uuid import uuid4

from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

logger = logging.getLogger(__name__)


def stored_name_for(filename: str | None) -> str:
    """Random file name preserving a (lowercased) extension."""
    suffix = PurePath(filename or "").suffix.lower()
    if not suffix[1:].isalnum():
        suffix = ""
    return f"{uuid4().hex}{suffix}"


async def save_upload(uploads_dir: Path, upload: UploadFile) -> str | None:
    """Persist an uploaded file.

    Args:
        uploads_dir: Directory uploads are written to (created if missing)
        upload: The multipart file part

    Returns:
        The stored file name, or None when the form had no file selected
    """
    if not upload.filename:
        return None

    data = await upload.read()
    name = stored_name_for(upload.filename)

    def _write() -> None:
        uploads_dir.mkdir(parents=True, exist_ok=True)
        (uploads_dir / name).write_bytes(data)

    await run_in_threadpool(_write)
    logger.info("Stored upload '%s' as %s (%d bytes)", upload.filename, name, len(data))
    return name


async def discard_uploads(uploads_dir: Path, names: list[str]) -> None:
    """Remove stored files that no saved record refers to."""
    if not names:
        return

    def _remove() -> None:
        for name in names:
            (uploads_dir / name).unlink(missing_ok=True)

    await run_in_threadpool(_remove)
    logger.info("Discarded %d upload(s) of a failed submission", len(names))
