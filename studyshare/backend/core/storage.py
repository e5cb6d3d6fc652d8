"""
Upload Storage.

Uploaded note files and cover images live in one shared directory served
statically under the configured URL prefix. Stored names are
`<epoch millis>-<original name>`; identical names in the same millisecond
overwrite each other.
"""

import time
from pathlib import Path

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from studyshare.backend.core.config import get_uploads_dir
from studyshare.backend.core.exceptions import NotFoundError, ValidationError
from studyshare.backend.core.logging import get_logger

logger = get_logger(__name__)


def stored_name(original_name: str) -> str:
    """Name under which an upload is written."""
    # Strip any client-supplied directories
    base = Path(original_name).name
    if not base:
        raise ValidationError("Uploaded file has no name")
    return f"{int(time.time() * 1000)}-{base}"


async def save_upload(upload: UploadFile) -> str:
    """Write an uploaded file to the uploads directory and return its stored name."""
    name = stored_name(upload.filename or "")
    target = get_uploads_dir() / name

    content = await upload.read()
    await run_in_threadpool(target.write_bytes, content)

    logger.info("Upload stored", extra={"file": name, "bytes": len(content)})
    return name


def discard_uploads(names: list[str]) -> None:
    """Delete stored uploads that ended up unused."""
    uploads = get_uploads_dir()
    for name in names:
        (uploads / name).unlink(missing_ok=True)
        logger.info("Upload discarded", extra={"file": name})


def resolve_upload(name: str) -> Path:
    """
    Absolute path of a stored upload.

    Raises:
        NotFoundError: If the file is missing or the name escapes the directory
    """
    uploads = get_uploads_dir().resolve()
    path = (uploads / name).resolve()
    if path.parent != uploads or not path.is_file():
        raise NotFoundError("Note file not found")
    return path
