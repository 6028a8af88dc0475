"""
Image upload storage.

Uploads are written to `UPLOAD_DIR` under a random name; only that name is
persisted with the row.
"""

from __future__ import annotations

import logging
import uuid
from pathlib import Path

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from . import config
from .errors import AppError, ErrorKind, ValidationFailed

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}

logger = logging.getLogger(__name__)


class UploadTooLarge(AppError):
    kind = ErrorKind.VALIDATION
    default_status = 413

    def __init__(self, max_bytes: int) -> None:
        super().__init__(f"File too large. Max is {max_bytes} bytes.")


def has_upload(file: UploadFile | None) -> bool:
    return file is not None and bool(file.filename)


def validate_image(file: UploadFile) -> str:
    """
    Return the normalized extension of an acceptable image upload.
    """
    ext = Path(file.filename or "").suffix.lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise ValidationFailed.single("file", f"Unsupported file type '{ext}'")
    return ext


async def read_upload_bytes(file: UploadFile, max_bytes: int) -> bytes:
    chunk_size = 1024 * 1024  # 1 MiB
    buf = bytearray()

    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise UploadTooLarge(max_bytes)

    return bytes(buf)


def _write_file(target_dir: Path, filename: str, data: bytes) -> None:
    target_dir.mkdir(parents=True, exist_ok=True)
    (target_dir / filename).write_bytes(data)


async def save_image(file: UploadFile) -> str:
    """
    Store an uploaded image and return the generated filename.
    """
    ext = validate_image(file)
    data = await read_upload_bytes(file, max_bytes=config.max_upload_bytes())

    filename = f"{uuid.uuid4().hex}{ext}"
    await run_in_threadpool(_write_file, Path(config.upload_dir()), filename, data)

    logger.info("upload_saved filename=%s size_bytes=%s", filename, len(data))
    return filename


async def discard_image(filename: str) -> None:
    """
    Remove a stored image whose row was never written.
    """
    path = Path(config.upload_dir()) / filename
    await run_in_threadpool(path.unlink, missing_ok=True)
    logger.info("upload_discarded filename=%s", filename)
