"""
Document File Storage

Local-disk storage for uploaded supporting documents. Blocking file I/O runs
in a worker thread so uploads don't stall the event loop.

Stored names are ``<sanitized stem>-<epoch millis>-<random><ext>``, so two
uploads of the same file never collide and the original name can't escape
the upload directory.
"""

import asyncio
import logging
import re
import secrets
import time
from pathlib import Path, PurePath

from app.core.config import settings

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES: frozenset[str] = frozenset(
    {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "text/plain",
        "text/csv",
        "image/jpeg",
        "image/jpg",
        "image/png",
    }
)

_UNSAFE_STEM = re.compile(r"[^a-zA-Z0-9]")
_UNSAFE_EXT = re.compile(r"[^a-zA-Z0-9.]")


def is_allowed_mime_type(content_type: str | None) -> bool:
    if not content_type:
        return False
    return content_type.split(";")[0].strip().lower() in ALLOWED_MIME_TYPES


def build_stored_name(original_name: str) -> str:
    """
    Build a unique, filesystem-safe name for an upload.

    Example: "Birth Cert (1).pdf" -> "Birth_Cert__1_-1760000000000-123456789.pdf"
    """
    name = PurePath(original_name.replace("\\", "/")).name
    path = PurePath(name)
    stem = _UNSAFE_STEM.sub("_", path.stem) or "document"
    ext = _UNSAFE_EXT.sub("", path.suffix)
    unique_suffix = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}"
    return f"{stem}-{unique_suffix}{ext}"


def _upload_root() -> Path:
    return Path(settings.upload_dir)


def _write(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)


async def save_file(original_name: str, content: bytes) -> tuple[str, str]:
    """
    Write an upload to disk.

    Returns:
        (stored_name, file_path) where file_path is what gets persisted
    """
    stored_name = build_stored_name(original_name)
    path = _upload_root() / stored_name
    await asyncio.to_thread(_write, path, content)
    logger.info(f"Stored upload as {stored_name} ({len(content)} bytes)")
    return stored_name, str(path)


def resolve_path(file_path: str) -> Path:
    return Path(file_path)


async def file_exists(file_path: str) -> bool:
    return await asyncio.to_thread(resolve_path(file_path).is_file)


async def delete_file(file_path: str) -> bool:
    """
    Remove a stored file.

    Returns:
        False if the file was already gone
    """
    path = resolve_path(file_path)
    try:
        await asyncio.to_thread(path.unlink)
    except FileNotFoundError:
        logger.warning(f"Stored file already missing: {path.name}")
        return False
    return True
