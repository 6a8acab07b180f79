from __future__ import annotations

import base64
import binascii
import os
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path

from app.config import logger
from app.models import Attachment

DEFAULT_CONTENT_TYPE = "application/octet-stream"
DEFAULT_FILENAME = "attachment"

_NON_BASE64 = re.compile(r"[^A-Za-z0-9+/=_-]")


@dataclass(slots=True)
class SavedAttachment:
    path: Path
    content_type: str
    size: int


def decode_attachment_data(data: str | None) -> bytes:
    """Decode an inline base64 payload to raw bytes.

    Whitespace and missing padding are tolerated; URL-safe alphabets too.
    """
    if not data:
        return b""
    cleaned = _NON_BASE64.sub("", data).rstrip("=")
    cleaned += "=" * (-len(cleaned) % 4)
    try:
        return base64.b64decode(cleaned.replace("-", "+").replace("_", "/"), validate=True)
    except binascii.Error as exc:
        raise ValueError(f"Invalid attachment data: {exc}") from exc


def download_name(attachment: Attachment) -> str:
    name = Path(attachment.filename or "").name.strip()
    return name or DEFAULT_FILENAME


def _unique_path(directory: Path, name: str) -> Path:
    target = directory / name
    stem, suffix = target.stem, target.suffix
    counter = 1
    while target.exists():
        target = directory / f"{stem} ({counter}){suffix}"
        counter += 1
    return target


def save_attachment(attachment: Attachment, directory: Path) -> SavedAttachment:
    """Write the decoded attachment into ``directory`` under its own filename."""
    payload = decode_attachment_data(attachment.data)
    content_type = attachment.content_type or DEFAULT_CONTENT_TYPE
    directory.mkdir(parents=True, exist_ok=True)

    fd, temp_name = tempfile.mkstemp(prefix=".download-", dir=directory)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(payload)
        target = _unique_path(directory, download_name(attachment))
        os.replace(temp_name, target)
    finally:
        if os.path.exists(temp_name):
            os.unlink(temp_name)

    logger.info("Saved attachment %s (%s, %s bytes)", target, content_type, len(payload))
    return SavedAttachment(path=target, content_type=content_type, size=len(payload))


__all__ = [
    "DEFAULT_CONTENT_TYPE",
    "DEFAULT_FILENAME",
    "SavedAttachment",
    "decode_attachment_data",
    "download_name",
    "save_attachment",
]
