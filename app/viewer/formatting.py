from __future__ import annotations

import re
from datetime import datetime
from typing import Any

from app.config import PREVIEW_LENGTH, TIMESTAMP_MS_THRESHOLD
from app.models import Message

_WHITESPACE = re.compile(r"\s+")


def to_milliseconds(ts: Any) -> float | None:
    """Normalise a seconds-or-milliseconds timestamp to milliseconds.

    Values below ``TIMESTAMP_MS_THRESHOLD`` (10**12) are taken as seconds.
    Falsy and unparseable values give ``None``.
    """
    if not ts:
        return None
    try:
        value = float(ts)
    except (TypeError, ValueError):
        return None
    if value != value:  # NaN
        return None
    if value < TIMESTAMP_MS_THRESHOLD:
        value *= 1000
    return value


def format_timestamp(ts: Any) -> str:
    millis = to_milliseconds(ts)
    if millis is None:
        return ""
    try:
        return datetime.fromtimestamp(millis / 1000).strftime("%Y-%m-%d %H:%M:%S")
    except (OverflowError, OSError, ValueError):
        return ""


def short_tag(tag: str | None) -> str:
    """Drop the leading namespace segment of a dotted tag."""
    if not tag:
        return ""
    return ".".join(tag.split(".")[1:]) or tag


def preview(message: Message, length: int = PREVIEW_LENGTH) -> str:
    source = message.subject or message.text or ""
    return _WHITESPACE.sub(" ", str(source))[:length]


def has_spam_score(message: Message) -> bool:
    return message.spam_score is not None


def format_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


__all__ = [
    "format_number",
    "format_timestamp",
    "has_spam_score",
    "preview",
    "short_tag",
    "to_milliseconds",
]
