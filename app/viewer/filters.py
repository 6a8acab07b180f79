from __future__ import annotations

import math
from typing import Any, Dict, Mapping, Optional

from app.config import DEFAULT_LIMIT, DEFAULT_OFFSET
from app.models import QueryParams
from app.upstream import stringify_param

TEXT_FIELDS = ("tag", "tag_prefix")
NUMBER_FIELDS = ("timestamp_from", "timestamp_to", "limit", "offset")
FLAG_FIELDS = ("headers", "spam_report")
_FLAG_WORDS = {"1", "true", "yes", "on"}


def _clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_number(value: Any) -> Optional[int | float]:
    """Parse a form number; empty, zero and unparseable input give ``None``."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if not number or math.isnan(number) or math.isinf(number):
        return None
    if isinstance(number, float) and number.is_integer():
        return int(number)
    return number


def _flag(value: Any) -> Optional[bool]:
    if isinstance(value, str):
        return True if value.strip().lower() in _FLAG_WORDS else None
    return True if value else None


def apply_filters(raw: Mapping[str, Any]) -> QueryParams:
    return QueryParams(
        tag=_clean_text(raw.get("tag")),
        tag_prefix=_clean_text(raw.get("tag_prefix")),
        timestamp_from=parse_number(raw.get("timestamp_from")),
        timestamp_to=parse_number(raw.get("timestamp_to")),
        limit=parse_number(raw.get("limit")) or DEFAULT_LIMIT,
        offset=parse_number(raw.get("offset")) or DEFAULT_OFFSET,
        headers=_flag(raw.get("headers")),
        spam_report=_flag(raw.get("spam_report")),
    )


def default_params() -> QueryParams:
    return QueryParams(limit=DEFAULT_LIMIT, offset=DEFAULT_OFFSET)


def encode_query(params: QueryParams) -> Dict[str, str]:
    """Query-string pairs for the proxy; falsy fields are left out."""
    query: Dict[str, str] = {}
    for name in TEXT_FIELDS + NUMBER_FIELDS:
        value = getattr(params, name)
        if value:
            query[name] = stringify_param(value)
    for name in FLAG_FIELDS:
        if getattr(params, name):
            query[name] = "true"
    return query


__all__ = ["apply_filters", "default_params", "encode_query", "parse_number"]
