from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from app.config import DEFAULT_LIMIT, DEFAULT_OFFSET

Number = Union[int, float]


class Attachment(BaseModel):
    model_config = ConfigDict(extra="allow")

    filename: Optional[str] = None
    content_type: Optional[str] = None
    data: Optional[str] = None


class Message(BaseModel):
    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "a1b2c3",
                "subject": "Welcome aboard",
                "from": "noreply@example.com",
                "to": "acme.signup-42@inbox.testmail.app",
                "timestamp": 1700000000000,
                "tag": "acme.signup-42",
                "text": "Confirm at https://example.com/confirm",
                "html": "<a href=\"https://example.com/confirm\">Confirm</a>",
            }
        },
    )

    id: Optional[Union[str, int]] = None
    subject: Optional[str] = None
    from_: Optional[str] = Field(default=None, alias="from")
    to: Optional[str] = None
    timestamp: Optional[Number] = None
    tag: Optional[str] = None
    text: Optional[str] = None
    html: Optional[str] = None
    headers: Optional[Union[Dict[str, Any], List[Any]]] = None
    spam_score: Optional[Number] = None
    spam_report: Optional[str] = None
    attachments: Optional[List[Attachment]] = None


class InboxResult(BaseModel):
    """Upstream response envelope; metadata fields pass through untouched."""

    model_config = ConfigDict(extra="allow")

    emails: Optional[List[Message]] = None
    result: Optional[str] = None
    message: Optional[str] = None


class QueryParams(BaseModel):
    tag: Optional[str] = None
    tag_prefix: Optional[str] = None
    timestamp_from: Optional[Number] = None
    timestamp_to: Optional[Number] = None
    limit: Number = DEFAULT_LIMIT
    offset: Number = DEFAULT_OFFSET
    headers: Optional[bool] = None
    spam_report: Optional[bool] = None


class MetaResponse(BaseModel):
    namespace: str


class FailureEnvelope(BaseModel):
    result: str = "fail"
    message: str = "proxy_error"
