from .schemas import (
    Attachment,
    FailureEnvelope,
    InboxResult,
    Message,
    MetaResponse,
    QueryParams,
)

__all__ = [
    "Attachment",
    "FailureEnvelope",
    "InboxResult",
    "Message",
    "MetaResponse",
    "QueryParams",
]
