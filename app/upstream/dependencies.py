from __future__ import annotations

from fastapi import HTTPException, Request, status

from .client import UpstreamClient


async def get_upstream_client(request: Request) -> UpstreamClient:
    client = getattr(request.app.state, "upstream", None)
    if client is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Upstream client not configured")
    return client


__all__ = ["get_upstream_client"]
