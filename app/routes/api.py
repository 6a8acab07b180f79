from __future__ import annotations

import httpx
from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from app.config import logger
from app.models import FailureEnvelope, MetaResponse
from app.upstream import UpstreamClient, get_upstream_client

router = APIRouter(prefix="/api", tags=["inbox"])


def failure_response(message: str | None) -> JSONResponse:
    envelope = FailureEnvelope(message=message or "proxy_error")
    return JSONResponse(envelope.model_dump(), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.get("/meta", response_model=MetaResponse)
async def get_meta(upstream: UpstreamClient = Depends(get_upstream_client)) -> MetaResponse:
    return MetaResponse(namespace=upstream.namespace)


@router.get("/inbox")
async def query_inbox(
    request: Request,
    upstream: UpstreamClient = Depends(get_upstream_client),
) -> Response:
    # 重复参数以最后一个值为准
    params = dict(request.query_params)
    try:
        upstream_response = await upstream.fetch(params)
    except httpx.RequestError as exc:
        logger.error("Request error querying upstream inbox: %s", upstream.redact(str(exc)))
        return failure_response(upstream.redact(str(exc)))
    except Exception as exc:  # noqa: BLE001
        logger.error("Unexpected error querying upstream inbox: %s", upstream.redact(str(exc)))
        return failure_response(upstream.redact(str(exc)))

    if upstream_response.is_error:
        logger.warning("Upstream returned HTTP %s, relaying as-is", upstream_response.status_code)

    return Response(
        content=upstream_response.content,
        status_code=upstream_response.status_code,
        media_type="application/json",
    )


__all__ = ["router"]
