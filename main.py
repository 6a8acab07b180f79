"""Testmail Viewer - FastAPI入口

上游 testmail.app 查询代理（API Key 只保存在服务端）及查看器页面。
"""

from __future__ import annotations

import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from app.config import (
    HOST,
    PORT,
    TESTMAIL_API_URL,
    TESTMAIL_APIKEY,
    TESTMAIL_NAMESPACE,
    UPSTREAM_TIMEOUT,
    ConfigurationError,
    logger,
    require_secrets,
)
from app.routes import routers
from app.upstream import UpstreamClient


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info("Starting Testmail Viewer...")
    require_secrets(TESTMAIL_APIKEY, TESTMAIL_NAMESPACE)
    app.state.upstream = UpstreamClient(
        TESTMAIL_APIKEY,
        TESTMAIL_NAMESPACE,
        base_url=TESTMAIL_API_URL,
        timeout=UPSTREAM_TIMEOUT,
    )
    logger.info("Proxying namespace %s via %s", TESTMAIL_NAMESPACE, TESTMAIL_API_URL)
    try:
        yield
    finally:
        app.state.upstream = None
        logger.info("Testmail Viewer shutdown complete.")


app = FastAPI(
    title="Testmail Viewer",
    description="testmail.app 收件箱查询代理",
    version="1.0.0",
    lifespan=lifespan,
)

for router in routers:
    app.include_router(router)


@app.middleware("http")
async def add_api_cache_headers(request, call_next):
    response = await call_next(request)
    if request.url.path.startswith("/api/"):
        # 收件箱数据实时变化，禁止缓存
        response.headers["Cache-Control"] = "no-store"
    return response


if __name__ == "__main__":
    import uvicorn

    try:
        require_secrets(TESTMAIL_APIKEY, TESTMAIL_NAMESPACE)
    except ConfigurationError as exc:
        logger.critical("[CONFIG] %s", exc)
        logger.critical("Example: TESTMAIL_APIKEY=sk_xxx TESTMAIL_NAMESPACE=acme python main.py")
        sys.exit(1)

    logger.info("Testmail Viewer listening on http://localhost:%s", PORT)
    uvicorn.run(app, host=HOST, port=PORT, log_level="info", access_log=True)
