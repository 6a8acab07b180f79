from __future__ import annotations

from fastapi import APIRouter

from . import api, web

routers: list[APIRouter] = [
    api.router,
    web.router,
]

__all__ = ["routers"]
