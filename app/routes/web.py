from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import FileResponse, HTMLResponse

from app.config import PAGE_FILE, STATIC_DIR

router = APIRouter(tags=["web"])

PLACEHOLDER_PAGE = """<!doctype html>
<html lang="en">
<head><meta charset="utf-8" /><title>Testmail Viewer</title></head>
<body>
  <h1>Testmail Viewer</h1>
  <p>No data yet. Start the viewer with <code>python -m app.viewer</code> to render the inbox.</p>
</body>
</html>
"""


@router.get("/", response_model=None)
async def root() -> FileResponse | HTMLResponse:
    page = STATIC_DIR / PAGE_FILE
    if not page.is_file():
        return HTMLResponse(PLACEHOLDER_PAGE)
    return FileResponse(page, media_type="text/html", headers={"Cache-Control": "no-store"})
