"""
Tabrik Backend — Frontend Entry Route
=======================================

What:  Serves the bundled frontend's index.html at `/`.
How:   The rest of the frontend directory is mounted as static files in
       main.py, after all API routers.
"""

from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

from tabrik.config import settings
from tabrik.exceptions import NotFoundError

router = APIRouter(tags=["Frontend"])


@router.get("/", include_in_schema=False)
async def index() -> FileResponse:
    entry = Path(settings.frontend_dir).resolve() / "index.html"
    if not entry.is_file():
        raise NotFoundError(resource="file", resource_id="index.html")
    return FileResponse(path=str(entry), media_type="text/html")
