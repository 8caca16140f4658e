from __future__ import annotations

import logging
import mimetypes
import os
import uuid
from typing import Optional

from fastapi import FastAPI, Form, HTTPException, Response
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from . import __version__
from .stl import build_washer_stl, download_filename
from .validate import ValidationError


# Prefer env DATA_ROOT; otherwise the repo root for a source checkout, else the cwd
_default_root = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir, os.pardir))
if not os.path.isfile(os.path.join(_default_root, "pyproject.toml")):
    _default_root = os.getcwd()
DATA_ROOT = os.environ.get("DATA_ROOT", _default_root)
# UI assets ship inside the package so wheel installs can serve them too.
WEB_DIR = os.environ.get("WEB_DIR", os.path.join(os.path.dirname(__file__), "web"))
UI_ENTRY = "/web/index.html"

mimetypes.add_type("model/stl", ".stl")

app = FastAPI(title="washerlab", version=__version__)
logger = logging.getLogger("washerlab.api")
if not logger.handlers:
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/", include_in_schema=False)
def index():
    return RedirectResponse(url=UI_ENTRY)


@app.post("/api/washer")
def api_washer(
    outer: str = Form(...),
    inner: str = Form(...),
    thickness: str = Form(...),
    segments: Optional[str] = Form(default=None),
    slice_mode: Optional[str] = Form(default=None, alias="slice"),
    name: Optional[str] = Form(default=None),
):
    dbg_id = uuid.uuid4().hex[:8]
    logger.info("[%s] POST /api/washer outer=%s inner=%s thickness=%s segments=%s slice=%s",
                dbg_id, outer, inner, thickness, segments, slice_mode)
    try:
        stl, meta = build_washer_stl(
            {"outerDiameter": outer, "innerDiameter": inner, "thickness": thickness},
            {"segments": segments or None, "slice": slice_mode or None},
            name=name or "washer",
        )
    except ValidationError as e:
        logger.warning("[%s] rejected: %s", dbg_id, e)
        raise HTTPException(status_code=400, detail=str(e))

    filename = download_filename(meta)
    logger.info("[%s] %s (%d triangles)", dbg_id, filename, meta.triangle_count)
    return Response(
        content=stl,
        media_type="model/stl",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "X-Triangle-Count": str(meta.triangle_count),
            "X-Segments": str(meta.segments),
            "X-Slice": meta.slice,
        },
    )


# StaticFiles refuses any path that resolves outside its directory (404).
app.mount("/web", StaticFiles(directory=WEB_DIR, html=True), name="web")
app.mount("/static", StaticFiles(directory=DATA_ROOT), name="static")


def main():
    import uvicorn

    host = os.environ.get("HOST", "127.0.0.1")
    port = int(os.environ.get("PORT", "5173"))
    logger.info("Web UI available at http://%s:%d%s", host, port, UI_ENTRY)
    uvicorn.run("washerlab.server:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    main()
