"""POST /api/stylize — one-shot upload, style and download."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import Response

from stylecanvas.config import Settings
from stylecanvas.dependencies import get_engine, get_settings
from stylecanvas.engine.filter_engine import StyleFilterEngine
from stylecanvas.utils.image_io import decode_upload, download_filename, encode_png

router = APIRouter()


@router.post("/stylize", response_class=Response)
async def stylize(
    file: UploadFile = File(...),
    style_id: str = Form(...),
    engine: StyleFilterEngine = Depends(get_engine),
    settings: Settings = Depends(get_settings),
) -> Response:
    # Unknown styles fail before the upload is decoded
    engine.catalog.resolve(style_id)

    buffer = decode_upload(await file.read(), file.content_type, settings)
    output = await engine.run(buffer, style_id)

    filename = download_filename(style_id)
    return Response(
        content=encode_png(output),
        media_type="image/png",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
