"""/api/sessions — stateful upload → select style → run → result flow.

GET /api/sessions/{id} is the progress interface: it reports the current
state and, after a failure, the error message.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import Response

from stylecanvas.config import Settings
from stylecanvas.dependencies import get_engine, get_session_store, get_settings
from stylecanvas.engine.errors import InvalidTransition
from stylecanvas.engine.filter_engine import StyleFilterEngine
from stylecanvas.engine.session import SessionState, SessionStateMachine, SessionStore
from stylecanvas.models.requests import SelectStyleRequest
from stylecanvas.models.responses import SessionResponse
from stylecanvas.utils.image_io import decode_upload, download_filename, encode_png

router = APIRouter(prefix="/sessions")


def _to_response(machine: SessionStateMachine) -> SessionResponse:
    s = machine.session
    return SessionResponse(
        id=s.id,
        state=s.state,
        selected_style=s.selected_style,
        error=s.last_error,
        width=s.input_buffer.width if s.input_buffer is not None else None,
        height=s.input_buffer.height if s.input_buffer is not None else None,
        has_result=s.output_buffer is not None,
    )


@router.post("", response_model=SessionResponse, status_code=201)
async def create_session(
    file: UploadFile = File(...),
    store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_settings),
) -> SessionResponse:
    buffer = decode_upload(await file.read(), file.content_type, settings)
    return _to_response(store.create(buffer))


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> SessionResponse:
    return _to_response(store.get(session_id))


@router.post("/{session_id}/image", response_model=SessionResponse)
async def upload_image(
    session_id: str,
    file: UploadFile = File(...),
    store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_settings),
) -> SessionResponse:
    machine = store.get(session_id)
    machine.upload(decode_upload(await file.read(), file.content_type, settings))
    return _to_response(machine)


@router.put("/{session_id}/style", response_model=SessionResponse)
async def select_style(
    session_id: str,
    req: SelectStyleRequest,
    store: SessionStore = Depends(get_session_store),
) -> SessionResponse:
    machine = store.get(session_id)
    machine.select_style(req.style_id)
    return _to_response(machine)


@router.post("/{session_id}/run", response_model=SessionResponse)
async def run_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
    engine: StyleFilterEngine = Depends(get_engine),
) -> SessionResponse:
    machine = store.get(session_id)
    await machine.run(engine)
    return _to_response(machine)


@router.post("/{session_id}/retry", response_model=SessionResponse)
async def retry_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
    engine: StyleFilterEngine = Depends(get_engine),
) -> SessionResponse:
    machine = store.get(session_id)
    await machine.run_retry(engine)
    return _to_response(machine)


@router.get("/{session_id}/result", response_class=Response)
async def get_result(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> Response:
    s = store.get(session_id).session
    if s.state is not SessionState.COMPLETE or s.output_buffer is None:
        raise InvalidTransition(f"No result available while {s.state.value}")

    filename = download_filename(s.selected_style or "image")
    return Response(
        content=encode_png(s.output_buffer),
        media_type="image/png",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.delete("/{session_id}", status_code=204)
async def delete_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> Response:
    store.delete(session_id)
    return Response(status_code=204)
