from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from ..errors import MissingInput, ProcessingFailure
from ..models.transcribe import TranscribeResponse
from ..services import processing as svc
from ..state import State, get_state

logger = logging.getLogger("app.transcribe")

router = APIRouter(tags=["transcribe"])


@router.post("/transcribe", response_model=TranscribeResponse, response_model_by_alias=True)
def transcribe(
    audio: Optional[UploadFile] = File(None),
    title: Optional[str] = Form(None),
    client_name: Optional[str] = Form(None, alias="clientName"),
    state: State = Depends(get_state),
) -> TranscribeResponse:
    if audio is None:
        raise MissingInput()

    logger.info(
        "processing upload %s (title=%r, client=%r)",
        audio.filename or "audio",
        title or None,
        client_name or None,
    )
    try:
        data = audio.file.read()
        speech, generator = state.providers()
        return svc.process_audio(
            speech,
            generator,
            data,
            audio.filename or "audio.webm",
            temperature=state.settings.analysis_temperature,
        )
    except Exception as e:
        logger.exception("error processing audio")
        raise ProcessingFailure() from e
