from typing import List, Tuple

import logging

import numpy as np
import soundfile as sf
from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware

from voice_emotion.config import cors_origins
from voice_emotion.models import (
    AnalysisResponse,
    BatchAnalysisResponse,
    ErrorModel,
    ProfilesResponse,
    build_analysis_response,
    build_profiles_response,
)
from voice_emotion.pipeline import analyze_batch, analyze_clip

logger = logging.getLogger("voice_emotion")

app = FastAPI(title="Voice Emotion DSP")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_DECODE_ERRORS = (sf.SoundFileError, RuntimeError, TypeError, ValueError)


def _read_mono(file: UploadFile) -> Tuple[np.ndarray, int]:
    """Decode an upload to a mono float64 array; channels are averaged."""

    try:
        audio, sr = sf.read(file.file, dtype="float64", always_2d=True)
    finally:
        # Release the spooled upload as soon as the samples are in memory.
        try:
            file.file.close()
        except OSError:  # pragma: no cover - best effort
            pass
    return audio.mean(axis=1), int(sr)


def _decode_error_detail(file: UploadFile, exc: Exception) -> dict:
    return {
        "error": "AUDIO_DECODE_FAILED",
        "filename": file.filename,
        "message": str(exc),
    }


@app.get("/health")
async def health():
    """Static payload for uptime checks; does not touch the analysis stack."""

    return {"status": "ok"}


@app.get("/profiles", response_model=ProfilesResponse)
async def profiles():
    """Return the emotion catalog and feature weights used for scoring."""

    return build_profiles_response()


@app.post("/analyze", response_model=AnalysisResponse)
def analyze(file: UploadFile = File(...)):
    """Classify the emotion of one uploaded clip.

    Undecodable audio is a 400; audio that decodes but cannot be analysed
    (empty, non-finite samples) is a 422 whose detail names the failure.
    """

    try:
        audio, sr = _read_mono(file)
    except _DECODE_ERRORS as exc:
        logger.warning("[API] Failed to decode %s: %s", file.filename, exc)
        raise HTTPException(status_code=400, detail=_decode_error_detail(file, exc)) from exc

    analysis = analyze_clip(audio, sr)
    if analysis.failure is not None:
        error = ErrorModel.from_failure(analysis.failure)
        raise HTTPException(status_code=422, detail={**error.model_dump(), "filename": file.filename})

    return build_analysis_response(analysis, filename=file.filename, sample_rate=sr)


@app.post("/analyze-batch", response_model=BatchAnalysisResponse)
def analyze_many(files: List[UploadFile] = File(...)):
    """Classify several clips in parallel; results follow upload order.

    Per-file failures are reported inline with ``status="failed"`` rather
    than failing the whole request.
    """

    responses: List[AnalysisResponse | None] = [None] * len(files)
    pending = []
    for index, file in enumerate(files):
        try:
            audio, sr = _read_mono(file)
        except _DECODE_ERRORS as exc:
            logger.warning("[API] Failed to decode %s: %s", file.filename, exc)
            responses[index] = AnalysisResponse(
                status="failed",
                filename=file.filename,
                error=ErrorModel(error="AUDIO_DECODE_FAILED", reason=type(exc).__name__, message=str(exc)),
            )
            continue
        pending.append((index, file.filename, audio, sr))

    analyses = analyze_batch([(audio, sr) for _, _, audio, sr in pending])
    for (index, filename, _, sr), analysis in zip(pending, analyses):
        responses[index] = build_analysis_response(analysis, filename=filename, sample_rate=sr)

    return BatchAnalysisResponse(results=responses)
