"""
api.py — FastAPI REST API for yt-transcript-fetcher.

Endpoints:
    GET /transcript/{video_id}  — Fetch a transcript (text, JSON or subtitles).
    GET /health                 — Simple health-check for load balancers / monitoring.

Run with:
    uvicorn yt_transcript_fetcher.api:app

All requests share one process-wide InMemoryCache, so repeated requests for
the same video and language skip the round-trips to YouTube.  The global
exception handler converts any TranscriptError into an HTTP response using
the status code stored on the exception.
"""

from __future__ import annotations

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from yt_transcript_fetcher.cache import InMemoryCache
from yt_transcript_fetcher.errors import TranscriptError
from yt_transcript_fetcher.extractor import extract

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = FastAPI(
    title="YouTube Transcript Fetcher API",
    description="Fetch YouTube video transcripts as plain text, JSON, or subtitles.",
    version="0.3.0",
)

transcript_cache = InMemoryCache()


# ---------------------------------------------------------------------------
# Global error handler
# ---------------------------------------------------------------------------

@app.exception_handler(TranscriptError)
async def transcript_error_handler(request: Request, exc: TranscriptError) -> JSONResponse:
    """Translate any TranscriptError (or subclass) into an HTTP error response."""
    return JSONResponse(
        status_code=exc.http_status,
        content={"error": exc.message},
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

# response_model=None because the endpoint returns either PlainTextResponse
# or JSONResponse depending on the format param.
@app.get("/transcript/{video_id}", response_model=None)
def get_transcript(
    video_id: str,
    format: str = Query(
        default="text",
        description="Output format: 'text', 'json', 'doc' (markdown), 'srt' or 'vtt'.",
        pattern="^(text|json|doc|srt|vtt)$",
    ),
    lang: str = Query(
        default="",
        description="Language code of the caption track (e.g. 'de'). Empty picks the first track.",
    ),
    retries: int = Query(
        default=0,
        ge=0,
        le=5,
        description="Retries per upstream request on 429 / 5xx.",
    ),
    details: bool = Query(
        default=False,
        description="Include video metadata (JSON format only).",
    ),
) -> PlainTextResponse | JSONResponse:
    """
    Fetch the transcript for a single YouTube video.

    **video_id** is the 11-character YouTube video identifier
    (e.g. `dQw4w9WgXcQ`).

    Declared as a plain `def` so FastAPI runs the blocking HTTP calls in its
    threadpool.
    """
    result = extract(
        video_id,
        fmt=format,
        lang=lang or None,
        retries=retries,
        video_details=details,
        cache=transcript_cache,
    )

    if isinstance(result, dict):
        return JSONResponse(content=result)
    return PlainTextResponse(content=result)


@app.get("/health")
async def health() -> dict:
    """Returns HTTP 200 with {"status": "ok"}."""
    return {"status": "ok"}
