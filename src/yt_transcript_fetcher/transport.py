"""
transport.py — HTTP plumbing for the transcript pipeline.

Two pieces live here:

    default_fetch()     One HTTP request via `requests`, with the browser-ish
                        headers YouTube expects.
    fetch_with_retry()  Bounded exponential-backoff retry around any
                        zero-argument fetch, honouring a cancellation Event.

Each pipeline stage goes through a "fetcher": any callable that takes a
FetchParams and returns a response object with `.ok`, `.status_code`,
`.text` and `.json()`.  A `requests.Response` satisfies that shape, and so
does any stand-in a caller supplies through TranscriptConfig.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

import requests

from yt_transcript_fetcher.errors import FetchCancelledError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/85.0.4183.83 Safari/537.36,gzip(gfe)"
)

# Per-request socket timeout (seconds) handed to requests.
DEFAULT_TIMEOUT = 30.0


# ---------------------------------------------------------------------------
# Request / response shapes
# ---------------------------------------------------------------------------

class HttpResponse(Protocol):
    """The slice of `requests.Response` the pipeline relies on."""

    @property
    def ok(self) -> bool: ...

    @property
    def status_code(self) -> int: ...

    @property
    def text(self) -> str: ...

    def json(self) -> Any: ...


@dataclass
class FetchParams:
    """
    Description of one outbound request, passed to every fetcher.

    Attributes:
        url:        Absolute URL to request.
        method:     "GET" or "POST".
        headers:    Extra headers merged over the defaults.
        body:       Request body (only sent for POST).
        lang:       Optional language tag, sent as Accept-Language.
        user_agent: User-Agent header value.
        signal:     Optional cancellation Event for the whole call.
        timeout:    Socket timeout in seconds.
    """
    url: str
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None
    lang: str | None = None
    user_agent: str = DEFAULT_USER_AGENT
    signal: threading.Event | None = None
    timeout: float | None = DEFAULT_TIMEOUT


Fetcher = Callable[[FetchParams], HttpResponse]


# ---------------------------------------------------------------------------
# Default transport
# ---------------------------------------------------------------------------

def build_headers(params: FetchParams) -> dict[str, str]:
    """Merge User-Agent, optional Accept-Language and per-request headers."""
    headers = {"User-Agent": params.user_agent or DEFAULT_USER_AGENT}
    if params.lang:
        headers["Accept-Language"] = params.lang
    headers.update(params.headers)
    return headers


def default_fetch(params: FetchParams) -> requests.Response:
    """
    Perform a single HTTP request with `requests`.

    Never raises on a non-2xx status; the caller inspects `.ok` itself.
    Connection-level failures from `requests` propagate unchanged.

    Raises:
        FetchCancelledError: If the signal is already set.
    """
    if params.signal is not None and params.signal.is_set():
        raise FetchCancelledError()

    data = params.body if params.method.upper() == "POST" else None
    logger.debug("%s %s", params.method, params.url)
    return requests.request(
        params.method,
        params.url,
        headers=build_headers(params),
        data=data,
        timeout=params.timeout,
    )


# ---------------------------------------------------------------------------
# Retry with exponential backoff
# ---------------------------------------------------------------------------

def is_retryable_status(status: int) -> bool:
    """429 and every 5xx are worth retrying; other statuses are final."""
    return status == 429 or 500 <= status <= 599


def _wait(seconds: float, signal: threading.Event | None) -> None:
    if signal is None:
        time.sleep(seconds)
        return
    # Event.wait returns True as soon as the event is set.
    if signal.wait(seconds):
        raise FetchCancelledError()


def fetch_with_retry(
    fetch_fn: Callable[[], HttpResponse],
    retries: int = 0,
    retry_delay_ms: float = 1000,
    signal: threading.Event | None = None,
) -> HttpResponse:
    """
    Call `fetch_fn` and retry on 429 / 5xx with exponential backoff.

    The delay before retry number i+1 (0-indexed i) is
    `retry_delay_ms * 2**i` milliseconds.  When the budget runs out, the
    last response is returned as-is; a failing status is never raised.

    Args:
        fetch_fn:       Zero-argument callable performing one request.
        retries:        Extra attempts after the first one (0 disables retry).
        retry_delay_ms: Base backoff delay in milliseconds.
        signal:         Optional Event; setting it aborts before the next
                        attempt or in the middle of a backoff wait.

    Returns:
        The first non-retryable response, or the last response received.

    Raises:
        FetchCancelledError: If the signal is set before an attempt or
            during a wait.
    """
    attempt = 0
    while True:
        if signal is not None and signal.is_set():
            raise FetchCancelledError()

        response = fetch_fn()
        if not is_retryable_status(response.status_code) or attempt >= retries:
            return response

        delay_ms = retry_delay_ms * (2 ** attempt)
        logger.debug(
            "Retryable status %s, attempt %d/%d, backing off %.0f ms",
            response.status_code, attempt + 1, retries, delay_ms,
        )
        _wait(delay_ms / 1000.0, signal)
        attempt += 1
