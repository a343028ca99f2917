"""
config.py — Options controlling a transcript fetch.

All public entry points (TranscriptFetcher, get_transcript, extract, the CLI
and the REST API) funnel their options into one TranscriptConfig.  The
library itself never reads environment variables.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

from yt_transcript_fetcher.cache import CacheStrategy
from yt_transcript_fetcher.transport import (
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
    Fetcher,
    default_fetch,
)


@dataclass
class TranscriptConfig:
    """
    Settings for TranscriptFetcher.

    Attributes:
        lang:             BCP 47 language tag; None picks YouTube's first track.
        user_agent:       User-Agent sent with every request.
        disable_https:    Use plain http:// for every request.
        retries:          Retries per request on 429 / 5xx (0 disables).
        retry_delay_ms:   Base backoff delay; doubles after every retry.
        cache:            Optional CacheStrategy for finished results.
        cache_ttl:        Entry lifetime in seconds (None = cache default).
        video_details:    Also return VideoMetadata from the player response.
        signal:           Event that cancels the call when set.
        timeout:          Socket timeout in seconds for each request.
        video_fetch:      Fetcher for the watch page.
        player_fetch:     Fetcher for the Innertube player POST.
        transcript_fetch: Fetcher for the timedtext document.
    """
    lang: str | None = None
    user_agent: str = DEFAULT_USER_AGENT
    disable_https: bool = False
    retries: int = 0
    retry_delay_ms: float = 1000
    cache: CacheStrategy | None = None
    cache_ttl: float | None = None
    video_details: bool = False
    signal: threading.Event | None = None
    timeout: float | None = DEFAULT_TIMEOUT
    video_fetch: Fetcher = default_fetch
    player_fetch: Fetcher = default_fetch
    transcript_fetch: Fetcher = default_fetch

    def __post_init__(self) -> None:
        if self.retries < 0:
            raise ValueError(f"retries must be >= 0, got {self.retries}")
        if self.retry_delay_ms < 0:
            raise ValueError(f"retry_delay_ms must be >= 0, got {self.retry_delay_ms}")

    @property
    def scheme(self) -> str:
        return "http" if self.disable_https else "https"
