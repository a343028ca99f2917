"""
yt_transcript_fetcher — Fetch YouTube video transcripts without an API key.

Public API:
    extract()               High-level one-call interface (URL → formatted output).
    get_transcript()        Fetch transcript segments for a video URL or ID.
    TranscriptFetcher       Reusable fetcher bound to a TranscriptConfig.
    TranscriptConfig        Options: language, retries, cache, hooks, ...
    parse_video_id()        Parse a YouTube URL or validate a bare video ID.
    validate_lang()         Check a language tag before it reaches a header.
    InMemoryCache           Process-local cache.
    FileCache               One-file-per-key cache on disk.
    TranscriptSegment       One timed caption line.
    TranscriptResult        Segments plus VideoMetadata.
    VideoMetadata           Dataclass holding video metadata fields.
    format_text/json/doc/srt/vtt   Output formatters.

Exception hierarchy (all importable from this package):
    TranscriptError                  Base exception for all transcript errors.
    ├── InvalidVideoIdError          Input isn't a video ID or YouTube URL.
    ├── InvalidLangError             Language tag isn't BCP 47-shaped.
    ├── VideoUnavailableError        Watch page / player request failed.
    ├── TooManyRequestsError         YouTube is rate-limiting this client.
    ├── TranscriptsDisabledError     Video plays but captions are off.
    ├── TranscriptNotAvailableError  No transcript could be retrieved.
    └── LanguageNotAvailableError    Requested language not available.
    FetchCancelledError              The caller's cancel Event was set.

Usage:
    from yt_transcript_fetcher import get_transcript, InMemoryCache
    segments = get_transcript("https://youtu.be/dQw4w9WgXcQ", lang="en",
                              retries=2, cache=InMemoryCache())
"""

from yt_transcript_fetcher.cache import CacheStrategy, FileCache, InMemoryCache
from yt_transcript_fetcher.config import TranscriptConfig
from yt_transcript_fetcher.errors import (
    FetchCancelledError,
    InvalidLangError,
    InvalidVideoIdError,
    LanguageNotAvailableError,
    TooManyRequestsError,
    TranscriptError,
    TranscriptNotAvailableError,
    TranscriptsDisabledError,
    VideoUnavailableError,
)
from yt_transcript_fetcher.extractor import (
    TranscriptFetcher,
    extract,
    get_transcript,
    parse_video_id,
    validate_lang,
)
from yt_transcript_fetcher.formatters import (
    format_doc,
    format_json,
    format_srt,
    format_text,
    format_vtt,
)
from yt_transcript_fetcher.metadata import Thumbnail, VideoMetadata
from yt_transcript_fetcher.models import CaptionTrack, TranscriptResult, TranscriptSegment
from yt_transcript_fetcher.transport import FetchParams, default_fetch, fetch_with_retry

__all__ = [
    "extract",
    "get_transcript",
    "parse_video_id",
    "validate_lang",
    "TranscriptFetcher",
    "TranscriptConfig",
    "CacheStrategy",
    "InMemoryCache",
    "FileCache",
    "FetchParams",
    "default_fetch",
    "fetch_with_retry",
    "CaptionTrack",
    "TranscriptSegment",
    "TranscriptResult",
    "VideoMetadata",
    "Thumbnail",
    "format_text",
    "format_json",
    "format_doc",
    "format_srt",
    "format_vtt",
    "TranscriptError",
    "InvalidVideoIdError",
    "InvalidLangError",
    "VideoUnavailableError",
    "TooManyRequestsError",
    "TranscriptsDisabledError",
    "TranscriptNotAvailableError",
    "LanguageNotAvailableError",
    "FetchCancelledError",
]
