"""
errors.py — Custom exception hierarchy for yt-transcript-fetcher.

Every domain exception carries an `http_status` attribute so the FastAPI
error handler can translate library-level errors directly into the correct
HTTP response code without a separate mapping table.

Hierarchy:
    TranscriptError (base, 500)
    ├── InvalidVideoIdError (400)
    ├── InvalidLangError (400)
    ├── VideoUnavailableError (404)
    ├── TooManyRequestsError (429)
    ├── TranscriptsDisabledError (404)
    ├── TranscriptNotAvailableError (404)
    └── LanguageNotAvailableError (404)

FetchCancelledError sits outside the hierarchy: a cancelled call is not a
statement about the video, so it must never be confused with one.
"""


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class TranscriptError(Exception):
    """
    Root exception for all transcript-related errors.

    Attributes:
        message:     Human-readable description of what went wrong.
        http_status: Suggested HTTP status code for the API layer.
    """

    def __init__(self, message: str, http_status: int = 500) -> None:
        super().__init__(message)
        self.message = message
        self.http_status = http_status


# ---------------------------------------------------------------------------
# Input validation errors
# ---------------------------------------------------------------------------

class InvalidVideoIdError(TranscriptError):
    """Raised when the input is neither a bare video ID nor a known YouTube URL."""

    def __init__(self, value: str = "") -> None:
        super().__init__(
            message=(
                "Invalid YouTube video ID or URL. Expected an 11-character ID "
                'like "dQw4w9WgXcQ" or a URL like '
                '"https://www.youtube.com/watch?v=dQw4w9WgXcQ".'
            ),
            http_status=400,
        )
        self.value = value


class InvalidLangError(TranscriptError):
    """
    Raised when a language tag is not BCP 47-shaped.

    The tag ends up in the Accept-Language header, so anything that doesn't
    look like "en" / "pt-BR" / "zh-Hans" is rejected before a request is built.
    """

    def __init__(self, lang: str) -> None:
        super().__init__(
            message=(
                f'Invalid language code "{lang}". Use a BCP 47 language code '
                '(e.g. "en", "fr", "pt-BR").'
            ),
            http_status=400,
        )
        self.lang = lang


# ---------------------------------------------------------------------------
# Upstream errors
# ---------------------------------------------------------------------------

class VideoUnavailableError(TranscriptError):
    """
    Raised when the watch page or the player endpoint answers with a failure.

    Possible causes: the video was deleted, is private, or YouTube is having
    an outage.  Maps to HTTP 404.
    """

    def __init__(self, video_id: str) -> None:
        super().__init__(
            message=f"Video is no longer available or has been removed: {video_id}",
            http_status=404,
        )
        self.video_id = video_id


class TooManyRequestsError(TranscriptError):
    """
    Raised when YouTube is rate-limiting this client.

    Triggered by the reCAPTCHA challenge page or by a 429 on the transcript
    document itself.  Maps to HTTP 429.
    """

    def __init__(self) -> None:
        super().__init__(
            message=(
                "YouTube is receiving too many requests from this IP address. "
                "Try again later or reduce the request rate."
            ),
            http_status=429,
        )


class TranscriptsDisabledError(TranscriptError):
    """
    Raised when the video plays but captions have been turned off.

    Maps to HTTP 404.
    """

    def __init__(self, video_id: str) -> None:
        super().__init__(
            message=f"Transcripts are disabled for video: {video_id}",
            http_status=404,
        )
        self.video_id = video_id


class TranscriptNotAvailableError(TranscriptError):
    """
    Raised when no transcript could be retrieved and we can't say why.

    Covers a missing API key on the watch page, a caption-less response for a
    video that isn't playable, a failed transcript download, and a transcript
    document with no segments.  Maps to HTTP 404.
    """

    def __init__(self, video_id: str) -> None:
        super().__init__(
            message=f"No transcript available for video: {video_id}",
            http_status=404,
        )
        self.video_id = video_id


class LanguageNotAvailableError(TranscriptError):
    """
    Raised when the video has transcripts, but none in the requested language.

    Attributes:
        lang:            The language code that was requested.
        available_langs: Language codes the video does offer, in YouTube's order.
        video_id:        The video that was queried.
    """

    def __init__(self, lang: str, available_langs: list[str], video_id: str) -> None:
        available = ", ".join(available_langs)
        super().__init__(
            message=(
                f"Transcript not available in language [{lang}] for video: "
                f"{video_id}. Available languages: {available}"
            ),
            http_status=404,
        )
        self.lang = lang
        self.available_langs = available_langs
        self.video_id = video_id


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------

class FetchCancelledError(Exception):
    """Raised when the caller's cancellation signal fires during a fetch."""

    def __init__(self, message: str = "Transcript fetch was cancelled") -> None:
        super().__init__(message)
        self.message = message
