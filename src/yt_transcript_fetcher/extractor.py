"""
extractor.py — Core transcript extraction logic.

YouTube has no public captions API, so this module replays what the web and
Android apps do:

    1. GET the watch page and scrape the Innertube API key from it.
    2. POST to the Innertube player endpoint as the ANDROID client; the
       response lists the caption tracks (and the video's details).
    3. Pick a track: the requested language, or the first one offered.
    4. GET the track's timedtext document, forcing the XML flavour.
    5. Pull <text start= dur=> elements out of the document with a regex.

Each request goes through fetch_with_retry(), and every ambiguous upstream
signal is mapped onto exactly one exception from errors.py.  The order of
those checks matters and must not be shuffled.

Public entry points:
    parse_video_id()    Parse a YouTube URL or validate a bare video ID.
    validate_lang()     Reject language tags that aren't BCP 47-shaped.
    TranscriptFetcher   Reusable fetcher holding a TranscriptConfig.
    get_transcript()    One-call fetch returning segments (or a TranscriptResult).
    extract()           One-call fetch + formatting.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from yt_transcript_fetcher.config import TranscriptConfig
from yt_transcript_fetcher.errors import (
    InvalidLangError,
    InvalidVideoIdError,
    LanguageNotAvailableError,
    TooManyRequestsError,
    TranscriptNotAvailableError,
    TranscriptsDisabledError,
    VideoUnavailableError,
)
from yt_transcript_fetcher.formatters import (
    format_doc,
    format_json,
    format_srt,
    format_text,
    format_vtt,
)
from yt_transcript_fetcher.metadata import parse_video_metadata
from yt_transcript_fetcher.models import CaptionTrack, TranscriptResult, TranscriptSegment
from yt_transcript_fetcher.transport import FetchParams, HttpResponse, Fetcher, fetch_with_retry

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# A bare video ID is exactly 11 characters from the base64url alphabet.
_BARE_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{11}$")

# URL shapes, tried in order; each captures the 11-character ID in group "id":
#   - https://www.youtube.com/watch?v=VIDEO_ID  (v may follow other params)
#   - https://youtu.be/VIDEO_ID
#   - https://www.youtube.com/embed/VIDEO_ID
#   - https://www.youtube.com/live/VIDEO_ID
#   - https://www.youtube.com/shorts/VIDEO_ID   (and the legacy /v/VIDEO_ID)
_URL_PATTERNS: list[re.Pattern[str]] = [
    re.compile(
        r"(?:https?://)?(?:www\.|m\.|music\.)?youtube\.com/watch\?(?:[^#]*&)?v=(?P<id>[A-Za-z0-9_-]{11})"
    ),
    re.compile(r"(?:https?://)?youtu\.be/(?P<id>[A-Za-z0-9_-]{11})"),
    re.compile(r"(?:https?://)?(?:www\.|m\.)?youtube(?:-nocookie)?\.com/embed/(?P<id>[A-Za-z0-9_-]{11})"),
    re.compile(r"(?:https?://)?(?:www\.|m\.)?youtube\.com/live/(?P<id>[A-Za-z0-9_-]{11})"),
    re.compile(r"(?:https?://)?(?:www\.|m\.)?youtube\.com/(?:shorts|v)/(?P<id>[A-Za-z0-9_-]{11})"),
]

_BCP47_LANG_PATTERN = re.compile(r"^[a-zA-Z]{2,3}(-[a-zA-Z0-9]{2,8})*$")

# The only entities timedtext documents use.  Anything else is left alone.
_XML_ENTITIES = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&apos;": "'",
    "&#39;": "'",
}
_XML_ENTITY_PATTERN = re.compile(r"&(?:amp|lt|gt|quot|apos|#39);")

_XML_TRANSCRIPT_PATTERN = re.compile(r'<text start="([^"]*)" dur="([^"]*)">([^<]*)</text>')

_RECAPTCHA_MARKER = 'class="g-recaptcha"'

# The key shows up as plain JSON, or backslash-escaped inside a JS string.
_API_KEY_PATTERNS = [
    re.compile(r'"INNERTUBE_API_KEY":"([^"]+)"'),
    re.compile(r'INNERTUBE_API_KEY\\":\\"([^\\"]+)\\"'),
]

_YOUTUBE_HOST = "www.youtube.com"
_PLAYER_PATH = "/youtubei/v1/player"
_PLAYER_CLIENT = {"clientName": "ANDROID", "clientVersion": "20.10.38"}

_FMT_PARAM_PATTERN = re.compile(r"([?&])fmt=[^&#]*(&)?")

_SUPPORTED_FORMATS = ("text", "json", "doc", "srt", "vtt")


# ---------------------------------------------------------------------------
# Input parsing and validation
# ---------------------------------------------------------------------------

def parse_video_id(url_or_id: str) -> str:
    """
    Extract a YouTube video ID from a URL string, or validate a raw 11-char ID.

    A bare ID is checked first; otherwise the watch, short-link, embed, live
    and shorts URL shapes are tried in that order.

    Args:
        url_or_id: A YouTube URL or a raw video ID.

    Returns:
        The 11-character video ID.

    Raises:
        InvalidVideoIdError: If the string doesn't match any known format.
    """
    url_or_id = url_or_id.strip()

    if _BARE_ID_PATTERN.fullmatch(url_or_id):
        return url_or_id

    for pattern in _URL_PATTERNS:
        match = pattern.search(url_or_id)
        if match:
            return match.group("id")

    raise InvalidVideoIdError(url_or_id)


def validate_lang(lang: str) -> None:
    """
    Check that `lang` looks like a BCP 47 tag ("en", "pt-BR", "zh-Hans").

    Raises:
        InvalidLangError: Carrying the rejected value.
    """
    if not _BCP47_LANG_PATTERN.fullmatch(lang):
        raise InvalidLangError(lang)


def decode_xml_entities(text: str) -> str:
    """Decode the six XML entities found in timedtext documents, in one pass."""
    return _XML_ENTITY_PATTERN.sub(lambda m: _XML_ENTITIES[m.group(0)], text)


def cache_key(video_id: str, lang: str | None, video_details: bool) -> str:
    """Key under which a finished result is cached."""
    key = f"yt:transcript:{video_id}:{lang or ''}"
    return f"{key}:details" if video_details else key


# ---------------------------------------------------------------------------
# Response parsing helpers
# ---------------------------------------------------------------------------

def _extract_api_key(page: str) -> str | None:
    for pattern in _API_KEY_PATTERNS:
        match = pattern.search(page)
        if match:
            return match.group(1)
    return None


def _extract_tracklist(player_json: dict[str, Any]) -> dict[str, Any] | None:
    """
    Return the playerCaptionsTracklistRenderer, wherever this response put it.

    Newer responses nest it under "captions"; older ones had it at the top.
    """
    captions = player_json.get("captions")
    if isinstance(captions, dict) and captions.get("playerCaptionsTracklistRenderer") is not None:
        return captions["playerCaptionsTracklistRenderer"]
    return player_json.get("playerCaptionsTracklistRenderer")


def _strip_fmt_param(url: str) -> str:
    """Drop the fmt= query parameter so timedtext falls back to its XML format."""
    return _FMT_PARAM_PATTERN.sub(lambda m: m.group(1) if m.group(2) else "", url)


def parse_transcript_xml(body: str, lang: str) -> list[TranscriptSegment]:
    """
    Pull every <text start="S" dur="D">BODY</text> element out of `body`.

    Segments come back in document order; nothing is sorted or merged.
    Raises ValueError if a start or dur attribute isn't a number.
    """
    return [
        TranscriptSegment(
            text=decode_xml_entities(match.group(3)),
            offset=float(match.group(1)),
            duration=float(match.group(2)),
            lang=lang,
        )
        for match in _XML_TRANSCRIPT_PATTERN.finditer(body)
    ]


# ---------------------------------------------------------------------------
# The fetcher
# ---------------------------------------------------------------------------

class TranscriptFetcher:
    """
    Fetch transcripts with one shared configuration.

    Example:
        fetcher = TranscriptFetcher(TranscriptConfig(lang="en", retries=2))
        segments = fetcher.fetch_transcript("https://youtu.be/dQw4w9WgXcQ")
    """

    def __init__(self, config: TranscriptConfig | None = None) -> None:
        self.config = config or TranscriptConfig()

    # -- public ------------------------------------------------------------

    def fetch_transcript(self, url_or_id: str) -> list[TranscriptSegment] | TranscriptResult:
        """
        Fetch the transcript for one video.

        Args:
            url_or_id: A YouTube URL or an 11-character video ID.

        Returns:
            A list of TranscriptSegment, or a TranscriptResult (segments plus
            VideoMetadata) when config.video_details is set.

        Raises:
            InvalidVideoIdError:          The input is not a video reference.
            InvalidLangError:             config.lang is not BCP 47-shaped.
            VideoUnavailableError:        Watch page or player request failed.
            TooManyRequestsError:         YouTube is rate-limiting us.
            TranscriptsDisabledError:     The video plays but has no captions.
            TranscriptNotAvailableError:  No transcript could be retrieved.
            LanguageNotAvailableError:    config.lang isn't among the tracks.
            FetchCancelledError:          config.signal was set.
        """
        config = self.config
        lang = config.lang
        video_id = parse_video_id(url_or_id)
        if lang:
            validate_lang(lang)

        key = cache_key(video_id, lang, config.video_details)
        cached = self._read_cache(key)
        if cached is not None:
            return cached

        api_key = self._fetch_api_key(video_id)
        player_json = self._fetch_player_response(video_id, api_key)
        track = self._select_track(video_id, player_json)
        segments = self._fetch_segments(video_id, track)

        result: list[TranscriptSegment] | TranscriptResult = segments
        if config.video_details:
            result = TranscriptResult(
                metadata=parse_video_metadata(video_id, player_json),
                segments=segments,
            )

        self._write_cache(key, result)
        return result

    # -- stages ------------------------------------------------------------

    def _request(self, fetcher: Fetcher, params: FetchParams) -> HttpResponse:
        config = self.config
        return fetch_with_retry(
            lambda: fetcher(params),
            retries=config.retries,
            retry_delay_ms=config.retry_delay_ms,
            signal=config.signal,
        )

    def _params(self, url: str, **kwargs: Any) -> FetchParams:
        config = self.config
        return FetchParams(
            url=url,
            lang=config.lang,
            user_agent=config.user_agent,
            signal=config.signal,
            timeout=config.timeout,
            **kwargs,
        )

    def _fetch_api_key(self, video_id: str) -> str:
        watch_url = f"{self.config.scheme}://{_YOUTUBE_HOST}/watch?v={video_id}"
        logger.debug("[%s] fetching watch page", video_id)
        response = self._request(self.config.video_fetch, self._params(watch_url))
        if not response.ok:
            raise VideoUnavailableError(video_id)

        page = response.text
        if _RECAPTCHA_MARKER in page:
            raise TooManyRequestsError()

        api_key = _extract_api_key(page)
        if api_key is None:
            raise TranscriptNotAvailableError(video_id)
        return api_key

    def _fetch_player_response(self, video_id: str, api_key: str) -> dict[str, Any]:
        player_url = f"{self.config.scheme}://{_YOUTUBE_HOST}{_PLAYER_PATH}?key={api_key}"
        body = json.dumps({"context": {"client": _PLAYER_CLIENT}, "videoId": video_id})
        logger.debug("[%s] querying player endpoint", video_id)
        response = self._request(
            self.config.player_fetch,
            self._params(
                player_url,
                method="POST",
                headers={"Content-Type": "application/json"},
                body=body,
            ),
        )
        if not response.ok:
            raise VideoUnavailableError(video_id)

        try:
            player_json = response.json()
        except ValueError:
            raise TranscriptNotAvailableError(video_id)
        if not isinstance(player_json, dict):
            raise TranscriptNotAvailableError(video_id)
        return player_json

    def _select_track(self, video_id: str, player_json: dict[str, Any]) -> CaptionTrack:
        tracklist = _extract_tracklist(player_json)
        playability = player_json.get("playabilityStatus")
        playable = isinstance(playability, dict) and playability.get("status") == "OK"

        if player_json.get("captions") is None or tracklist is None:
            # A playable video with no captions block had them switched off;
            # an unplayable one tells us nothing about its captions.
            if playable:
                raise TranscriptsDisabledError(video_id)
            raise TranscriptNotAvailableError(video_id)

        raw_tracks = tracklist.get("captionTracks") if isinstance(tracklist, dict) else None
        if not isinstance(raw_tracks, list) or not raw_tracks:
            raise TranscriptsDisabledError(video_id)

        tracks = [CaptionTrack.from_player_json(t) for t in raw_tracks if isinstance(t, dict)]
        lang = self.config.lang
        if not lang:
            if not tracks:
                raise TranscriptsDisabledError(video_id)
            selected = tracks[0]
        else:
            selected = next((t for t in tracks if t.language_code == lang), None)
            if selected is None:
                available = [t.language_code for t in tracks if t.language_code]
                raise LanguageNotAvailableError(lang, available, video_id)

        if not selected.base_url:
            raise TranscriptNotAvailableError(video_id)
        logger.debug(
            "[%s] selected track %s (%s)",
            video_id, selected.language_code, "auto" if selected.is_generated else "manual",
        )
        return selected

    def _fetch_segments(self, video_id: str, track: CaptionTrack) -> list[TranscriptSegment]:
        url = _strip_fmt_param(track.base_url)
        if self.config.disable_https:
            url = re.sub(r"^https://", "http://", url)

        logger.debug("[%s] fetching transcript document", video_id)
        response = self._request(self.config.transcript_fetch, self._params(url))
        if not response.ok:
            if response.status_code == 429:
                raise TooManyRequestsError()
            raise TranscriptNotAvailableError(video_id)

        try:
            segments = parse_transcript_xml(response.text, self.config.lang or track.language_code)
        except ValueError:
            logger.debug("[%s] transcript document has non-numeric timings", video_id)
            raise TranscriptNotAvailableError(video_id)
        if not segments:
            raise TranscriptNotAvailableError(video_id)
        return segments

    # -- cache -------------------------------------------------------------

    def _read_cache(self, key: str) -> list[TranscriptSegment] | TranscriptResult | None:
        cache = self.config.cache
        if cache is None:
            return None
        try:
            cached = cache.get(key)
        except Exception as exc:
            logger.warning("Cache read failed for %s: %s", key, exc)
            return None
        if not cached:
            return None

        try:
            data = json.loads(cached)
            if self.config.video_details:
                return TranscriptResult.from_dict(data)
            if not isinstance(data, list):
                raise TypeError("expected a list of segments")
            return [TranscriptSegment.from_dict(item) for item in data]
        except (ValueError, KeyError, TypeError) as exc:
            logger.warning("Ignoring malformed cache entry %s: %s", key, exc)
            return None

    def _write_cache(self, key: str, result: list[TranscriptSegment] | TranscriptResult) -> None:
        cache = self.config.cache
        if cache is None:
            return
        if isinstance(result, TranscriptResult):
            payload = json.dumps(result.to_dict())
        else:
            payload = json.dumps([segment.to_dict() for segment in result])
        try:
            cache.set(key, payload, self.config.cache_ttl)
        except Exception as exc:
            logger.warning("Cache write failed for %s: %s", key, exc)


# ---------------------------------------------------------------------------
# High-level convenience functions (main public API)
# ---------------------------------------------------------------------------

def get_transcript(
    url_or_id: str,
    config: TranscriptConfig | None = None,
    **options: Any,
) -> list[TranscriptSegment] | TranscriptResult:
    """
    Fetch transcript segments for a single YouTube video.

    Args:
        url_or_id: A YouTube URL or raw video ID.
        config:    A ready TranscriptConfig; mutually exclusive with options.
        **options: TranscriptConfig fields (lang="de", retries=2, ...).

    Returns:
        Segments, or a TranscriptResult when video_details=True.
    """
    if config is not None and options:
        raise TypeError("pass either config or keyword options, not both")
    return TranscriptFetcher(config or TranscriptConfig(**options)).fetch_transcript(url_or_id)


def extract(url_or_id: str, fmt: str = "text", **options: Any) -> str | dict:
    """
    One-call interface: parse URL → fetch transcript → format output.

    Args:
        url_or_id: A YouTube URL or raw video ID.
        fmt:       "text", "json", "doc", "srt" or "vtt".
        **options: TranscriptConfig fields forwarded to get_transcript().

    Returns:
        A dict for fmt="json", otherwise a string.

    Raises:
        ValueError:      If fmt is not a supported format.
        TranscriptError: (or subclass) on any extraction failure.
    """
    if fmt not in _SUPPORTED_FORMATS:
        raise ValueError(f"Unknown format {fmt!r}; expected one of {', '.join(_SUPPORTED_FORMATS)}")

    result = get_transcript(url_or_id, **options)
    if isinstance(result, TranscriptResult):
        segments, metadata = result.segments, result.metadata
    else:
        segments, metadata = result, None

    if fmt == "json":
        return format_json(segments, parse_video_id(url_or_id), metadata)
    if fmt == "doc":
        return format_doc(segments)
    if fmt == "srt":
        return format_srt(segments)
    if fmt == "vtt":
        return format_vtt(segments)
    return format_text(segments)
