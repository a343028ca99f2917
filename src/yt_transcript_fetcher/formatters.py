"""
formatters.py — Turn transcript segments into output text.

    format_text()  Plain text, one line per segment.
    format_json()  JSON-serialisable dict with timestamps (and metadata).
    format_doc()   Markdown paragraphs with **[MM:SS]** markers.
    format_srt()   SubRip subtitles.
    format_vtt()   WebVTT subtitles.

All functions are pure and accept any iterable of TranscriptSegment.
"""

from __future__ import annotations

from typing import Any, Iterable

from yt_transcript_fetcher.metadata import VideoMetadata
from yt_transcript_fetcher.models import TranscriptSegment

# A new "doc" paragraph starts once a segment begins this many seconds
# after the start of the current paragraph.
_DOC_PARAGRAPH_INTERVAL_SECS = 30


def format_text(segments: Iterable[TranscriptSegment], separator: str = "\n") -> str:
    """
    Join segment texts with `separator` (newline by default).

    Args:
        segments:  Transcript segments in document order.
        separator: String placed between segments; " " gives one paragraph.

    Returns:
        The joined text, or an empty string for an empty transcript.
    """
    return separator.join(segment.text for segment in segments)


def format_json(
    segments: Iterable[TranscriptSegment],
    video_id: str,
    metadata: VideoMetadata | None = None,
) -> dict[str, Any]:
    """
    Build a structured dict from transcript segments.

    Returns:
        A dict with keys: video_id, segment_count, segments, and metadata
        when one was supplied.  Each segment has text, offset, duration, lang.
    """
    raw = [segment.to_dict() for segment in segments]
    result: dict[str, Any] = {
        "video_id": video_id,
        "segment_count": len(raw),
        "segments": raw,
    }
    if metadata is not None:
        result["metadata"] = metadata.to_dict()
    return result


# ---------------------------------------------------------------------------
# Timestamp helpers
# ---------------------------------------------------------------------------

def _seconds_to_mmss(seconds: float) -> str:
    """92.5 -> "01:32".  Minutes don't wrap into hours."""
    total = int(seconds)
    mins, secs = divmod(total, 60)
    return f"{mins:02d}:{secs:02d}"


def _subtitle_timestamp(seconds: float, decimal_mark: str) -> str:
    """HH:MM:SS<mark>mmm, the shared shape of SRT (",") and VTT (".")."""
    total_ms = int(round(seconds * 1000))
    hours, rem = divmod(total_ms, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    secs, millis = divmod(rem, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}{decimal_mark}{millis:03d}"


# ---------------------------------------------------------------------------
# Document / subtitle formats
# ---------------------------------------------------------------------------

def format_doc(segments: Iterable[TranscriptSegment]) -> str:
    """
    Convert segments into a readable markdown document.

    Segments are joined with spaces into paragraphs; a new paragraph begins
    whenever a segment starts 30 seconds or more after the current
    paragraph did.  Each paragraph is prefixed with a bold **[MM:SS]** marker.

    Returns:
        Markdown with blank lines between paragraphs, or "" when empty.
    """
    paragraphs: list[str] = []
    current_texts: list[str] = []
    paragraph_start: float | None = None

    for segment in segments:
        if paragraph_start is None:
            paragraph_start = segment.offset
            current_texts.append(segment.text)
        elif segment.offset - paragraph_start >= _DOC_PARAGRAPH_INTERVAL_SECS:
            paragraphs.append(f"**[{_seconds_to_mmss(paragraph_start)}]** {' '.join(current_texts)}")
            paragraph_start = segment.offset
            current_texts = [segment.text]
        else:
            current_texts.append(segment.text)

    if current_texts and paragraph_start is not None:
        paragraphs.append(f"**[{_seconds_to_mmss(paragraph_start)}]** {' '.join(current_texts)}")

    return "\n\n".join(paragraphs)


def format_srt(segments: Iterable[TranscriptSegment]) -> str:
    """SubRip: numbered cues with HH:MM:SS,mmm timestamps."""
    cues = []
    for index, segment in enumerate(segments, start=1):
        start = _subtitle_timestamp(segment.offset, ",")
        end = _subtitle_timestamp(segment.offset + segment.duration, ",")
        cues.append(f"{index}\n{start} --> {end}\n{segment.text}")
    return "\n\n".join(cues)


def format_vtt(segments: Iterable[TranscriptSegment]) -> str:
    """WebVTT: a WEBVTT header followed by HH:MM:SS.mmm cues."""
    cues = []
    for segment in segments:
        start = _subtitle_timestamp(segment.offset, ".")
        end = _subtitle_timestamp(segment.offset + segment.duration, ".")
        cues.append(f"{start} --> {end}\n{segment.text}")
    return "WEBVTT\n\n" + "\n\n".join(cues)
