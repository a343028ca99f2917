"""
cli.py — Command-line interface for yt-transcript-fetcher.

Provides the `yt-transcript` command group (registered as a console script
in pyproject.toml):

    get   Fetch a transcript from YouTube and print or save it.

Usage examples:
    yt-transcript get "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
    yt-transcript get dQw4w9WgXcQ --lang de --format srt -o talk.srt
    yt-transcript get dQw4w9WgXcQ --cache-dir ~/.cache/yt-transcript --retries 3
"""

from __future__ import annotations

import json
import logging
import os
import sys

import click

from yt_transcript_fetcher.cache import DEFAULT_CACHE_TTL, FileCache
from yt_transcript_fetcher.errors import FetchCancelledError, TranscriptError
from yt_transcript_fetcher.extractor import extract


# ---------------------------------------------------------------------------
# CLI group — the top-level `yt-transcript` command
# ---------------------------------------------------------------------------

@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log each request to stderr.")
def main(verbose: bool) -> None:
    """
    YouTube Transcript Fetcher — download caption text for public videos.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


# ---------------------------------------------------------------------------
# Subcommand: get — fetch a transcript from YouTube
# ---------------------------------------------------------------------------

@main.command()
@click.argument("video", metavar="URL_OR_ID")
@click.option(
    "--format", "-f",
    "fmt",                           # avoid shadowing the builtin "format"
    type=click.Choice(["text", "json", "doc", "srt", "vtt"], case_sensitive=False),
    default="text",
    show_default=True,
    help="Output format: plain text, JSON, markdown document, SRT or WebVTT subtitles.",
)
@click.option(
    "--lang", "-l",
    default=None,
    help="Language code of the caption track (e.g. 'de', 'pt-BR'). Defaults to the first track.",
)
@click.option(
    "--output", "-o",
    type=click.Path(),
    default=None,
    help="Write output to a file instead of stdout.",
)
@click.option(
    "--cache-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Cache fetched transcripts as files in this directory.",
)
@click.option(
    "--cache-ttl",
    type=click.FloatRange(min=0),
    default=DEFAULT_CACHE_TTL,
    show_default=True,
    help="Seconds a cached transcript stays valid (only used with --cache-dir).",
)
@click.option(
    "--retries",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="Retries per request when YouTube answers 429 or 5xx.",
)
@click.option(
    "--retry-delay",
    type=click.FloatRange(min=0),
    default=1000,
    show_default=True,
    help="Base backoff delay in milliseconds; doubles after each retry.",
)
@click.option(
    "--https/--no-https",
    default=True,
    show_default=True,
    help="Use HTTPS for all requests to YouTube.",
)
@click.option(
    "--details/--no-details",
    default=False,
    show_default=True,
    help="Include video metadata (JSON output only).",
)
def get(
    video: str,
    fmt: str,
    lang: str | None,
    output: str | None,
    cache_dir: str | None,
    cache_ttl: float,
    retries: int,
    retry_delay: float,
    https: bool,
    details: bool,
) -> None:
    """
    Fetch a YouTube video transcript.

    VIDEO can be a full YouTube URL or an 11-character video ID.
    """
    cache = FileCache(os.path.expanduser(cache_dir), default_ttl=cache_ttl) if cache_dir else None

    try:
        result = extract(
            video,
            fmt=fmt.lower(),
            lang=lang,
            retries=retries,
            retry_delay_ms=retry_delay,
            disable_https=not https,
            video_details=details,
            cache=cache,
        )
    except TranscriptError as exc:
        click.echo(f"Error: {exc.message}", err=True)
        sys.exit(1)
    except FetchCancelledError as exc:
        click.echo(f"Error: {exc.message}", err=True)
        sys.exit(130)

    if isinstance(result, dict):
        text = json.dumps(result, indent=2, ensure_ascii=False)
    else:
        text = result

    if output:
        with open(output, "w", encoding="utf-8") as fh:
            fh.write(text)
            fh.write("\n")
        click.echo(f"Transcript written to {output}", err=True)
    else:
        click.echo(text)
