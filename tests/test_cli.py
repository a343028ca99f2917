"""
test_cli.py — Tests for the `yt-transcript` command line.

extract() is patched in every test, so the CLI is exercised in-process via
click's CliRunner without touching the network.

Covers:
    - Default option values and how options map onto extract()
    - --cache-dir building a FileCache
    - JSON serialisation and --output file writing
    - Error messages and exit codes
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from yt_transcript_fetcher.cache import FileCache
from yt_transcript_fetcher.cli import main
from yt_transcript_fetcher.errors import (
    FetchCancelledError,
    LanguageNotAvailableError,
    VideoUnavailableError,
)


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


# ---------------------------------------------------------------------------
# get — option handling
# ---------------------------------------------------------------------------

class TestGetCommand:
    """Tests for `yt-transcript get`."""

    @patch("yt_transcript_fetcher.cli.extract")
    def test_defaults(self, mock_extract: MagicMock, runner: CliRunner) -> None:
        """Plain text to stdout, no cache, no retries, HTTPS on."""
        mock_extract.return_value = "Hello world\nSecond line"

        result = runner.invoke(main, ["get", "dQw4w9WgXcQ"])

        assert result.exit_code == 0
        assert "Hello world\nSecond line" in result.output
        mock_extract.assert_called_once_with(
            "dQw4w9WgXcQ",
            fmt="text",
            lang=None,
            retries=0,
            retry_delay_ms=1000,
            disable_https=False,
            video_details=False,
            cache=None,
        )

    @patch("yt_transcript_fetcher.cli.extract")
    def test_options_forwarded(self, mock_extract: MagicMock, runner: CliRunner) -> None:
        mock_extract.return_value = "WEBVTT\n\n"

        result = runner.invoke(main, [
            "get", "https://youtu.be/dQw4w9WgXcQ",
            "--format", "VTT",
            "--lang", "pt-BR",
            "--retries", "3",
            "--retry-delay", "250",
            "--no-https",
        ])

        assert result.exit_code == 0
        kwargs = mock_extract.call_args.kwargs
        assert kwargs["fmt"] == "vtt"
        assert kwargs["lang"] == "pt-BR"
        assert kwargs["retries"] == 3
        assert kwargs["retry_delay_ms"] == 250
        assert kwargs["disable_https"] is True

    @patch("yt_transcript_fetcher.cli.extract")
    def test_cache_dir_builds_file_cache(self, mock_extract: MagicMock, runner: CliRunner, tmp_path) -> None:
        mock_extract.return_value = "text"

        result = runner.invoke(main, ["get", "dQw4w9WgXcQ", "--cache-dir", str(tmp_path), "--cache-ttl", "60"])

        assert result.exit_code == 0
        cache = mock_extract.call_args.kwargs["cache"]
        assert isinstance(cache, FileCache)
        assert cache.cache_dir == str(tmp_path)
        assert cache.default_ttl == 60

    def test_negative_retries_rejected(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["get", "dQw4w9WgXcQ", "--retries", "-1"])
        assert result.exit_code == 2

    @patch("yt_transcript_fetcher.cli.extract")
    def test_json_output(self, mock_extract: MagicMock, runner: CliRunner) -> None:
        mock_extract.return_value = {"video_id": "dQw4w9WgXcQ", "segment_count": 0, "segments": []}

        result = runner.invoke(main, ["get", "dQw4w9WgXcQ", "-f", "json", "--details"])

        assert result.exit_code == 0
        assert json.loads(result.output)["video_id"] == "dQw4w9WgXcQ"
        assert mock_extract.call_args.kwargs["video_details"] is True

    @patch("yt_transcript_fetcher.cli.extract")
    def test_output_file(self, mock_extract: MagicMock, runner: CliRunner, tmp_path) -> None:
        mock_extract.return_value = "1\n00:00:00,000 --> 00:00:01,000\nHi"
        out = tmp_path / "talk.srt"

        result = runner.invoke(main, ["get", "dQw4w9WgXcQ", "-f", "srt", "-o", str(out)])

        assert result.exit_code == 0
        assert out.read_text(encoding="utf-8") == "1\n00:00:00,000 --> 00:00:01,000\nHi\n"

    @patch("yt_transcript_fetcher.cli.extract")
    def test_verbose_flag(self, mock_extract: MagicMock, runner: CliRunner) -> None:
        mock_extract.return_value = "text"
        result = runner.invoke(main, ["--verbose", "get", "dQw4w9WgXcQ"])
        assert result.exit_code == 0


# ---------------------------------------------------------------------------
# get — error handling
# ---------------------------------------------------------------------------

class TestGetCommandErrors:
    """Errors print a one-line message and exit non-zero."""

    @patch("yt_transcript_fetcher.cli.extract")
    def test_transcript_error(self, mock_extract: MagicMock, runner: CliRunner) -> None:
        mock_extract.side_effect = VideoUnavailableError("dQw4w9WgXcQ")

        result = runner.invoke(main, ["get", "dQw4w9WgXcQ"])

        assert result.exit_code == 1
        assert "Error: Video is no longer available" in result.output

    @patch("yt_transcript_fetcher.cli.extract")
    def test_language_error_lists_alternatives(self, mock_extract: MagicMock, runner: CliRunner) -> None:
        mock_extract.side_effect = LanguageNotAvailableError("fr", ["en", "de"], "dQw4w9WgXcQ")

        result = runner.invoke(main, ["get", "dQw4w9WgXcQ", "--lang", "fr"])

        assert result.exit_code == 1
        assert "en, de" in result.output

    @patch("yt_transcript_fetcher.cli.extract")
    def test_cancelled(self, mock_extract: MagicMock, runner: CliRunner) -> None:
        mock_extract.side_effect = FetchCancelledError()
        result = runner.invoke(main, ["get", "dQw4w9WgXcQ"])
        assert result.exit_code == 130
