"""Tests for podium.validation module."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from podium.exceptions import DependencyError, ValidationError
from podium.models import TranscriptSegment
from podium.validation import check_ffmpeg, validate_media_file, validate_segments


class TestCheckFfmpeg:
    @patch("podium.validation.shutil.which", return_value=None)
    def test_missing(self, mock_which: MagicMock) -> None:
        with pytest.raises(DependencyError) as exc_info:
            check_ffmpeg()
        assert exc_info.value.dependency == "ffmpeg"
        assert "apt install ffmpeg" in exc_info.value.install_hint

    @patch("podium.validation.subprocess.run")
    @patch("podium.validation.shutil.which", return_value="/usr/bin/ffmpeg")
    def test_version(self, mock_which: MagicMock, mock_run: MagicMock) -> None:
        mock_run.return_value = MagicMock(stdout="ffmpeg version 6.1.1 Copyright (c)\n")
        info = check_ffmpeg()
        assert info == {"ffmpeg_path": "/usr/bin/ffmpeg", "ffmpeg_version": "6.1.1"}

    @patch("podium.validation.subprocess.run")
    @patch("podium.validation.shutil.which", return_value="/usr/bin/ffmpeg")
    def test_unreadable_version(self, mock_which: MagicMock, mock_run: MagicMock) -> None:
        mock_run.return_value = MagicMock(stdout="")
        assert check_ffmpeg()["ffmpeg_version"] == "unknown"


class TestValidateMediaFile:
    def test_valid(self, tmp_path: Path) -> None:
        path = tmp_path / "talk.mp4"
        path.write_bytes(b"x" * 10)
        info = validate_media_file(path)
        assert info["size_bytes"] == 10

    def test_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError, match="not found"):
            validate_media_file(tmp_path / "missing.mp4")

    def test_directory(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError, match="Not a file"):
            validate_media_file(tmp_path)

    def test_size_is_not_a_validation_error(self, tmp_path: Path) -> None:
        path = tmp_path / "talk.mp4"
        path.write_bytes(b"x" * (1024 * 1024))
        assert validate_media_file(path)["size_bytes"] == 1024 * 1024


class TestValidateSegments:
    def test_ordered(self, sample_segments) -> None:
        result = validate_segments(sample_segments)
        assert result["valid"]
        assert result["segment_count"] == 3

    def test_problems_reported(self) -> None:
        segments = [
            TranscriptSegment(start=0.0, end=2.0),
            TranscriptSegment(start=1.0, end=3.0),
            TranscriptSegment(start=0.5, end=0.2),
        ]
        result = validate_segments(segments)
        assert not result["valid"]
        assert any("overlaps segment 1" in w for w in result["warnings"])
        assert any("starts before segment 2" in w for w in result["warnings"])
        assert any("ends before it starts" in w for w in result["warnings"])

    def test_empty(self) -> None:
        result = validate_segments([])
        assert not result["valid"]
        assert result["segment_count"] == 0
