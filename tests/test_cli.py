"""Tests for podium.cli module."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from podium import __version__
from podium.cli import app
from podium.config import CONFIG_FILENAME
from podium.exceptions import LLMError
from podium.extract.audio import FFmpegAudioDecoder

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_dir(tmp_path: Path, monkeypatch) -> Path:
    """Run every command from an empty directory so no podium.yaml is picked up."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def media_file(tmp_path: Path) -> Path:
    path = tmp_path / "talk.webm"
    path.write_bytes(b"\x1a\x45\xdf\xa3 not really webm")
    return path


@pytest.fixture
def decode_tone(sine_220):
    with patch.object(FFmpegAudioDecoder, "decode", return_value=sine_220) as mock:
        yield mock


class TestVersion:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"podium {__version__}" in result.output


class TestInit:
    def test_writes_config(self, isolated_dir: Path) -> None:
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 0
        assert (isolated_dir / CONFIG_FILENAME).exists()

    def test_refuses_overwrite(self, isolated_dir: Path) -> None:
        (isolated_dir / CONFIG_FILENAME).write_text("narrate: false\n", encoding="utf-8")
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 1
        assert "already exists" in result.output
        assert (isolated_dir / CONFIG_FILENAME).read_text(encoding="utf-8") == "narrate: false\n"

    def test_force(self, isolated_dir: Path) -> None:
        (isolated_dir / CONFIG_FILENAME).write_text("narrate: false\n", encoding="utf-8")
        result = runner.invoke(app, ["init", "--force"])
        assert result.exit_code == 0
        assert "engine:" in (isolated_dir / CONFIG_FILENAME).read_text(encoding="utf-8")


class TestMetrics:
    def test_transcript_only(self, transcript_file: Path, isolated_dir: Path) -> None:
        output = isolated_dir / "report.json"
        result = runner.invoke(app, ["metrics", str(transcript_file), "--output", str(output)])

        assert result.exit_code == 0, result.output
        assert "Delivery Metrics" in result.output
        assert "N/A" in result.output

        report = json.loads(output.read_text(encoding="utf-8"))
        assert report["metrics"]["pitch"] == "N/A"
        assert report["metrics"]["wpm"] == 130.0
        assert report["metrics"]["filler_word_total"] == 4
        assert report["narration"] is None
        assert report["source"] is None

    def test_with_audio(
        self, transcript_file: Path, media_file: Path, isolated_dir: Path, decode_tone
    ) -> None:
        output = isolated_dir / "report.json"
        result = runner.invoke(
            app,
            ["metrics", str(transcript_file), "--audio", str(media_file), "-o", str(output)],
        )

        assert result.exit_code == 0, result.output
        report = json.loads(output.read_text(encoding="utf-8"))
        assert report["metrics"]["pitch"] == pytest.approx(220.0, abs=2.0)
        decode_tone.assert_called_once()

    @patch("podium.extract.audio.subprocess.run")
    def test_oversized_audio_only_loses_pitch(
        self, mock_run, transcript_file: Path, isolated_dir: Path
    ) -> None:
        (isolated_dir / CONFIG_FILENAME).write_text(
            "engine:\n  max_audio_bytes: 10\n", encoding="utf-8"
        )
        clip = isolated_dir / "clip.wav"
        clip.write_bytes(b"\x00" * 100)
        output = isolated_dir / "report.json"

        result = runner.invoke(
            app, ["metrics", str(transcript_file), "--audio", str(clip), "-o", str(output)]
        )

        assert result.exit_code == 0, result.output
        report = json.loads(output.read_text(encoding="utf-8"))
        assert report["metrics"]["pitch"] == "N/A"
        assert report["metrics"]["pitch_variation"] == "N/A"
        assert report["metrics"]["filler_word_total"] == 4
        mock_run.assert_not_called()

    def test_missing_transcript(self, isolated_dir: Path) -> None:
        result = runner.invoke(app, ["metrics", str(isolated_dir / "missing.json")])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_bad_config(self, transcript_file: Path, isolated_dir: Path) -> None:
        (isolated_dir / CONFIG_FILENAME).write_text("engine:\n  frame_size: 1\n", encoding="utf-8")
        result = runner.invoke(app, ["metrics", str(transcript_file)])
        assert result.exit_code == 1
        assert "Error loading config" in result.output


class TestAnalyze:
    def test_with_transcript_no_narrate(
        self, transcript_file: Path, media_file: Path, isolated_dir: Path, decode_tone
    ) -> None:
        output = isolated_dir / "report.json"
        result = runner.invoke(
            app,
            [
                "analyze",
                str(media_file),
                "--transcript",
                str(transcript_file),
                "--no-narrate",
                "--output",
                str(output),
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Energy" in result.output
        report = json.loads(output.read_text(encoding="utf-8"))
        assert report["source"] == str(media_file)
        assert report["transcript"]["language"] == "en"
        assert report["metrics"]["repetition_score"] == 6
        assert report["narration"] is None

    @patch("podium.extract.audio.subprocess.run")
    def test_oversized_media_still_reports(
        self, mock_run, transcript_file: Path, isolated_dir: Path
    ) -> None:
        (isolated_dir / CONFIG_FILENAME).write_text(
            "engine:\n  max_audio_bytes: 10\n", encoding="utf-8"
        )
        clip = isolated_dir / "talk.mp4"
        clip.write_bytes(b"\x00" * 100)

        result = runner.invoke(
            app, ["analyze", str(clip), "--transcript", str(transcript_file), "--no-narrate"]
        )

        assert result.exit_code == 0, result.output
        assert "Delivery Metrics" in result.output
        mock_run.assert_not_called()

    def test_narration_failure_is_not_fatal(
        self, transcript_file: Path, media_file: Path, decode_tone
    ) -> None:
        with patch(
            "podium.llm.client.LLMClient.complete", side_effect=LLMError("connection refused")
        ):
            result = runner.invoke(
                app, ["analyze", str(media_file), "--transcript", str(transcript_file)]
            )

        assert result.exit_code == 0, result.output
        assert "Narration skipped" in result.output
        assert "Delivery Metrics" in result.output

    def test_narration(self, transcript_file: Path, media_file: Path, decode_tone) -> None:
        reply = '{"summary": "Earnest but repetitive.", "tone": "positive", "feedback": "Vary it."}'
        with patch("podium.llm.client.LLMClient.complete", return_value=reply):
            result = runner.invoke(
                app, ["analyze", str(media_file), "--transcript", str(transcript_file)]
            )

        assert result.exit_code == 0, result.output
        assert "Tone:" in result.output
        assert "positive" in result.output

    def test_missing_media(self, transcript_file: Path, isolated_dir: Path) -> None:
        result = runner.invoke(
            app,
            ["analyze", str(isolated_dir / "gone.mp4"), "--transcript", str(transcript_file)],
        )
        assert result.exit_code == 1
        assert "not found" in result.output


class TestValidate:
    def test_valid_transcript(self, transcript_file: Path) -> None:
        result = runner.invoke(app, ["validate", str(transcript_file)])
        assert result.exit_code == 0
        assert "3 segments" in result.output

    def test_overlapping_segments(self, isolated_dir: Path) -> None:
        path = isolated_dir / "overlap.json"
        path.write_text(
            json.dumps(
                {
                    "text": "a b",
                    "segments": [
                        {"start": 0.0, "end": 2.0, "text": "a"},
                        {"start": 1.0, "end": 3.0, "text": "b"},
                    ],
                }
            ),
            encoding="utf-8",
        )
        result = runner.invoke(app, ["validate", str(path)])
        assert result.exit_code == 1
        assert "overlaps" in result.output

    def test_malformed_transcript_exits_cleanly(self, isolated_dir: Path) -> None:
        path = isolated_dir / "nulls.json"
        path.write_text(
            json.dumps({"text": "a", "segments": [{"start": None, "end": 1.0, "text": "a"}]}),
            encoding="utf-8",
        )
        for command in (["validate", str(path)], ["metrics", str(path)]):
            result = runner.invoke(app, command)
            assert result.exit_code == 1
            assert "Malformed" in result.output
            assert not isinstance(result.exception, TypeError)


class TestDoctor:
    @patch("podium.validation.shutil.which", return_value=None)
    def test_missing_ffmpeg(self, mock_which) -> None:
        result = runner.invoke(app, ["doctor"])
        assert result.exit_code == 1
        assert "Missing" in result.output

    @patch("podium.validation.subprocess.run")
    @patch("podium.validation.shutil.which", return_value="/usr/bin/ffmpeg")
    def test_all_passed(self, mock_which, mock_run) -> None:
        mock_run.return_value.stdout = "ffmpeg version 6.1.1 Copyright\n"
        result = runner.invoke(app, ["doctor"])
        assert result.exit_code == 0
        assert "All checks passed" in result.output
