"""
Test configuration and shared fixtures.
"""

from __future__ import annotations

import json
from pathlib import Path

import numpy as np
import pytest

from podium.exceptions import DecodeError
from podium.extract.audio import AudioDecoder
from podium.models import TranscriptSegment


def make_sine(
    frequency: float,
    seconds: float = 1.0,
    sample_rate: int = 44100,
    amplitude: int = 10000,
) -> np.ndarray:
    """Generate an int16 sine tone."""
    t = np.arange(int(sample_rate * seconds)) / sample_rate
    return (amplitude * np.sin(2 * np.pi * frequency * t)).astype(np.int16)


class FakeDecoder(AudioDecoder):
    """Decoder that returns fixed samples and records what it was given."""

    def __init__(self, samples: np.ndarray | None = None, error: Exception | None = None):
        self.samples = samples if samples is not None else np.zeros(0, dtype=np.int16)
        self.error = error
        self.calls: list[bytes] = []

    def decode(self, data: bytes) -> np.ndarray:
        self.calls.append(data)
        if self.error is not None:
            raise self.error
        return self.samples


@pytest.fixture
def sine_220() -> np.ndarray:
    return make_sine(220.0, seconds=1.0)


@pytest.fixture
def tone_decoder(sine_220: np.ndarray) -> FakeDecoder:
    return FakeDecoder(samples=sine_220)


@pytest.fixture
def failing_decoder() -> FakeDecoder:
    return FakeDecoder(error=DecodeError("FFmpeg exited with status 1: invalid data"))


@pytest.fixture
def sample_transcript_dict() -> dict:
    """Return a sample Whisper-style transcript."""
    return {
        "text": "So I was um thinking about the project. You know it was like really hard. "
        "I just want to say I just want to help.",
        "language": "en",
        "segments": [
            {"start": 0.0, "end": 4.0, "text": "So I was um thinking about the project."},
            {"start": 4.5, "end": 8.0, "text": "You know it was like really hard."},
            {"start": 9.0, "end": 12.0, "text": "I just want to say I just want to help."},
        ],
    }


@pytest.fixture
def sample_segments(sample_transcript_dict: dict) -> list[TranscriptSegment]:
    return [TranscriptSegment(**seg) for seg in sample_transcript_dict["segments"]]


@pytest.fixture
def transcript_file(tmp_path: Path, sample_transcript_dict: dict) -> Path:
    path = tmp_path / "transcript.json"
    path.write_text(json.dumps(sample_transcript_dict), encoding="utf-8")
    return path


@pytest.fixture
def make_tone():
    """Return the sine tone factory."""
    return make_sine


@pytest.fixture
def silent_decoder() -> FakeDecoder:
    return FakeDecoder(samples=np.zeros(44100, dtype=np.int16))


@pytest.fixture
def fake_decoder():
    """Return the FakeDecoder class for tests that need their own samples or error."""
    return FakeDecoder
