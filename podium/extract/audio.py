"""
podium.extract.audio - FFmpeg audio decoding.

Streams an in-memory clip through FFmpeg and collects raw little-endian
signed 16-bit mono samples from its stdout. The decoder is an interface so
the engine can be driven by a fake in tests or by another transcoder.
"""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

import numpy as np

from podium.exceptions import DecodeError

logger = logging.getLogger(__name__)

PCM_DTYPE = np.dtype("<i2")


class AudioDecoder(ABC):
    @abstractmethod
    def decode(self, data: bytes) -> np.ndarray:
        """Decode an audio buffer to mono int16 PCM. Raises DecodeError."""


class FFmpegAudioDecoder(AudioDecoder):
    """Decode audio by piping it through an ffmpeg subprocess.

    Args:
        sample_rate: Output sample rate in Hz
        ffmpeg_path: FFmpeg executable name or path
        timeout: Seconds before the subprocess is killed (None = unbounded)
        max_bytes: Largest accepted input buffer (None = unbounded)
    """

    def __init__(
        self,
        sample_rate: int = 44100,
        ffmpeg_path: str = "ffmpeg",
        timeout: float | None = 60.0,
        max_bytes: int | None = None,
    ) -> None:
        self.sample_rate = sample_rate
        self.ffmpeg_path = ffmpeg_path
        self.timeout = timeout
        self.max_bytes = max_bytes

    @classmethod
    def from_config(cls, config) -> FFmpegAudioDecoder:
        """Create a decoder from an EngineConfig."""
        return cls(
            sample_rate=config.sample_rate,
            ffmpeg_path=config.ffmpeg_path,
            timeout=config.decode_timeout_seconds,
            max_bytes=config.max_audio_bytes,
        )

    def build_command(self) -> list[str]:
        return [
            self.ffmpeg_path,
            "-hide_banner",
            "-loglevel",
            "error",
            "-i",
            "pipe:0",
            "-vn",
            "-f",
            "s16le",
            "-acodec",
            "pcm_s16le",
            "-ac",
            "1",
            "-ar",
            str(self.sample_rate),
            "pipe:1",
        ]

    def decode(self, data: bytes) -> np.ndarray:
        if not data:
            raise DecodeError("Empty audio buffer")
        if self.max_bytes is not None and len(data) > self.max_bytes:
            raise DecodeError(
                f"Audio buffer is {format_size(len(data))}, "
                f"limit is {format_size(self.max_bytes)}"
            )

        try:
            proc = subprocess.run(
                self.build_command(),
                input=data,
                capture_output=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise DecodeError(f"FFmpeg not found: {self.ffmpeg_path}") from e
        except subprocess.TimeoutExpired as e:
            raise DecodeError(f"FFmpeg timed out after {self.timeout}s") from e
        except OSError as e:
            raise DecodeError(f"Could not start FFmpeg: {e}") from e

        if proc.returncode != 0:
            stderr = proc.stderr.decode("utf-8", errors="replace").strip()
            raise DecodeError(f"FFmpeg exited with status {proc.returncode}: {stderr}")

        return pcm_from_bytes(proc.stdout)


def pcm_from_bytes(raw: bytes) -> np.ndarray:
    """Interpret raw s16le bytes as int16 samples. A dangling odd byte is dropped."""
    usable = len(raw) - (len(raw) % PCM_DTYPE.itemsize)
    samples = np.frombuffer(raw[:usable], dtype=PCM_DTYPE)
    logger.debug("Decoded %d PCM samples", len(samples))
    return samples.astype(np.int16)


def read_media(path: Path) -> bytes:
    """Read an uploaded media file into memory.

    Raises:
        DecodeError: If the file cannot be read
    """
    try:
        return path.read_bytes()
    except OSError as e:
        raise DecodeError(f"Cannot read media file {path}: {e}") from e


def format_size(size: float) -> str:
    """Format a byte count in human-readable form."""
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"
