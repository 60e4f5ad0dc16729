"""
podium.validation - Dependency checks and input validation.

Validates the environment and the transcript/media inputs before analysis.
"""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from podium.exceptions import DependencyError, ValidationError
from podium.models import TranscriptSegment


def check_ffmpeg(ffmpeg_path: str = "ffmpeg") -> dict[str, str]:
    """Check that FFmpeg is installed and get its version.

    Returns:
        Dict with 'ffmpeg_path' and 'ffmpeg_version'

    Raises:
        DependencyError: If FFmpeg is not found
    """
    resolved = shutil.which(ffmpeg_path)
    if not resolved:
        raise DependencyError(
            "ffmpeg",
            f"'{ffmpeg_path}' not found in PATH",
            "Install with: brew install ffmpeg (macOS) or apt install ffmpeg (Linux)",
        )

    result = {"ffmpeg_path": resolved}
    try:
        proc = subprocess.run(
            [resolved, "-version"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        version_line = proc.stdout.split("\n")[0]
        result["ffmpeg_version"] = version_line.split()[2] if version_line else "unknown"
    except (subprocess.TimeoutExpired, IndexError):
        result["ffmpeg_version"] = "unknown"

    return result


def validate_media_file(path: Path) -> dict[str, Any]:
    """Validate a media file exists and is a regular file.

    Size is not checked here; the decoder enforces max_audio_bytes so an
    oversized clip only loses its pitch metrics.

    Raises:
        ValidationError: If file doesn't exist or is a directory
    """
    if not path.exists():
        raise ValidationError(f"File not found: {path}")

    if not path.is_file():
        raise ValidationError(f"Not a file: {path}")

    return {
        "path": str(path),
        "exists": True,
        "size_bytes": path.stat().st_size,
    }


def validate_segments(segments: Sequence[TranscriptSegment]) -> dict[str, Any]:
    """Check transcript segments for ordering problems.

    The engine tolerates all of these; they are reported so the user knows
    the timing metrics may be skewed.

    Returns:
        Dict with 'valid' and 'warnings'
    """
    warnings = []

    for i, seg in enumerate(segments):
        if seg.end < seg.start:
            warnings.append(f"Segment {i + 1} ends before it starts ({seg.start} > {seg.end})")
        if i > 0:
            previous = segments[i - 1]
            if seg.start < previous.start:
                warnings.append(f"Segment {i + 1} starts before segment {i}")
            elif seg.start < previous.end:
                warnings.append(f"Segment {i + 1} overlaps segment {i}")

    if not segments:
        warnings.append("No segments; words per minute and pauses will be 0")

    return {
        "valid": not warnings,
        "warnings": warnings,
        "segment_count": len(segments),
    }
