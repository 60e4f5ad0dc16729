"""
podium.transcribe.engine - Whisper transcription engine.

Uses faster-whisper for local transcription or litellm to reach an
OpenAI-compatible whisper endpoint. Produces transcript text with
segment-level timestamps; word timings are not needed downstream.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from podium.exceptions import TranscriptionError
from podium.io import read_json
from podium.models import Transcript, TranscriptSegment

logger = logging.getLogger(__name__)


def transcribe_media(
    media_path: Path,
    backend: str = "faster",
    model: str = "small",
    language: str | None = None,
    console=None,
) -> Transcript:
    """Transcribe a media file using Whisper.

    Args:
        media_path: Path to audio or video file
        backend: Whisper backend (faster, openai)
        model: Model name (faster-whisper size, or API model such as whisper-1)
        language: Language code (auto-detect if None)
        console: Optional rich console for output

    Returns:
        Transcript with text and segments

    Raises:
        TranscriptionError: If transcription fails
    """
    if console:
        console.print(f"[dim]  Transcribing with {backend} ({model})...[/dim]")

    try:
        if backend == "faster":
            result = _transcribe_faster(media_path, model, language)
        elif backend == "openai":
            result = _transcribe_openai(media_path, model, language)
        else:
            raise TranscriptionError(f"Unknown backend: {backend}")

        return parse_whisper_result(result, language)

    except TranscriptionError:
        raise
    except Exception as e:
        raise TranscriptionError(f"Transcription failed: {e}") from e


def _transcribe_faster(
    media_path: Path,
    model: str,
    language: str | None,
) -> dict[str, Any]:
    """Transcribe using faster-whisper."""
    try:
        from faster_whisper import WhisperModel
    except ImportError as e:
        raise TranscriptionError(
            "faster-whisper not installed. Install with: pip install 'podium[whisper]'"
        ) from e

    model_instance = WhisperModel(model, device="auto", compute_type="auto")

    kwargs: dict[str, Any] = {}
    if language:
        kwargs["language"] = language

    segments, info = model_instance.transcribe(str(media_path), **kwargs)

    return {
        "language": info.language,
        "segments": [
            {"start": segment.start, "end": segment.end, "text": segment.text}
            for segment in segments
        ],
    }


def _transcribe_openai(
    media_path: Path,
    model: str,
    language: str | None,
) -> dict[str, Any]:
    """Transcribe through litellm's OpenAI-compatible transcription call."""
    import litellm

    litellm.telemetry = False

    kwargs: dict[str, Any] = {"response_format": "verbose_json"}
    if language:
        kwargs["language"] = language

    with open(media_path, "rb") as f:
        response = litellm.transcription(model=model, file=f, **kwargs)

    segments = getattr(response, "segments", None) or []
    return {
        "text": getattr(response, "text", "") or "",
        "language": getattr(response, "language", None),
        "segments": [_as_dict(s) for s in segments],
    }


def _as_dict(item: Any) -> dict[str, Any]:
    if isinstance(item, dict):
        return item
    if hasattr(item, "model_dump"):
        return item.model_dump()
    return {
        "start": getattr(item, "start", 0),
        "end": getattr(item, "end", 0),
        "text": getattr(item, "text", ""),
    }


def parse_whisper_result(result: dict[str, Any], language: str | None = None) -> Transcript:
    """Parse a Whisper result dict into a Transcript.

    Segment text is stripped; the transcript text is taken from the result
    when present, otherwise joined from the segments.

    Raises:
        TranscriptionError: If a segment or the text has the wrong type
    """
    try:
        segments = [
            TranscriptSegment(
                start=float(seg.get("start", 0)),
                end=float(seg.get("end", 0)),
                text=str(seg.get("text") or "").strip(),
            )
            for seg in result.get("segments") or []
        ]
    except (AttributeError, TypeError, ValueError) as e:
        raise TranscriptionError(f"Malformed transcript segment: {e}") from e

    text = result.get("text")
    if not text:
        text = " ".join(seg.text for seg in segments if seg.text)
    elif not isinstance(text, str):
        raise TranscriptionError(f"Transcript text must be a string, got {type(text).__name__}")

    try:
        return Transcript(
            text=text.strip(),
            segments=segments,
            language=result.get("language") or language,
        )
    except ValidationError as e:
        raise TranscriptionError(f"Malformed transcript: {e}") from e


def load_transcript(path: Path) -> Transcript:
    """Load a transcript produced by an external transcription service.

    Accepts the Whisper-style JSON layout ({"text", "language", "segments"}).

    Raises:
        TranscriptionError: If the file is missing, not valid JSON or malformed
    """
    try:
        data = read_json(path)
    except FileNotFoundError as e:
        raise TranscriptionError(f"Transcript not found: {path}") from e
    except ValueError as e:
        raise TranscriptionError(f"Transcript is not valid JSON: {path}: {e}") from e

    if not isinstance(data, dict):
        raise TranscriptionError(f"Transcript must be a JSON object: {path}")

    transcript = parse_whisper_result(data)
    logger.debug("Loaded transcript %s with %d segment(s)", path, len(transcript.segments))
    return transcript
