"""
podium.analyze.timing - Speaking rate and pause statistics.

Derives words-per-minute and inter-segment gap statistics from the
segment timestamps supplied by the transcription service.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

import numpy as np

from podium.models import TimingResult, TranscriptSegment

SENTENCE_BOUNDARY = re.compile(r"[.!?]+")


def count_words(text: str) -> int:
    return len(text.split()) if isinstance(text, str) else 0


def count_sentences(text: str) -> int:
    """Count sentences by splitting on runs of '.', '!' and '?'."""
    if not isinstance(text, str):
        return 0
    return sum(1 for part in SENTENCE_BOUNDARY.split(text) if part.strip())


def words_per_minute(word_count: int, segments: Sequence[TranscriptSegment]) -> float:
    """Words per minute over the span from the first segment start to the last end.

    Returns 0 when there are no segments or the span is not positive.
    """
    if not segments:
        return 0.0

    duration = segments[-1].end - segments[0].start
    if duration <= 0:
        return 0.0

    return round(word_count / (duration / 60), 2)


def gap_statistics(segments: Sequence[TranscriptSegment]) -> tuple[float, float]:
    """Mean and population standard deviation of the pauses between segments.

    Only strictly positive gaps are included; touching or overlapping
    segments contribute nothing.

    Returns:
        Tuple of (average_gap, gap_std), both 0 when no positive gap exists
    """
    gaps = [
        following.start - current.end
        for current, following in zip(segments, segments[1:])
        if following.start - current.end > 0
    ]
    if not gaps:
        return 0.0, 0.0

    values = np.asarray(gaps, dtype=np.float64)
    return float(np.mean(values)), float(np.std(values))


def analyze_timing(word_count: int, segments: Sequence[TranscriptSegment]) -> TimingResult:
    average_gap, gap_variation = gap_statistics(segments)
    return TimingResult(
        wpm=words_per_minute(word_count, segments),
        average_gap=average_gap,
        gap_variation=gap_variation,
    )
