"""
podium.analyze.engine - Metrics aggregation.

Runs every analysis stage for one clip and merges their results into a
RawMetrics record. The pitch stage (decode + estimate) runs on a worker
thread while the text stages run on the caller's thread; scoring waits
for both. A failing stage is logged and reported as unavailable, never
raised, so every call returns a complete record.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from podium.analyze.fillers import count_fillers
from podium.analyze.pitch import estimate_pitch
from podium.analyze.repetition import detect_repetition
from podium.analyze.scoring import compute_scores
from podium.analyze.timing import analyze_timing, count_sentences, count_words
from podium.config import EngineConfig
from podium.exceptions import DecodeError
from podium.extract.audio import AudioDecoder, FFmpegAudioDecoder
from podium.models import (
    NOT_AVAILABLE,
    FillerResult,
    PitchResult,
    RawMetrics,
    RepetitionResult,
    StageResult,
    TimingResult,
    TranscriptSegment,
)

logger = logging.getLogger(__name__)


def _run_stage(name: str, func: Callable[..., Any], *args: Any) -> StageResult:
    try:
        return StageResult(value=func(*args))
    except Exception as e:
        logger.warning("%s stage failed, continuing without it: %s", name, e)
        return StageResult.unavailable(f"{type(e).__name__}: {e}")


class MetricsEngine:
    """Speech delivery metrics engine.

    Holds only immutable configuration and a decoder, so one instance can
    serve concurrent requests.

    Args:
        config: Engine configuration (defaults if None)
        decoder: Audio decoder; an FFmpegAudioDecoder built from config if None
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        decoder: AudioDecoder | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.decoder = decoder or FFmpegAudioDecoder.from_config(self.config)

    def measure_pitch(self, audio: bytes | None) -> StageResult[PitchResult]:
        """Decode audio and estimate pitch.

        Returns an unavailable result when there is no audio, decoding
        fails, or no frame is voiced.
        """
        if not audio:
            logger.debug("No audio supplied, skipping pitch")
            return StageResult.unavailable("no audio")

        try:
            samples = self.decoder.decode(audio)
        except DecodeError as e:
            logger.warning("Audio decoding failed, pitch unavailable: %s", e)
            return StageResult.unavailable(str(e))
        except Exception as e:
            logger.warning("Audio decoder raised %s, pitch unavailable: %s", type(e).__name__, e)
            return StageResult.unavailable(f"{type(e).__name__}: {e}")

        result = _run_stage("Pitch estimation", estimate_pitch, samples, self.config)
        if result.error is None and result.value is None:
            logger.info("No voiced frames found, pitch unavailable")
        return result

    def analyze(
        self,
        transcript: str,
        segments: Sequence[TranscriptSegment] = (),
        audio: bytes | None = None,
    ) -> RawMetrics:
        """Compute the full metrics record for one clip.

        Args:
            transcript: Transcript text
            segments: Time-ordered transcript segments
            audio: Raw uploaded audio/video bytes, or None

        Returns:
            Fully populated RawMetrics
        """
        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="podium-pitch") as pool:
            pitch_future = pool.submit(self.measure_pitch, audio)

            word_count = count_words(transcript)
            sentence_count = count_sentences(transcript)
            fillers = _run_stage("Filler analysis", count_fillers, transcript)
            repetition = _run_stage("Repetition detection", detect_repetition, transcript)
            timing = _run_stage("Timing analysis", analyze_timing, word_count, segments)

            pitch = pitch_future.result()

        return self._merge(pitch, fillers, repetition, timing, word_count, sentence_count)

    def _merge(
        self,
        pitch: StageResult[PitchResult],
        fillers: StageResult[FillerResult],
        repetition: StageResult[RepetitionResult],
        timing: StageResult[TimingResult],
        word_count: int,
        sentence_count: int,
    ) -> RawMetrics:
        filler_result = fillers.value_or(FillerResult(total=0))
        repetition_result = repetition.value_or(RepetitionResult())
        timing_result = timing.value_or(TimingResult())
        pitch_result = pitch.value

        scores = compute_scores(
            wpm=timing_result.wpm,
            pitch_variation=pitch_result.variation if pitch_result else None,
            filler_total=filler_result.total,
            word_count=word_count,
            sentence_count=sentence_count,
            repetition_score=repetition_result.score,
            average_gap=timing_result.average_gap,
            gap_variation=timing_result.gap_variation,
            scoring=self.config.scoring,
        )

        return RawMetrics(
            wpm=timing_result.wpm,
            pitch=pitch_result.median if pitch_result else NOT_AVAILABLE,
            pitch_variation=pitch_result.variation if pitch_result else NOT_AVAILABLE,
            filler_word_total=filler_result.total,
            filler_word_breakdown=dict(filler_result.breakdown),
            repetitive_phrases=repetition_result.phrases,
            repetition_score=repetition_result.score,
            energy_score=scores.energy_score,
            energy_label=scores.energy_label,
            disfluency_score=scores.disfluency_score,
            disfluency_label=scores.disfluency_label,
            cadence_score=scores.cadence_score,
            cadence_description=scores.cadence_description,
        )
