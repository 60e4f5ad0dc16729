"""
podium.analyze.scoring - Composite delivery score calculation.

Folds pace, pitch variation, filler density, repetition and pausing into
three bounded integer scores with human-readable labels. The formulas are
simple monotonic heuristics; their constants live in ScoringConfig.
"""

from __future__ import annotations

import math

from podium.config import ScoringConfig
from podium.models import Scores


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always rounding up."""
    return int(math.floor(value + 0.5))


def _filler_ratio(filler_total: int, word_count: int) -> float:
    return filler_total / word_count if word_count > 0 else 0.0


def compute_energy_score(
    wpm: float,
    pitch_variation: float | None,
    scoring: ScoringConfig | None = None,
) -> int:
    """Energy from pace and pitch movement, 0-10.

    Args:
        wpm: Words per minute
        pitch_variation: Pitch standard deviation in Hz; None counts as 0
        scoring: Score constants

    Returns:
        Integer score between 0 and 10
    """
    scoring = scoring or ScoringConfig()
    pace = min(1.0, max(0.0, wpm) / scoring.energy_reference_wpm)
    movement = min(1.0, max(0.0, pitch_variation or 0.0) / scoring.energy_reference_pitch_variation)
    return round_half_up(10 * ((pace + movement) / 2))


def compute_disfluency_score(
    filler_total: int,
    word_count: int,
    sentence_count: int,
    repetition_score: int,
    scoring: ScoringConfig | None = None,
) -> int:
    """Fluency of wording, 1-10 (higher is smoother)."""
    scoring = scoring or ScoringConfig()
    score = 10.0

    score -= min(
        scoring.filler_density_max_penalty,
        scoring.filler_density_weight * _filler_ratio(filler_total, word_count),
    )
    score -= min(scoring.repetition_max_penalty, repetition_score)

    average_sentence_length = word_count / max(1, sentence_count)
    if not scoring.sentence_length_min <= average_sentence_length <= scoring.sentence_length_max:
        score -= scoring.sentence_length_penalty

    return round_half_up(max(1.0, score))


def compute_cadence_score(
    wpm: float,
    average_gap: float,
    gap_variation: float,
    filler_total: int,
    word_count: int,
    scoring: ScoringConfig | None = None,
) -> int:
    """Consistency of pacing and pausing, 1-10 (higher is steadier)."""
    scoring = scoring or ScoringConfig()
    score = 10.0

    score -= min(scoring.gap_max_penalty, scoring.gap_weight * average_gap)
    score -= min(scoring.gap_variation_max_penalty, scoring.gap_variation_weight * gap_variation)
    score -= min(
        scoring.wpm_max_penalty,
        abs(wpm - scoring.target_wpm) / scoring.wpm_deviation_scale,
    )
    score -= min(
        scoring.cadence_filler_max_penalty,
        scoring.cadence_filler_weight * _filler_ratio(filler_total, word_count),
    )

    return round_half_up(max(1.0, score))


def energy_label(score: int) -> str:
    if score > 7:
        return "High"
    elif score >= 4:
        return "Moderate"
    return "Low"


def disfluency_label(score: int) -> str:
    if score > 7:
        return "Smooth"
    elif score >= 4:
        return "Somewhat Choppy"
    return "Very Choppy"


def cadence_description(score: int) -> str:
    if score > 8:
        return "Very Smooth"
    elif score >= 6:
        return "Smooth"
    elif score >= 4:
        return "Uneven"
    return "Choppy"


def compute_scores(
    wpm: float,
    pitch_variation: float | None,
    filler_total: int,
    word_count: int,
    sentence_count: int,
    repetition_score: int,
    average_gap: float,
    gap_variation: float,
    scoring: ScoringConfig | None = None,
) -> Scores:
    """Compute all three composite scores and their labels."""
    scoring = scoring or ScoringConfig()

    energy = compute_energy_score(wpm, pitch_variation, scoring)
    disfluency = compute_disfluency_score(
        filler_total, word_count, sentence_count, repetition_score, scoring
    )
    cadence = compute_cadence_score(
        wpm, average_gap, gap_variation, filler_total, word_count, scoring
    )

    return Scores(
        energy_score=energy,
        energy_label=energy_label(energy),
        disfluency_score=disfluency,
        disfluency_label=disfluency_label(disfluency),
        cadence_score=cadence,
        cadence_description=cadence_description(cadence),
    )
