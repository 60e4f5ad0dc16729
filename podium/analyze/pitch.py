"""
podium.analyze.pitch - Fundamental frequency estimation.

Splits the PCM signal into fixed, non-overlapping frames, estimates F0 per
frame and reduces the estimates to a median pitch and a pitch-variation
statistic. Two backends are available: a per-frame YIN implementation in
numpy (default) and librosa's probabilistic YIN.

The YIN backend decides voicing per frame: a frame whose normalized
difference never dips below the threshold contributes no estimate, so
silence and noise do not pull the median. librosa.yin always returns a
frequency, and librosa.pyin smooths voicing across frames.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from podium.config import EngineConfig
from podium.models import PitchResult

logger = logging.getLogger(__name__)


def frame_signal(samples: np.ndarray, frame_size: int) -> np.ndarray:
    """Split samples into full, non-overlapping frames.

    Trailing samples that do not fill a frame are dropped, not padded.

    Returns:
        2-D array of shape (n_frames, frame_size)
    """
    n_frames = len(samples) // frame_size
    return np.asarray(samples[: n_frames * frame_size]).reshape(n_frames, frame_size)


def yin_frequency(frame: np.ndarray, sample_rate: int, threshold: float = 0.1) -> float | None:
    """Estimate F0 of one frame with the YIN algorithm.

    Args:
        frame: Frame samples (any numeric dtype)
        sample_rate: Sample rate in Hz
        threshold: Absolute threshold on the cumulative mean normalized
            difference; a frame with no dip below it is unvoiced

    Returns:
        Frequency in Hz, or None for silence/unvoiced frames
    """
    x = np.asarray(frame, dtype=np.float64)
    window = len(x) // 2
    if window < 3:
        return None

    # d(tau) = e(0) + e(tau) - 2 * r(tau), all over a window of `window` samples
    energy = np.concatenate(([0.0], np.cumsum(x * x)))
    lag_energy = energy[window : 2 * window] - energy[:window]
    acf = np.correlate(x[: 2 * window - 1], x[:window], mode="valid")
    diff = np.maximum(energy[window] + lag_energy - 2.0 * acf, 0.0)
    diff[0] = 0.0

    running = np.cumsum(diff[1:])
    cmnd = np.ones(window)
    with np.errstate(divide="ignore", invalid="ignore"):
        normalized = diff[1:] * np.arange(1, window) / running
    cmnd[1:] = np.where(running > 0, normalized, 1.0)

    below = np.flatnonzero(cmnd[2:] < threshold)
    if len(below) == 0:
        return None

    tau = int(below[0]) + 2
    while tau + 1 < window and cmnd[tau + 1] < cmnd[tau]:
        tau += 1

    better_tau = _parabolic_interpolation(cmnd, tau)
    if better_tau <= 0:
        return None

    frequency = sample_rate / better_tau
    if not np.isfinite(frequency) or frequency <= 0 or frequency > sample_rate / 2:
        return None
    return float(frequency)


def _parabolic_interpolation(values: np.ndarray, tau: int) -> float:
    x0 = tau - 1 if tau > 0 else tau
    x2 = tau + 1 if tau + 1 < len(values) else tau

    if x0 == tau:
        return float(tau if values[tau] <= values[x2] else x2)
    if x2 == tau:
        return float(tau if values[tau] <= values[x0] else x0)

    s0, s1, s2 = values[x0], values[tau], values[x2]
    denominator = 2.0 * (2.0 * s1 - s2 - s0)
    if denominator == 0:
        return float(tau)
    return float(tau + (s2 - s0) / denominator)


def _yin_estimates(frames: np.ndarray, config: EngineConfig) -> list[float]:
    estimates = []
    for frame in frames:
        frequency = yin_frequency(frame, config.sample_rate, config.yin_threshold)
        if frequency is not None:
            estimates.append(frequency)
    return estimates


def _pyin_estimates(samples: np.ndarray, config: EngineConfig) -> list[float]:
    import librosa

    if len(samples) < config.frame_size:
        return []

    audio = np.asarray(samples, dtype=np.float32) / 32768.0
    f0, voiced_flags, _ = librosa.pyin(
        audio,
        fmin=config.pitch_fmin,
        fmax=config.pitch_fmax,
        sr=config.sample_rate,
        frame_length=config.frame_size,
        hop_length=config.frame_size,
        center=False,
    )
    if f0 is None:
        return []

    voiced_f0 = f0[voiced_flags]
    voiced_f0 = voiced_f0[~np.isnan(voiced_f0)]
    return [float(v) for v in voiced_f0 if v > 0]


def summarize_pitch(estimates: Sequence[float]) -> PitchResult | None:
    """Reduce per-frame estimates to median and population standard deviation.

    The median is the element at index n // 2 of the sorted estimates, so
    even-length inputs take the upper middle value rather than an average.
    """
    if not estimates:
        return None

    ordered = sorted(estimates)
    median = ordered[len(ordered) // 2]
    variation = float(np.std(np.asarray(ordered, dtype=np.float64)))

    return PitchResult(median=round(float(median), 2), variation=round(variation, 2))


def estimate_pitch(samples: np.ndarray, config: EngineConfig | None = None) -> PitchResult | None:
    """Estimate median pitch and pitch variation for a PCM signal.

    Args:
        samples: Mono PCM samples at config.sample_rate
        config: Engine configuration (defaults if None)

    Returns:
        PitchResult, or None when no frame yielded an estimate
    """
    config = config or EngineConfig()

    if config.pitch_backend == "pyin":
        estimates = _pyin_estimates(samples, config)
    else:
        frames = frame_signal(samples, config.frame_size)
        estimates = _yin_estimates(frames, config)

    logger.debug(
        "Pitch backend %s produced %d estimate(s) from %d samples",
        config.pitch_backend,
        len(estimates),
        len(samples),
    )
    return summarize_pitch(estimates)
