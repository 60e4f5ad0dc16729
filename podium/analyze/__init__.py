"""
podium.analyze - Speech delivery analysis.

Pipeline Stages 2-4: Estimate pitch from decoded audio, measure fillers,
repetition and timing from the transcript, and fold everything into
composite energy, disfluency and cadence scores.
"""

from __future__ import annotations
