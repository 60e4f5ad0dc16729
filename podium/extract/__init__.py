"""
podium.extract - Audio decoding.

Pipeline Stage 1: Turn an uploaded clip of any container/codec into the
mono 16-bit PCM signal the pitch estimator works on.
"""

from __future__ import annotations
