"""
podium.llm - LLM narration pass.

Pipeline Stage 5: Hand the transcript and computed metrics to a language
model and get back a short summary, a one-word tone and a feedback line.
"""

from __future__ import annotations
