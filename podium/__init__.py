"""
Podium - speech delivery metrics for recorded talks.

Takes a recorded clip and its transcript and produces a delivery report
through a short pipeline: audio decoding → pitch estimation → lexical
analysis (fillers, repetition, timing) → composite scoring → LLM narration.
"""

__version__ = "0.1.0"
