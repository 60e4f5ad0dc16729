"""
podium.transcribe - Speech-to-text adapters.

Turns an uploaded clip into transcript text plus timed segments, either
with a local Whisper model or an OpenAI-compatible transcription API.
"""

from __future__ import annotations
