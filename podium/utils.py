"""
podium.utils - Shared utility functions.

Formatting helpers used by the CLI output.
"""

from __future__ import annotations


def format_duration(seconds: float) -> str:
    """Format seconds as HH:MM:SS or MM:SS.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted string (HH:MM:SS if >= 1 hour, otherwise MM:SS)
    """
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def get_score_style(score: int) -> str:
    """Get rich style for a 0-10 delivery score.

    Returns:
        "green" (above 7), "yellow" (4 to 7), or "red" (below 4)
    """
    if score > 7:
        return "green"
    elif score >= 4:
        return "yellow"
    return "red"
