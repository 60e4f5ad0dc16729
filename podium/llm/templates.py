"""
podium.llm.templates - Prompt template loading and rendering.

Uses Jinja2 to load prompt templates from the packaged prompts/ directory,
or from a user-supplied directory that overrides it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, Template

from podium.models import RawMetrics

PROMPTS_DIR = Path(__file__).parent.parent / "prompts"


class PromptTemplateManager:
    """Manages loading and rendering of prompt templates."""

    def __init__(self, prompts_dir: Path | None = None) -> None:
        search_path = [str(PROMPTS_DIR)]
        if prompts_dir is not None:
            search_path.insert(0, str(prompts_dir))
        self.env = Environment(
            loader=FileSystemLoader(search_path),
            autoescape=False,
            keep_trailing_newline=True,
        )
        self._cache: dict[str, Template] = {}

    def get_template(self, name: str) -> Template:
        if name not in self._cache:
            self._cache[name] = self.env.get_template(name)
        return self._cache[name]

    def render(self, template_name: str, variables: dict[str, Any]) -> str:
        return self.get_template(template_name).render(**variables)


def format_metrics_for_prompt(metrics: RawMetrics) -> str:
    """Format a metrics record as a readable block for the narration prompt."""
    if metrics.pitch_available:
        pitch = f"{metrics.pitch} Hz (variation {metrics.pitch_variation} Hz)"
    else:
        pitch = "not available"

    fillers = ", ".join(
        f"{label}: {count}" for label, count in sorted(metrics.filler_word_breakdown.items())
    )
    phrases = sorted(metrics.repetitive_phrases)

    lines = [
        f"Pace: {metrics.wpm} words per minute",
        f"Median pitch: {pitch}",
        f"Filler words: {metrics.filler_word_total}" + (f" ({fillers})" if fillers else ""),
        f"Repeated phrases: {metrics.repetition_score}",
    ]
    if phrases:
        shown = ", ".join(f'"{p}"' for p in phrases[:10])
        if len(phrases) > 10:
            shown += f" ... and {len(phrases) - 10} more"
        lines.append(f"  {shown}")
    lines += [
        f"Energy: {metrics.energy_score}/10 ({metrics.energy_label})",
        f"Disfluency: {metrics.disfluency_score}/10 ({metrics.disfluency_label})",
        f"Cadence: {metrics.cadence_score}/10 ({metrics.cadence_description})",
    ]
    return "\n".join(lines)
