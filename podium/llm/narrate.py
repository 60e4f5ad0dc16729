"""
podium.llm.narrate - Narration pass.

Turns the transcript and the computed metrics into a summary, a tone label
and one line of feedback. The metrics are passed as context only; the
model's reply never feeds back into them.
"""

from __future__ import annotations

import logging
from typing import Any

from podium.llm.parsing import parse_llm_json, validate_narration_response
from podium.llm.templates import PromptTemplateManager, format_metrics_for_prompt
from podium.models import Narration, RawMetrics

logger = logging.getLogger(__name__)


def narrate(
    transcript: str,
    metrics: RawMetrics,
    client: Any,
    template_manager: PromptTemplateManager | None = None,
    console=None,
) -> Narration:
    """Ask the LLM to narrate a metrics record.

    Args:
        transcript: Transcript text
        metrics: Metrics computed by the engine
        client: LLMClient instance
        template_manager: Prompt templates (packaged defaults if None)
        console: Optional rich console for output

    Returns:
        Narration

    Raises:
        LLMError: If the request fails or the reply cannot be parsed
    """
    template_manager = template_manager or PromptTemplateManager()

    prompt = template_manager.render(
        "narration.txt",
        {
            "TRANSCRIPT": transcript.strip() or "(no speech detected)",
            "METRICS": format_metrics_for_prompt(metrics),
        },
    )

    if console:
        console.print(f"[dim]  Sending prompt ({len(prompt)} chars)...[/dim]")
    logger.debug("Narration prompt is %d chars", len(prompt))

    response = client.complete(prompt)
    return validate_narration_response(parse_llm_json(response))
