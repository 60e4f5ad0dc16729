"""
podium.llm.parsing - LLM output JSON parsing with validation.

Handles parsing LLM responses into structured JSON with error recovery.
"""

from __future__ import annotations

import json
import re
from typing import Any

from podium.exceptions import LLMResponseError
from podium.models import Narration

VALID_TONES = {"positive", "negative", "neutral"}


def extract_json_from_response(response: str) -> str:
    """Extract JSON from LLM response.

    Raises:
        LLMResponseError: If no JSON object found
    """
    text = response.strip()

    # Remove markdown code blocks
    if "```" in text:
        text = re.sub(r"```json\s*", "", text)
        text = re.sub(r"```\s*", "", text)
        text = text.strip()

    json_match = re.search(r"\{[\s\S]*\}", text)
    if json_match:
        return json_match.group(0)

    raise LLMResponseError("No JSON object found in response")


def repair_json(text: str) -> str:
    """Attempt to repair common JSON issues (trailing commas, unclosed braces)."""
    text = re.sub(r",(\s*[}\]])", r"\1", text)

    open_braces = text.count("{")
    close_braces = text.count("}")
    open_brackets = text.count("[")
    close_brackets = text.count("]")

    if open_brackets > close_brackets:
        text += "]" * (open_brackets - close_brackets)
    if open_braces > close_braces:
        text += "}" * (open_braces - close_braces)

    return text


def parse_llm_json(response: str) -> dict[str, Any]:
    """Parse JSON from LLM response with error recovery.

    Handles markdown code fences, trailing commas and text around the
    JSON object.

    Raises:
        LLMResponseError: If parsing fails
    """
    text = extract_json_from_response(response)

    for candidate in (text, repair_json(text)):
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data

    raise LLMResponseError(
        f"Failed to parse LLM response as JSON after repair attempts.\n\n"
        f"Response (first 500 chars):\n{text[:500]}"
    )


def normalize_tone(value: Any) -> str:
    """Reduce a tone answer to positive, negative or neutral."""
    if not isinstance(value, str):
        return "neutral"
    word = value.strip().strip(".!").lower()
    return word if word in VALID_TONES else "neutral"


def validate_narration_response(data: dict[str, Any]) -> Narration:
    """Validate and normalize a narration response.

    Raises:
        LLMResponseError: If the response carries no narration at all
    """
    if not any(data.get(key) for key in ("summary", "tone", "feedback")):
        raise LLMResponseError("Narration response has no summary, tone or feedback")

    return Narration(
        summary=str(data.get("summary") or "").strip(),
        tone=normalize_tone(data.get("tone")),
        feedback=str(data.get("feedback") or "").strip(),
    )
