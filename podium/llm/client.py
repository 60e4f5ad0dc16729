"""
podium.llm.client - LLM backend abstraction using litellm.

Provides a unified interface for Ollama, LM Studio, Claude, and OpenAI
with privacy mode enforcement and retry logic.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from podium.exceptions import LLMError, LLMPrivacyError, LLMResponseError

logger = logging.getLogger(__name__)


class LLMClient:
    """LLM client wrapper with privacy mode enforcement and retry logic."""

    def __init__(
        self,
        backend: str = "ollama",
        model: str = "llama3.1:8b-instruct-q4_K_M",
        privacy_mode: str = "local",
        timeout: int = 120,
        max_retries: int = 3,
        retry_delay: float = 2.0,
    ) -> None:
        self.backend = backend
        self.model = model
        self.privacy_mode = privacy_mode
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._cloud_backends = {"claude", "openai"}

    def _get_model_string(self) -> str:
        """Get the model string for litellm based on backend."""
        if self.backend == "ollama":
            return f"ollama/{self.model}"
        elif self.backend == "lmstudio":
            return f"openai/{self.model}"
        elif self.backend == "claude":
            return f"anthropic/{self.model}"
        return self.model

    def _get_api_base(self) -> str | None:
        if self.backend == "ollama":
            return "http://localhost:11434"
        elif self.backend == "lmstudio":
            return "http://localhost:1234/v1"
        return None

    def _check_privacy(self) -> None:
        """Check if cloud API is allowed in current privacy mode."""
        if self.privacy_mode == "local" and self.backend in self._cloud_backends:
            raise LLMPrivacyError(
                f"Cloud LLM backend '{self.backend}' not allowed in local privacy mode. "
                f"Set privacy_mode: hybrid in podium.yaml to enable cloud APIs."
            )

    def complete(
        self,
        prompt: str,
        max_tokens: int = 1024,
        temperature: float = 0.3,
    ) -> str:
        """Send prompt to LLM and get completion with retry logic.

        Args:
            prompt: The prompt string
            max_tokens: Maximum tokens in response
            temperature: Sampling temperature

        Returns:
            LLM response text

        Raises:
            LLMPrivacyError: If cloud API used in local mode
            LLMResponseError: If the response has no content
            LLMError: If LLM request fails after all retries
        """
        self._check_privacy()

        try:
            import litellm
        except ImportError as e:
            raise LLMError("litellm not installed. Install with: pip install litellm") from e

        litellm.telemetry = False

        model = self._get_model_string()
        kwargs: dict[str, Any] = {}
        api_base = self._get_api_base()
        if api_base:
            kwargs["api_base"] = api_base

        last_error: Exception | None = None

        for attempt in range(self.max_retries):
            if attempt > 0:
                logger.info("Retry %d/%d for %s", attempt + 1, self.max_retries, model)

            try:
                response = litellm.completion(
                    model=model,
                    messages=[{"role": "user", "content": prompt}],
                    max_tokens=max_tokens,
                    temperature=temperature,
                    timeout=self.timeout,
                    **kwargs,
                )
                return _response_content(response)

            except LLMResponseError:
                raise
            except Exception as e:
                last_error = e
                error_str = str(e).lower()

                if "rate limit" in error_str:
                    logger.warning("Rate limited by %s, waiting", self.backend)
                    time.sleep(self.retry_delay * 2)
                    continue

                logger.warning("LLM request to %s failed: %s", self.backend, e)
                if attempt < self.max_retries - 1:
                    time.sleep(self.retry_delay)

        raise LLMError(
            f"LLM request failed after {self.max_retries} retries: {last_error}"
        ) from last_error


def _response_content(response: Any) -> str:
    choices = getattr(response, "choices", [])
    if not choices:
        raise LLMResponseError("Empty response from LLM")

    message = getattr(choices[0], "message", None)
    if message is None:
        raise LLMResponseError("No message in LLM response")

    content = getattr(message, "content", None)
    if content is None:
        raise LLMResponseError("No content in LLM message")

    return content


def create_client_from_config(config: Any) -> LLMClient:
    """Create LLM client from PodiumConfig."""
    return LLMClient(
        backend=config.llm_backend,
        model=config.llm_model,
        privacy_mode=config.privacy_mode,
    )
