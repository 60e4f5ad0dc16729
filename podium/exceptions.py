"""
podium.exceptions - Custom exception classes.

All Podium-specific exceptions inherit from PodiumError.
"""


class PodiumError(Exception):
    """Base exception for all Podium errors."""

    pass


class ConfigError(PodiumError):
    """Configuration loading or validation error."""

    pass


class DecodeError(PodiumError):
    """Audio transcoding subprocess failed or was rejected."""

    pass


class TranscriptionError(PodiumError):
    """Transcription error."""

    pass


class LLMError(PodiumError):
    """LLM backend or prompt error."""

    pass


class LLMPrivacyError(LLMError):
    """Attempted to use cloud LLM in local privacy mode."""

    pass


class LLMResponseError(LLMError):
    """LLM returned malformed or unexpected response."""

    pass


class ValidationError(PodiumError):
    """Data validation error."""

    pass


class DependencyError(PodiumError):
    """Required dependency missing or misconfigured."""

    def __init__(self, dependency: str, message: str, install_hint: str | None = None):
        self.dependency = dependency
        self.message = message
        self.install_hint = install_hint
        super().__init__(f"{dependency}: {message}")
