"""
podium.models - Data records passed between pipeline stages.

Stage outputs are small frozen dataclasses; records that cross the
package boundary (transcripts in, metrics and narration out) are pydantic
models so they validate and serialize to JSON directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer

NOT_AVAILABLE = "N/A"

T = TypeVar("T")


class TranscriptSegment(BaseModel):
    """A time-bounded span of transcript, in seconds."""

    model_config = ConfigDict(frozen=True)

    start: float
    end: float
    text: str = ""


class Transcript(BaseModel):
    """Transcript text plus its ordered segments."""

    text: str = ""
    segments: list[TranscriptSegment] = Field(default_factory=list)
    language: str | None = None


@dataclass(frozen=True)
class PitchResult:
    median: float
    variation: float


@dataclass(frozen=True)
class FillerResult:
    total: int
    breakdown: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class RepetitionResult:
    phrases: frozenset[str] = frozenset()
    score: int = 0


@dataclass(frozen=True)
class TimingResult:
    wpm: float = 0.0
    average_gap: float = 0.0
    gap_variation: float = 0.0


@dataclass(frozen=True)
class Scores:
    energy_score: int
    energy_label: str
    disfluency_score: int
    disfluency_label: str
    cadence_score: int
    cadence_description: str


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """Outcome of one pipeline stage: a value, or an unavailable marker.

    A stage that ran but produced nothing (e.g. no voiced frames) has
    neither value nor error.
    """

    value: T | None = None
    error: str | None = None

    @property
    def available(self) -> bool:
        return self.value is not None

    @classmethod
    def unavailable(cls, error: str | None = None) -> StageResult[T]:
        return cls(value=None, error=error)

    def value_or(self, default: T) -> T:
        return self.value if self.value is not None else default


class RawMetrics(BaseModel):
    """The engine's output record. Created once per analysis, never mutated."""

    model_config = ConfigDict(frozen=True)

    wpm: float
    pitch: Union[float, str]
    pitch_variation: Union[float, str]
    filler_word_total: int
    filler_word_breakdown: dict[str, int]
    repetitive_phrases: frozenset[str]
    repetition_score: int
    energy_score: int
    energy_label: str
    disfluency_score: int
    disfluency_label: str
    cadence_score: int
    cadence_description: str

    @field_serializer("repetitive_phrases")
    def serialize_phrases(self, phrases: frozenset[str]) -> list[str]:
        return sorted(phrases)

    @property
    def pitch_available(self) -> bool:
        return self.pitch != NOT_AVAILABLE


class Narration(BaseModel):
    """Prose feedback produced by the narration LLM."""

    summary: str = ""
    tone: str = "neutral"
    feedback: str = ""


class AnalysisReport(BaseModel):
    """Everything the CLI writes for one analyzed clip."""

    source: str | None = None
    analyzed_at: str
    transcript: Transcript
    metrics: RawMetrics
    narration: Narration | None = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
