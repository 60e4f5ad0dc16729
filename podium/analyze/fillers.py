"""
podium.analyze.fillers - Filler-word detection.

Scans lower-cased whitespace tokens left to right with one token of
lookahead and matches them against an ordered list of rules. The first
rule that matches at a position wins and consumes its tokens, so two-word
fillers never overlap with single-word ones.

Ambiguous function words ("like", "so") are only counted in contexts that
look like discourse use; false positives on common words would otherwise
dominate the count.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from podium.models import FillerResult

logger = logging.getLogger(__name__)

DETERMINERS = frozenset(
    {"a", "an", "the", "this", "that", "these", "those", "my", "your", "his", "her", "our", "their"}
)
PRONOUNS = frozenset({"i", "you", "he", "she", "we", "they", "it"})


@dataclass(frozen=True)
class TwoTokenRule:
    first: str
    second: str

    @property
    def label(self) -> str:
        return f"{self.first} {self.second}"

    def match(self, token: str, next_token: str | None) -> int:
        return 2 if token == self.first and next_token == self.second else 0


@dataclass(frozen=True)
class SingleTokenRule:
    tokens: frozenset[str]

    def match(self, token: str, next_token: str | None) -> int:
        return 1 if token in self.tokens else 0


@dataclass(frozen=True)
class ConditionalRule:
    """Single-token filler that only counts when the next token allows it."""

    token: str
    when: Callable[[str | None], bool]

    def match(self, token: str, next_token: str | None) -> int:
        return 1 if token == self.token and self.when(next_token) else 0


def _like_is_filler(next_token: str | None) -> bool:
    # "like I...", "like, um..." are disfluent regardless of suffix
    if not next_token or next_token in PRONOUNS or next_token in {"um", "uh", "so", "like"}:
        return True
    # "like the...", "like running" read as comparative/verb use
    if next_token in DETERMINERS or next_token.endswith(("ing", "ed")):
        return False
    return True


def _so_is_filler(next_token: str | None) -> bool:
    return not next_token or next_token in PRONOUNS or next_token in {"um", "uh", "like"}


DEFAULT_RULES: tuple[TwoTokenRule | SingleTokenRule | ConditionalRule, ...] = (
    TwoTokenRule("you", "know"),
    TwoTokenRule("i", "mean"),
    SingleTokenRule(frozenset({"um", "uh", "basically"})),
    ConditionalRule("like", _like_is_filler),
    ConditionalRule("so", _so_is_filler),
)


def tokenize(text: str) -> list[str]:
    return text.lower().split()


def count_fillers(
    text: str,
    rules: Sequence[TwoTokenRule | SingleTokenRule | ConditionalRule] = DEFAULT_RULES,
) -> FillerResult:
    """Count filler expressions in transcript text.

    Args:
        text: Transcript text
        rules: Ordered rules; the first match at a position wins

    Returns:
        FillerResult with total and per-label breakdown
    """
    if not isinstance(text, str):
        logger.warning("Filler analysis skipped: transcript is %s, not str", type(text).__name__)
        return FillerResult(total=0, breakdown={})

    tokens = tokenize(text)
    counts: Counter[str] = Counter()
    i = 0

    while i < len(tokens):
        token = tokens[i]
        next_token = tokens[i + 1] if i + 1 < len(tokens) else None
        consumed = 0

        for rule in rules:
            consumed = rule.match(token, next_token)
            if consumed:
                label = rule.label if isinstance(rule, TwoTokenRule) else token
                counts[label] += 1
                break

        i += consumed or 1

    breakdown = dict(counts)
    return FillerResult(total=sum(breakdown.values()), breakdown=breakdown)
