"""
podium.analyze.repetition - Repeated phrase detection.

Counts every 2- to 5-word window in the transcript. Windows of different
lengths are counted independently, so a repeated trigram also registers
the bigrams inside it.
"""

from __future__ import annotations

from collections import Counter

from podium.models import RepetitionResult


def ngrams(tokens: list[str], n: int) -> list[str]:
    return [" ".join(tokens[i : i + n]) for i in range(len(tokens) - n + 1)]


def detect_repetition(text: str, min_n: int = 2, max_n: int = 5) -> RepetitionResult:
    """Find phrases that occur more than once.

    Args:
        text: Transcript text; lower-cased and split on whitespace, punctuation kept
        min_n: Shortest phrase length in words
        max_n: Longest phrase length in words

    Returns:
        RepetitionResult whose score is the number of distinct repeated phrases
    """
    if not isinstance(text, str):
        return RepetitionResult()

    tokens = text.lower().split()
    counts: Counter[str] = Counter()
    for n in range(min_n, max_n + 1):
        counts.update(ngrams(tokens, n))

    phrases = frozenset(phrase for phrase, count in counts.items() if count > 1)
    return RepetitionResult(phrases=phrases, score=len(phrases))
